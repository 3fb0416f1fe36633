#!/usr/bin/env python

import fire
from ._utils import log_params, download_example_data
from ._spatial import mem
from ._stats import spectrum, msr
from ._simulate import simulate


def cli():
    """
    Entry point for the msod command line interface.
    """
    fire.Fire()


if __name__ == "__main__":
    fire.Fire()
