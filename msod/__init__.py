from ._logging import logger
from .dataset import Dataset
from . import dataset, io, spatial, stats, simulate, plot, cli, utils
from .version import __version__

__all__ = [
    "dataset",
    "io",
    "spatial",
    "stats",
    "simulate",
    "plot",
    "cli",
    "utils",
    "Dataset",
]
