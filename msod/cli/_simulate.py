import msod
import numpy as np
from ._utils import log_params


def simulate(
    out: str,
    n_side: int = 12,
    n_loci: int = 100,
    n_selected: int = 5,
    habitat_freq: float = 2.0,
    neutral_freq: float = 1.0,
    s: float = 0.8,
    seed: int = None,
):
    """
    Simulate genotypes of individuals on a landscape with two habitats, and write
    them in the input format of the other commands.

    Parameters
    ----------
    out : str
        Output prefix. :code:`<out>.csv` and :code:`<out>.loci_info` (whether
        each locus is under selection) will be created.
    n_side : int
        Individuals are placed on a n_side x n_side grid (default 12)
    n_loci : int
        Number of loci (default 100)
    n_selected : int
        Number of loci under habitat selection (default 5)
    habitat_freq : float
        Spatial frequency of the habitat patches
    neutral_freq : float
        Spatial frequency of the neutral allele frequency surfaces
    s : float
        Allele frequency difference between habitats at selected loci
    seed : int
        Random seed
    """
    log_params("simulate", locals())
    if seed is not None:
        np.random.seed(seed)

    dset = msod.simulate.spatial_geno(
        n_side=n_side,
        n_loci=n_loci,
        n_selected=n_selected,
        habitat_freq=habitat_freq,
        neutral_freq=neutral_freq,
        s=s,
    )
    msod.io.write_csv(dset, f"{out}.csv")
    msod.io.write_table(dset.loci, f"{out}.loci_info")
    msod.logger.info(f"Output written to {out}.csv")
