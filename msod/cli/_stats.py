import msod
import numpy as np
from typing import List, Union
from ._utils import log_params


def spectrum(
    csv: str,
    out: str,
    alpha: float = msod.stats.DEFAULT_ALPHA,
    correction: str = "bonferroni",
    maf: float = 0.0,
    graph: str = msod.spatial.DEFAULT_GRAPH,
    weight: str = msod.spatial.DEFAULT_WEIGHT,
    exponent: float = 1.0,
    style: str = msod.spatial.DEFAULT_STYLE,
    autocor: str = msod.spatial.DEFAULT_AUTOCOR,
    k: int = None,
    dist: float = None,
    plot: bool = False,
):
    """
    Moran spectral outlier detection (MSOD): compute the power spectrum of each
    locus and flag loci whose spectrum deviates from the average spectrum.

    Parameters
    ----------
    csv : str
        Path to the input table. 1st - 2nd columns: coordinates. 3rd column: habitat.
        4th - nth columns: allele counts.
    out : str
        Output prefix. :code:`<out>.power.tsv` and :code:`<out>.msod.tsv` will be
        created, and :code:`<out>.msod.png` with :code:`--plot`.
    alpha : float
        Significance level after multiple testing correction (default 0.05)
    correction : str
        Multiple testing correction: bonferroni (default), holm, fdr_bh, ...
    maf : float
        Loci with minor allele frequency <= maf are removed (default 0, only
        monomorphic loci are removed)
    graph, weight, exponent, style, autocor, k, dist :
        Construction of the MEMs, see :code:`msod mem`
    plot : bool
        Whether to plot the power spectra and z-scores
    """
    log_params("spectrum", locals())
    dset = msod.io.read_csv(csv).filter_loci(maf=maf)
    msod.logger.info(f"{dset.n_loci} loci and {dset.n_indiv} individuals in the analysis")

    df_msod, df_power = msod.stats.msod(
        dset,
        alpha=alpha,
        method=correction,
        autocor=autocor,
        graph=graph,
        weight=weight,
        exponent=exponent,
        style=style,
        k=k,
        dist=dist,
    )
    msod.io.write_table(df_power, f"{out}.power.tsv")
    msod.io.write_table(df_msod, f"{out}.msod.tsv")

    if plot:
        import matplotlib.pyplot as plt

        outlier = df_msod.index[df_msod["OUTLIER"]].tolist()
        fig, axes = plt.subplots(figsize=(8.5, 3), dpi=150, ncols=2)
        msod.plot.cumulative_spectrum(df_power, loci=outlier, ax=axes[0])
        msod.plot.msod_zscore(df_msod, ax=axes[1])
        fig.tight_layout()
        fig.savefig(f"{out}.msod.png", bbox_inches="tight")
        plt.close(fig)
        msod.logger.info(f"Plots saved to {out}.msod.png")


def msr(
    csv: str,
    out: str,
    predictor: Union[str, List[str]] = "HABITAT",
    loci: str = None,
    n_perm: int = msod.stats.DEFAULT_N_PERM,
    seed: int = None,
    maf: float = 0.0,
    graph: str = msod.spatial.DEFAULT_GRAPH,
    weight: str = msod.spatial.DEFAULT_WEIGHT,
    exponent: float = 1.0,
    style: str = msod.spatial.DEFAULT_STYLE,
    autocor: str = msod.spatial.DEFAULT_AUTOCOR,
    k: int = None,
    dist: float = None,
):
    """
    Moran spectral randomization (MSR) test of the association between each locus
    and environmental predictors, accounting for spatial autocorrelation.
    p-values are not corrected for multiple testing.

    Parameters
    ----------
    csv : str
        Path to the input table. 1st - 2nd columns: coordinates. 3rd column: habitat.
        4th - nth columns: allele counts.
    out : str
        Output prefix. :code:`<out>.msr.tsv` will be created.
    predictor : Union[str, List[str]]
        Predictor column(s); HABITAT (default) refers to the 3rd column.
        Categorical predictors are converted to dummy variables.
    loci : str
        Path to a file with one locus name per line (e.g., outliers from
        :code:`msod spectrum`). By default all loci are tested.
    n_perm : int
        Number of permutations (default 199)
    seed : int
        Random seed
    maf : float
        Loci with minor allele frequency <= maf are removed
    graph, weight, exponent, style, autocor, k, dist :
        Construction of the MEMs, see :code:`msod mem`
    """
    log_params("msr", locals())
    if seed is not None:
        np.random.seed(seed)

    dset = msod.io.read_csv(csv).filter_loci(maf=maf)

    if loci is not None:
        with open(loci, "r") as f:
            filter_loci_list = [line.strip() for line in f if len(line.strip()) > 0]
        n_filter_loci = len(filter_loci_list)
        filter_loci_list = dset.loci.index[dset.loci.index.isin(filter_loci_list)]
        if len(filter_loci_list) < n_filter_loci:
            msod.logger.warning(
                f"{n_filter_loci - len(filter_loci_list)} loci in {loci} are not in the dataset"
            )
        dset = dset[filter_loci_list.values]
    msod.logger.info(f"{dset.n_loci} loci and {dset.n_indiv} individuals in the analysis")

    if isinstance(predictor, tuple):
        predictor = list(predictor)
    df_msr = msod.stats.msr(
        dset,
        predictor=predictor,
        n_perm=n_perm,
        autocor=autocor,
        graph=graph,
        weight=weight,
        exponent=exponent,
        style=style,
        k=k,
        dist=dist,
    )
    msod.io.write_table(df_msr, f"{out}.msr.tsv")
