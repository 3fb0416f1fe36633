import numpy as np
import pandas as pd
from scipy import stats
from typing import List, Tuple, Union
import warnings
from .._logging import logger
from ..dataset import Dataset, impute_with_mean
from .. import spatial
from ._misc import convert_dummy, adjust_pvalue, DEFAULT_ALPHA
from ._msr import msr_pvalue, DEFAULT_N_PERM


def _standardize(mat: np.ndarray) -> np.ndarray:
    """center and scale each column to variance 1; constant columns become NaN"""
    mat = mat - mat.mean(axis=0)
    std = np.sqrt((mat ** 2).mean(axis=0))
    with np.errstate(divide="ignore", invalid="ignore"):
        mat = mat / std
    mat[:, std == 0] = np.nan
    return mat


def correlation(x: np.ndarray, df_mem: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
    """Pearson correlation between each column of `x` and each MEM

    Parameters
    ----------
    x : np.ndarray
        (n_indiv, n_var) matrix, must not contain missing values
    df_mem : pd.DataFrame or np.ndarray
        (n_indiv, n_mem) MEM vectors

    Returns
    -------
    np.ndarray
        (n_var, n_mem) correlation, NaN rows for constant columns of `x`
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    mem = np.asarray(df_mem, dtype=float)
    n_indiv = x.shape[0]
    assert (
        mem.shape[0] == n_indiv
    ), f"x has {n_indiv} individuals while MEM has {mem.shape[0]}"
    assert not np.isnan(x).any(), "x must not contain missing values"
    return np.dot(_standardize(x).T, _standardize(mem)) / n_indiv


def mem_correlation(
    geno: np.ndarray,
    df_mem: Union[pd.DataFrame, np.ndarray],
    loci: pd.Index = None,
) -> pd.DataFrame:
    """Correlation of each locus with each MEM

    Missing genotypes are imputed with the locus mean. Monomorphic loci give
    rows of NaN.

    Parameters
    ----------
    geno : np.ndarray
        (n_loci, n_indiv) genotype matrix
    df_mem : pd.DataFrame or np.ndarray
        (n_indiv, n_mem) MEM vectors
    loci : pd.Index, optional
        names of the loci

    Returns
    -------
    pd.DataFrame
        (n_loci, n_mem) correlation
    """
    geno = impute_with_mean(np.asarray(geno, dtype=float))
    r = correlation(geno.T, df_mem)
    n_mono = int(np.isnan(r).any(axis=1).sum())
    if n_mono > 0:
        warnings.warn(f"{n_mono} monomorphic loci have undefined correlation with MEMs")

    if isinstance(df_mem, pd.DataFrame):
        columns = df_mem.columns
    else:
        columns = [f"MEM{i + 1}" for i in range(r.shape[1])]
    if loci is None:
        loci = pd.RangeIndex(stop=r.shape[0])
    return pd.DataFrame(r, index=loci, columns=columns)


def power_spectrum(r: pd.DataFrame) -> pd.DataFrame:
    """Power spectrum: squared correlation of each locus with each MEM"""
    return r ** 2


def spectrum_outlier(
    df_power: pd.DataFrame,
    alpha: float = DEFAULT_ALPHA,
    method: str = "bonferroni",
) -> pd.DataFrame:
    """Flag loci whose power spectrum deviates from the average spectrum

    For each locus, the sum of squared deviations of its power spectrum from the
    average power spectrum (across loci) is standardized to a z-score, and a
    one-sided p-value is obtained from the standard normal distribution.

    Parameters
    ----------
    df_power : pd.DataFrame
        (n_loci, n_mem) power spectrum
    alpha : float
        significance level after multiple testing correction
    method : str
        multiple testing correction, see `msod.stats.adjust_pvalue`

    Returns
    -------
    pd.DataFrame
        indexed by loci, with columns DEV, Z, P, P_ADJ, OUTLIER.
        Loci with undefined spectrum have NaN statistics and are not outliers.
    """
    power = df_power.values
    valid = ~np.isnan(power).any(axis=1)
    assert valid.sum() > 1, "at least 2 loci with defined power spectrum are needed"

    mean_spectrum = power[valid].mean(axis=0)
    dev = np.full(len(power), np.nan)
    dev[valid] = ((power[valid] - mean_spectrum) ** 2).sum(axis=1)

    zsc = np.full(len(power), np.nan)
    zsc[valid] = (dev[valid] - dev[valid].mean()) / dev[valid].std(ddof=1)
    pval = stats.norm.sf(zsc)
    reject, pval_adj = adjust_pvalue(pval, alpha=alpha, method=method)
    logger.info(
        f"{reject.sum()}/{valid.sum()} loci detected as outliers "
        f"({method}, alpha={alpha})"
    )
    return pd.DataFrame(
        {"DEV": dev, "Z": zsc, "P": pval, "P_ADJ": pval_adj, "OUTLIER": reject},
        index=df_power.index,
    )


def msod(
    dset: Dataset = None,
    geno: np.ndarray = None,
    coords: np.ndarray = None,
    df_mem: pd.DataFrame = None,
    alpha: float = DEFAULT_ALPHA,
    method: str = "bonferroni",
    autocor: str = spatial.DEFAULT_AUTOCOR,
    **kwargs,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Moran spectral outlier detection (MSOD)

    Either `dset` or (`geno`, `coords`) should be provided. MEMs are computed
    from the coordinates unless `df_mem` is given.

    Parameters
    ----------
    dset : msod.Dataset, optional
        dataset with coordinates
    geno : np.ndarray, optional
        (n_loci, n_indiv) genotype matrix
    coords : np.ndarray, optional
        (n_indiv, 2) coordinates
    df_mem : pd.DataFrame, optional
        precomputed MEM vectors
    alpha : float
        significance level after multiple testing correction
    method : str
        multiple testing correction
    autocor : str
        which MEMs to use, see `msod.spatial.mem`
    **kwargs
        passed to `msod.spatial.spatial_weights`

    Returns
    -------
    df_msod : pd.DataFrame
        per-locus outlier statistics, see `spectrum_outlier`
    df_power : pd.DataFrame
        (n_loci, n_mem) power spectrum
    """
    if dset is not None:
        assert (geno is None) and (coords is None), "specify either dset or geno/coords"
        geno, loci = dset.geno, dset.loci.index
        if df_mem is None:
            coords = dset.coords
    else:
        assert geno is not None, "`geno` must be provided when `dset` is None"
        loci = None

    if df_mem is None:
        assert coords is not None, "`coords` or `df_mem` must be provided"
        df_mem, _ = spatial.mem(coords=coords, autocor=autocor, **kwargs)

    df_power = power_spectrum(mem_correlation(geno, df_mem, loci=loci))
    df_msod = spectrum_outlier(df_power, alpha=alpha, method=method)
    return df_msod, df_power


def msr(
    dset: Dataset,
    predictor: Union[str, List[str]] = "HABITAT",
    loci: Union[List[str], np.ndarray] = None,
    df_mem: pd.DataFrame = None,
    n_perm: int = DEFAULT_N_PERM,
    autocor: str = spatial.DEFAULT_AUTOCOR,
    **kwargs,
) -> pd.DataFrame:
    """Moran spectral randomization (MSR) test of loci against predictors

    Categorical predictors are converted to dummy variables. Each locus is
    tested against each (dummy) predictor with `msr_pvalue`. For comparison,
    the Pearson correlation test ignoring the spatial structure is also
    reported. p-values are not corrected for multiple testing.

    Parameters
    ----------
    dset : msod.Dataset
        dataset with coordinates and the predictor columns in `dset.indiv`
    predictor : str or List[str]
        column(s) in `dset.indiv`
    loci : list, optional
        names of the loci to test, by default all loci
    df_mem : pd.DataFrame, optional
        precomputed MEM vectors
    n_perm : int
        number of permutations
    autocor : str
        which MEMs to use, see `msod.spatial.mem`
    **kwargs
        passed to `msod.spatial.spatial_weights`

    Returns
    -------
    pd.DataFrame
        indexed by loci, with columns R (correlation with the predictor),
        P_COR (correlation test) and P_MSR. With several predictors, columns
        are suffixed by "@<predictor>".

    Raises
    ------
    ValueError
        if a predictor has fewer than 2 distinct values
    """
    if isinstance(predictor, str):
        predictor = [predictor]
    if loci is not None:
        dset = dset[np.asarray(loci)]

    for col in predictor:
        if dset.indiv[col].nunique() < 2:
            raise ValueError(
                f"predictor '{col}' must have at least 2 distinct values, "
                f"got {dset.indiv[col].dropna().unique().tolist()}"
            )
    df_pred = convert_dummy(dset.indiv[predictor])
    assert (
        not df_pred.isna().any().any()
    ), "predictors must not contain missing values"
    pred_cols = list(df_pred.columns)

    if df_mem is None:
        df_mem, _ = spatial.mem(coords=dset.coords, autocor=autocor, **kwargs)

    r_pred = correlation(df_pred.values, df_mem)
    assert not np.isnan(r_pred).any(), "predictors must not be constant"
    r_resp = mem_correlation(dset.geno, df_mem, loci=dset.loci.index)

    logger.info(
        f"MSR test of {dset.n_loci} loci against {len(pred_cols)} predictors "
        f"with {n_perm} permutations"
    )
    p_msr = msr_pvalue(r_resp.values, r_pred, n_perm=n_perm)

    geno = impute_with_mean(dset.geno)
    dict_rls = {}
    for i_pred, col in enumerate(pred_cols):
        suffix = "" if len(pred_cols) == 1 else f"@{col}"
        r = np.full(dset.n_loci, np.nan)
        p_cor = np.full(dset.n_loci, np.nan)
        for i in range(dset.n_loci):
            if np.std(geno[i]) > 0:
                r[i], p_cor[i] = stats.pearsonr(geno[i], df_pred[col].values)
        dict_rls["R" + suffix] = r
        dict_rls["P_COR" + suffix] = p_cor
        dict_rls["P_MSR" + suffix] = p_msr[:, i_pred]
    return pd.DataFrame(dict_rls, index=dset.loci.index)
