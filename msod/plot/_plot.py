import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy import stats
from typing import List


def power_spectrum(
    df_power: pd.DataFrame,
    loci: List[str] = None,
    ax=None,
    cmap: str = "tab10",
):
    """Power spectrum by MEM rank

    The average spectrum across loci is plotted in black, and the spectrum of
    each locus in `loci` in color.

    Parameters
    ----------
    df_power : pd.DataFrame
        (n_loci, n_mem) power spectrum
    loci : List[str], optional
        loci to highlight, by default None
    ax : matplotlib.axes, optional
        by default None
    """
    if ax is None:
        ax = plt.gca()
    rank = np.arange(1, df_power.shape[1] + 1)
    ax.plot(rank, df_power.mean(axis=0).values, color="black", lw=1.5, label="Average")
    if loci is not None:
        cmap = plt.get_cmap(cmap)
        for i, locus in enumerate(loci):
            ax.plot(
                rank, df_power.loc[locus].values, color=cmap(i % 10), lw=1, label=locus
            )
        ax.legend(fontsize=8)
    ax.set_xlabel("MEM rank")
    ax.set_ylabel("$R^2$")
    return ax


def cumulative_spectrum(
    df_power: pd.DataFrame,
    loci: List[str] = None,
    ax=None,
):
    """Cumulative power spectrum by MEM rank

    Every locus is plotted in gray, loci in `loci` in red, and the average in black.
    """
    if ax is None:
        ax = plt.gca()
    rank = np.arange(1, df_power.shape[1] + 1)
    cum = df_power.cumsum(axis=1)
    for locus, row in cum.iterrows():
        ax.plot(rank, row.values, color="lightgray", lw=0.5)
    if loci is not None:
        for locus in loci:
            ax.plot(rank, cum.loc[locus].values, color="red", lw=1)
    ax.plot(rank, cum.mean(axis=0).values, color="black", lw=1.5)
    ax.set_xlabel("MEM rank")
    ax.set_ylabel("Cumulative $R^2$")
    return ax


def mem_map(
    coords: np.ndarray,
    values: np.ndarray,
    ax=None,
    s: float = 30,
    cmap: str = "RdBu_r",
):
    """Map of a variable (e.g., a MEM) over the sampling locations

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates
    values : np.ndarray
        (n_indiv,) values to color the individuals
    ax : matplotlib.axes, optional
        by default None
    s : float
        dot size
    cmap : str
        diverging color map, centered at 0
    """
    if ax is None:
        ax = plt.gca()
    coords = np.asarray(coords)
    values = np.asarray(values, dtype=float)
    assert len(coords) == len(values), "coords and values must have the same length"
    lim = np.abs(values).max()
    sc = ax.scatter(
        coords[:, 0], coords[:, 1], c=values, s=s, cmap=cmap, vmin=-lim, vmax=lim
    )
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    return sc


def msod_zscore(
    df_msod: pd.DataFrame,
    ax=None,
    s: float = 5,
    color: str = "#3b76af",
):
    """z-score of each locus from `msod.stats.spectrum_outlier`, with outliers
    in red and the smallest significant z-score as a dashed line

    Parameters
    ----------
    df_msod : pd.DataFrame
        output of `msod.stats.spectrum_outlier`
    ax : matplotlib.axes, optional
        by default None
    """
    if ax is None:
        ax = plt.gca()
    idx = np.arange(len(df_msod))
    outlier = df_msod["OUTLIER"].values.astype(bool)
    ax.scatter(idx[~outlier], df_msod["Z"].values[~outlier], s=s, c=color)
    ax.scatter(idx[outlier], df_msod["Z"].values[outlier], s=s * 3, c="red")
    if outlier.any():
        ax.axhline(y=df_msod["Z"].values[outlier].min(), color="r", ls="--")
    ax.set_xlabel("Locus index")
    ax.set_ylabel("z-score")
    return ax


def qq(pval, label=None, ax=None):
    """qq plot of p-values

    Parameters
    ----------
    pval : np.ndarray
        p-values, array-like
    ax : matplotlib.axes, optional
        by default None
    """
    if ax is None:
        ax = plt.gca()

    pval = np.array(pval, dtype=float)
    pval = np.sort(pval[~np.isnan(pval)])
    expected_pval = (stats.rankdata(pval) - 0.5) / len(pval)
    ax.scatter(-np.log10(expected_pval), -np.log10(pval), s=2, label=label)
    lim = max(-np.log10(expected_pval))
    ax.plot([0, lim], [0, lim], "r--")
    ax.set_xlabel(r"Expected -$\log_{10}(p)$")
    ax.set_ylabel(r"Observed -$\log_{10}(p)$")
    return ax
