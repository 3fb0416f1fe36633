import pandas as pd
import numpy as np
from typing import List, Tuple
from statsmodels.stats.multitest import multipletests
import msod

DEFAULT_ALPHA = 0.05


def convert_dummy(df: pd.DataFrame, cols: List[str] = None) -> pd.DataFrame:
    """
    Convert categorical variables to dummy variables for each column in df.

    Parameters
    ----------
    df : pd.DataFrame
        Dataframe to convert
    cols : List[str], optional
        Columns to convert, by default None (columns are selected automatically)

    Returns
    -------
    pd.DataFrame
        Converted dataframe
    """
    if cols is None:
        cols = [
            col for col in df.columns if not pd.api.types.is_numeric_dtype(df[col])
        ]

    added_cols = []
    df = df.copy()
    for col in cols:
        dummies = pd.get_dummies(df[col], drop_first=True, dtype=float)
        dummies.columns = [f"{col}_{s}" for s in dummies.columns]
        dummies.loc[df[col].isnull(), dummies.columns] = np.nan
        added_cols.extend(dummies.columns)
        df = pd.concat([df, dummies], axis=1)
        df = df.drop(columns=[col])
    if len(added_cols) > 0:
        msod.logger.info(
            f"Detected categorical columns: {','.join(cols)}, "
            f"and added dummy variables: {','.join(added_cols)}"
        )
    return df


def adjust_pvalue(
    pval: np.ndarray, alpha: float = DEFAULT_ALPHA, method: str = "bonferroni"
) -> Tuple[np.ndarray, np.ndarray]:
    """Correct p-values for multiple testing, NaN p-values are ignored

    Parameters
    ----------
    pval : np.ndarray
        p-values
    alpha : float
        family-wise error rate (or false discovery rate for FDR methods)
    method : str
        any method accepted by `statsmodels.stats.multitest.multipletests`,
        e.g., "bonferroni", "holm", "fdr_bh"

    Returns
    -------
    reject : np.ndarray
        boolean array, True for rejected hypotheses
    pval_adj : np.ndarray
        corrected p-values
    """
    pval = np.asarray(pval, dtype=float)
    reject = np.zeros(pval.shape, dtype=bool)
    pval_adj = np.full(pval.shape, np.nan)
    valid = ~np.isnan(pval)
    if valid.sum() > 0:
        reject[valid], pval_adj[valid], _, _ = multipletests(
            pval[valid], alpha=alpha, method=method
        )
    return reject, pval_adj
