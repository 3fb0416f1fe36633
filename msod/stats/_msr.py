import numpy as np
from tqdm import tqdm
from typing import Tuple, Union

DEFAULT_N_PERM = 199


def msr_pvalue(
    r_resp: np.ndarray,
    r_pred: np.ndarray,
    n_perm: int = DEFAULT_N_PERM,
    chunk_size: int = 1000,
    return_null: bool = False,
) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
    """Moran spectral randomization (MSR) test

    For each response, test whether its alignment with the spatial correlation
    profile of a predictor could arise by chance. Surrogate predictors are
    generated by negating each MEM coefficient of the predictor independently
    with probability 0.5, which keeps its power spectrum unchanged.

    The statistic is |r_resp . r_pred|. The p-value is the fraction of
    (observed, permuted, ...) statistics that are >= the observed one, so it is
    within [1 / (n_perm + 1), 1] and ties count as extreme. No correction for
    multiple testing is applied.

    Parameters
    ----------
    r_resp : np.ndarray
        (n_resp, n_mem) correlation of each response (e.g., locus) with each MEM
    r_pred : np.ndarray
        (n_mem,) correlation of the predictor with each MEM, or
        (n_pred, n_mem) for several predictors, each tested independently
    n_perm : int
        number of permutations
    chunk_size : int
        number of permutations evaluated at a time
    return_null : bool
        whether to also return the permuted statistics

    Returns
    -------
    pval : np.ndarray
        (n_resp,) p-values for vector `r_pred`, (n_resp, n_pred) otherwise.
        Responses with missing correlations get NaN.
    null : np.ndarray
        only if `return_null`, permuted statistics of shape (n_resp, n_perm) for
        vector `r_pred`, (n_resp, n_pred, n_perm) otherwise
    """
    r_resp = np.asarray(r_resp, dtype=float)
    r_pred = np.asarray(r_pred, dtype=float)
    if r_resp.ndim == 1:
        r_resp = r_resp.reshape(1, -1)
    is_vec = r_pred.ndim == 1
    if is_vec:
        r_pred = r_pred.reshape(1, -1)
    assert r_resp.ndim == 2 and r_pred.ndim == 2
    n_mem = r_resp.shape[1]
    assert (
        r_pred.shape[1] == n_mem
    ), f"r_resp has {n_mem} MEMs while r_pred has {r_pred.shape[1]}"
    assert n_perm > 0, "n_perm must be positive"
    assert not np.any(np.isnan(r_pred)), "r_pred must not contain NaN"

    nan_resp = np.isnan(r_resp).any(axis=1)
    r_resp = np.where(nan_resp[:, None], 0.0, r_resp)

    obs = np.abs(np.einsum("rk,pk->rp", r_resp, r_pred))
    # the observed statistic counts as one of the (n_perm + 1) samples
    count = np.ones(obs.shape)
    null = [] if return_null else None

    for start in tqdm(range(0, n_perm, chunk_size), desc="msod.stats.msr_pvalue"):
        size = min(chunk_size, n_perm - start)
        signs = np.random.choice([-1.0, 1.0], size=(r_pred.shape[0], size, n_mem))
        perm = np.abs(np.einsum("rk,psk->rps", r_resp, r_pred[:, None, :] * signs))
        count += (perm >= obs[:, :, None]).sum(axis=2)
        if return_null:
            null.append(perm)

    pval = count / (n_perm + 1)
    pval[nan_resp, :] = np.nan
    if return_null:
        null = np.concatenate(null, axis=2)
        null[nan_resp, :, :] = np.nan

    if is_vec:
        pval = pval[:, 0]
        if return_null:
            null = null[:, 0, :]

    if return_null:
        return pval, null
    else:
        return pval
