import numpy as np
import pandas as pd
from scipy import linalg
from scipy import spatial
from typing import Tuple
import msod
from ._graph import neighbor_graph

DEFAULT_GRAPH = "gabriel"
DEFAULT_WEIGHT = "fup"
DEFAULT_STYLE = "W"
DEFAULT_AUTOCOR = "positive"


def edge_weights(
    coords: np.ndarray, adj: np.ndarray, method: str = "binary", exponent: float = 1.0
) -> np.ndarray:
    """Weight the edges of a neighbor graph according to the edge length

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates
    adj : np.ndarray
        (n_indiv, n_indiv) boolean adjacency matrix
    method : str
        - "binary": 1 for every edge
        - "flin": 1 - d / dmax
        - "fup": 1 / d ** exponent
        - "fdown": 1 - (d / dmax) ** exponent
        where dmax is the longest edge in the graph
    exponent : float
        exponent used by "fup" and "fdown"

    Returns
    -------
    np.ndarray
        (n_indiv, n_indiv) weight matrix, 0 for non-neighbors
    """
    adj = np.asarray(adj, dtype=bool)
    d = spatial.distance.squareform(spatial.distance.pdist(coords))
    w = np.zeros(adj.shape)
    if not adj.any():
        return w
    d_edge = d[adj]
    dmax = d_edge.max()

    if method == "binary":
        w[adj] = 1.0
    elif method == "flin":
        w[adj] = 1 - d_edge / dmax
    elif method == "fup":
        assert np.all(d_edge > 0), "duplicated coordinates are connected in the graph"
        w[adj] = 1 / d_edge ** exponent
    elif method == "fdown":
        w[adj] = 1 - (d_edge / dmax) ** exponent
    else:
        raise ValueError(
            f"Unknown weighting method '{method}', "
            "must be one of binary, flin, fup, fdown"
        )
    return w


def row_standardize(w: np.ndarray) -> np.ndarray:
    """Divide each row by its sum, rows summing to zero are left unchanged"""
    row_sum = w.sum(axis=1, keepdims=True)
    row_sum[row_sum == 0] = 1.0
    return w / row_sum


def spatial_weights(
    coords: np.ndarray,
    graph: str = DEFAULT_GRAPH,
    weight: str = DEFAULT_WEIGHT,
    exponent: float = 1.0,
    style: str = DEFAULT_STYLE,
    k: int = None,
    dist: float = None,
) -> np.ndarray:
    """Build the spatial weighting matrix from coordinates

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates
    graph : str
        neighbor graph, see `msod.spatial.neighbor_graph`
    weight : str
        edge weighting, see `msod.spatial.edge_weights`
    exponent : float
        exponent of the edge weighting function
    style : str
        "W" for row-standardized weights, "B" for raw weights
    k : int, optional
        number of neighbors for graph="knn"
    dist : float, optional
        distance threshold for graph="distance"

    Returns
    -------
    np.ndarray
        (n_indiv, n_indiv) spatial weighting matrix
    """
    coords = np.asarray(coords, dtype=float)
    adj = neighbor_graph(coords, method=graph, k=k, dist=dist)
    w = edge_weights(coords, adj, method=weight, exponent=exponent)
    if style == "W":
        w = row_standardize(w)
    elif style != "B":
        raise ValueError(f"Unknown style '{style}', must be one of W, B")
    return w


def mem(
    coords: np.ndarray = None,
    w: np.ndarray = None,
    autocor: str = DEFAULT_AUTOCOR,
    tol: float = 1e-8,
    **kwargs,
) -> Tuple[pd.DataFrame, pd.Series]:
    """Compute Moran eigenvector maps (MEM)

    The weighting matrix is symmetrized as (W + W') / 2, double-centered and
    eigen-decomposed. Eigenvectors are scaled to have sum of squares n_indiv.

    Parameters
    ----------
    coords : np.ndarray, optional
        (n_indiv, 2) coordinates, used to build `w` with `spatial_weights`
        when `w` is not given
    w : np.ndarray, optional
        (n_indiv, n_indiv) spatial weighting matrix
    autocor : str
        which MEMs to keep, by sign of the eigenvalue:
        "positive" (default), "negative", or "non-null"
    tol : float
        eigenvalues with absolute value below `tol * max(|eigenvalue|)` are null
    **kwargs
        passed to `spatial_weights`

    Returns
    -------
    df_mem : pd.DataFrame
        (n_indiv, n_mem) MEM vectors, columns MEM1, MEM2, ... ordered by
        decreasing eigenvalue
    eigenval : pd.Series
        eigenvalue of each MEM
    """
    assert (coords is None) != (w is None), "exactly one of coords / w must be given"
    if w is None:
        w = spatial_weights(coords, **kwargs)
    w = np.asarray(w, dtype=float)
    n = w.shape[0]
    assert w.shape == (n, n), "`w` must be a square matrix"

    w_sym = (w + w.T) / 2
    h = np.eye(n) - np.ones((n, n)) / n
    omega = h @ w_sym @ h

    val, vec = linalg.eigh(omega)
    order = np.argsort(val)[::-1]
    val, vec = val[order], vec[:, order]

    thresh = tol * np.max(np.abs(val))
    if autocor == "positive":
        keep = val > thresh
    elif autocor == "negative":
        keep = val < -thresh
    elif autocor == "non-null":
        keep = np.abs(val) > thresh
    else:
        raise ValueError(
            f"Unknown autocor '{autocor}', must be one of positive, negative, non-null"
        )
    val, vec = val[keep], vec[:, keep]
    vec = vec * np.sqrt(n)

    names = [f"MEM{i + 1}" for i in range(len(val))]
    msod.logger.info(f"{len(val)} MEMs with {autocor} eigenvalues retained")
    return (
        pd.DataFrame(vec, columns=names),
        pd.Series(val, index=names, name="EIGENVAL"),
    )


def moran_i(x: np.ndarray, w: np.ndarray) -> np.ndarray:
    """Moran's I of each column of `x`

    Parameters
    ----------
    x : np.ndarray
        (n_indiv,) vector or (n_indiv, n_var) matrix
    w : np.ndarray
        (n_indiv, n_indiv) spatial weighting matrix

    Returns
    -------
    np.ndarray
        Moran's I, scalar for vector input
    """
    x = np.asarray(x, dtype=float)
    is_vec = x.ndim == 1
    if is_vec:
        x = x.reshape(-1, 1)
    n = x.shape[0]
    xc = x - x.mean(axis=0)
    s0 = w.sum()
    res = n / s0 * (xc * (w @ xc)).sum(axis=0) / (xc ** 2).sum(axis=0)
    return res[0] if is_vec else res
