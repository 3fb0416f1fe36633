import numpy as np
from scipy import spatial
import warnings
import msod


def _delaunay_edges(coords: np.ndarray) -> np.ndarray:
    """unique (i, j) pairs with i < j connected in the Delaunay triangulation"""
    tri = spatial.Delaunay(coords)
    edges = set()
    for simplex in tri.simplices:
        for a in range(len(simplex)):
            for b in range(a + 1, len(simplex)):
                i, j = sorted((simplex[a], simplex[b]))
                edges.add((i, j))
    return np.array(sorted(edges), dtype=int).reshape(-1, 2)


def _edges_to_adj(edges: np.ndarray, n: int) -> np.ndarray:
    adj = np.zeros((n, n), dtype=bool)
    adj[edges[:, 0], edges[:, 1]] = True
    adj[edges[:, 1], edges[:, 0]] = True
    return adj


def delaunay(coords: np.ndarray) -> np.ndarray:
    """Neighbor graph from Delaunay triangulation

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates

    Returns
    -------
    np.ndarray
        (n_indiv, n_indiv) symmetric boolean adjacency matrix
    """
    return _edges_to_adj(_delaunay_edges(coords), len(coords))


def gabriel(coords: np.ndarray) -> np.ndarray:
    """Neighbor graph from Gabriel graph

    Two points i, j are neighbors if no other point lies strictly inside the
    circle with diameter (i, j). The Gabriel graph is a subgraph of the Delaunay
    triangulation, so only Delaunay edges are checked.

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates

    Returns
    -------
    np.ndarray
        (n_indiv, n_indiv) symmetric boolean adjacency matrix
    """
    edges = _delaunay_edges(coords)
    dist2 = spatial.distance.squareform(spatial.distance.pdist(coords, "sqeuclidean"))
    keep = np.ones(len(edges), dtype=bool)
    for e, (i, j) in enumerate(edges):
        # point k is inside the circle when d_ik^2 + d_jk^2 < d_ij^2
        inside = dist2[i, :] + dist2[j, :] < dist2[i, j]
        inside[[i, j]] = False
        keep[e] = not np.any(inside)
    return _edges_to_adj(edges[keep], len(coords))


def knn(coords: np.ndarray, k: int) -> np.ndarray:
    """Neighbor graph connecting each point to its `k` nearest neighbors,
    symmetrized (i ~ j if j is among the k nearest of i or vice versa)"""
    n = len(coords)
    assert 0 < k < n, f"k must be in [1, {n - 1}]"
    tree = spatial.cKDTree(coords)
    _, idx = tree.query(coords, k=k + 1)
    adj = np.zeros((n, n), dtype=bool)
    for i in range(n):
        nbr = [j for j in idx[i] if j != i][0:k]
        adj[i, nbr] = True
    return adj | adj.T


def distance_band(coords: np.ndarray, dist: float) -> np.ndarray:
    """Neighbor graph connecting all pairs of points within distance `dist`"""
    assert dist > 0, "dist must be positive"
    tree = spatial.cKDTree(coords)
    pairs = np.array(sorted(tree.query_pairs(r=dist)), dtype=int).reshape(-1, 2)
    return _edges_to_adj(pairs, len(coords))


def neighbor_graph(
    coords: np.ndarray, method: str = "gabriel", k: int = None, dist: float = None
) -> np.ndarray:
    """Build a spatial neighbor graph

    Parameters
    ----------
    coords : np.ndarray
        (n_indiv, 2) coordinates
    method : str
        one of "gabriel" (default), "delaunay", "knn", "distance"
    k : int, optional
        number of neighbors, required for method="knn"
    dist : float, optional
        distance threshold, required for method="distance"

    Returns
    -------
    np.ndarray
        (n_indiv, n_indiv) symmetric boolean adjacency matrix
    """
    coords = np.asarray(coords, dtype=float)
    assert coords.ndim == 2 and coords.shape[1] == 2, "coords must be (n_indiv, 2)"

    if method == "gabriel":
        adj = gabriel(coords)
    elif method == "delaunay":
        adj = delaunay(coords)
    elif method == "knn":
        assert k is not None, "`k` must be specified for method='knn'"
        adj = knn(coords, k=k)
    elif method == "distance":
        assert dist is not None, "`dist` must be specified for method='distance'"
        adj = distance_band(coords, dist=dist)
    else:
        raise ValueError(
            f"Unknown neighbor graph method '{method}', "
            "must be one of gabriel, delaunay, knn, distance"
        )

    n_isolated = int((adj.sum(axis=1) == 0).sum())
    if n_isolated > 0:
        warnings.warn(f"{n_isolated} individuals have no neighbors in the graph")
    msod.logger.info(
        f"Neighbor graph ({method}): {len(coords)} individuals, "
        f"{int(adj.sum() // 2)} edges"
    )
    return adj
