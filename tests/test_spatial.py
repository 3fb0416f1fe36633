import numpy as np
import pytest
from scipy import spatial
import msod


def _grid_coords(n_side=6, jitter=0.2):
    grid = np.arange(n_side, dtype=float)
    coords = np.array([(x, y) for y in grid for x in grid])
    return coords + np.random.uniform(-jitter, jitter, size=coords.shape)


def test_graph():
    np.random.seed(1234)
    coords = _grid_coords()
    n = len(coords)

    adj_delaunay = msod.spatial.neighbor_graph(coords, method="delaunay")
    adj_gabriel = msod.spatial.neighbor_graph(coords, method="gabriel")
    for adj in [adj_delaunay, adj_gabriel]:
        assert adj.shape == (n, n)
        assert np.all(adj == adj.T)
        assert not np.any(np.diag(adj))
    # Gabriel graph is a subgraph of the Delaunay triangulation
    assert np.all(adj_delaunay[adj_gabriel])
    assert adj_gabriel.sum() < adj_delaunay.sum()

    # no point lies inside the circle with diameter of any Gabriel edge
    dist2 = spatial.distance.squareform(spatial.distance.pdist(coords, "sqeuclidean"))
    for i, j in zip(*np.where(np.triu(adj_gabriel))):
        inside = dist2[i] + dist2[j] < dist2[i, j]
        inside[[i, j]] = False
        assert not inside.any()

    adj_knn = msod.spatial.neighbor_graph(coords, method="knn", k=3)
    assert np.all(adj_knn == adj_knn.T)
    assert np.all(adj_knn.sum(axis=1) >= 3)

    adj_dist = msod.spatial.neighbor_graph(coords, method="distance", dist=1.5)
    d = spatial.distance.squareform(spatial.distance.pdist(coords))
    expected = (d <= 1.5) & ~np.eye(n, dtype=bool)
    assert np.all(adj_dist == expected)

    with pytest.raises(ValueError):
        msod.spatial.neighbor_graph(coords, method="unknown")


def test_weights():
    np.random.seed(1234)
    coords = _grid_coords()
    adj = msod.spatial.neighbor_graph(coords, method="delaunay")
    d = spatial.distance.squareform(spatial.distance.pdist(coords))

    w = msod.spatial.edge_weights(coords, adj, method="binary")
    assert np.all(w[adj] == 1) and np.all(w[~adj] == 0)

    w = msod.spatial.edge_weights(coords, adj, method="fup", exponent=2)
    assert np.allclose(w[adj], 1 / d[adj] ** 2)

    w = msod.spatial.edge_weights(coords, adj, method="flin")
    assert np.isclose(w[adj].min(), 0) and np.all(w[adj] < 1)

    w = msod.spatial.edge_weights(coords, adj, method="fdown", exponent=2)
    assert np.allclose(w[adj], 1 - (d[adj] / d[adj].max()) ** 2)

    with pytest.raises(ValueError):
        msod.spatial.edge_weights(coords, adj, method="unknown")

    w = msod.spatial.spatial_weights(coords, graph="gabriel", weight="fup", style="W")
    assert np.allclose(w.sum(axis=1), 1)
    w = msod.spatial.spatial_weights(coords, graph="gabriel", weight="binary", style="B")
    assert np.all(w == msod.spatial.neighbor_graph(coords, method="gabriel"))


def test_mem():
    np.random.seed(1234)
    coords = _grid_coords()
    n = len(coords)
    w = msod.spatial.spatial_weights(coords)

    df_mem, eigenval = msod.spatial.mem(w=w, autocor="non-null")
    vec = df_mem.values
    assert list(df_mem.columns) == list(eigenval.index)
    assert df_mem.columns[0] == "MEM1"
    # ordered by decreasing eigenvalue
    assert np.all(np.diff(eigenval.values) <= 0)
    # centered, orthogonal, sum of squares n
    assert np.allclose(vec.mean(axis=0), 0, atol=1e-8)
    assert np.allclose(vec.T @ vec, n * np.eye(vec.shape[1]), atol=1e-6)
    # Moran's I of each MEM is proportional to its eigenvalue
    assert np.allclose(
        msod.spatial.moran_i(vec, w), eigenval.values * n / w.sum(), atol=1e-8
    )

    df_pos, eigenval_pos = msod.spatial.mem(coords=coords)
    df_neg, eigenval_neg = msod.spatial.mem(coords=coords, autocor="negative")
    assert np.all(eigenval_pos > 0) and np.all(eigenval_neg < 0)
    assert df_pos.shape[1] + df_neg.shape[1] == df_mem.shape[1]
    assert df_mem.shape[1] <= n - 1
    # first MEM is the broadest positively autocorrelated pattern
    assert msod.spatial.moran_i(df_pos["MEM1"].values, w) > 0.5

    with pytest.raises(ValueError):
        msod.spatial.mem(coords=coords, autocor="all")


def test_moran_i():
    np.random.seed(1234)
    coords = _grid_coords()
    w = msod.spatial.spatial_weights(coords, weight="binary")
    # smooth gradient is positively autocorrelated
    assert msod.spatial.moran_i(coords[:, 0], w) > 0.5
    # checkerboard pattern is negatively autocorrelated
    checker = (np.round(coords[:, 0]) + np.round(coords[:, 1])) % 2
    assert msod.spatial.moran_i(checker, w) < 0
