"""
msod.spatial builds spatial weighting matrices and Moran eigenvector maps
from the coordinates of the sampled individuals.
"""

from ._graph import neighbor_graph, gabriel, delaunay, knn, distance_band
from ._mem import edge_weights, row_standardize, spatial_weights, mem, moran_i
from ._mem import DEFAULT_GRAPH, DEFAULT_WEIGHT, DEFAULT_STYLE, DEFAULT_AUTOCOR
