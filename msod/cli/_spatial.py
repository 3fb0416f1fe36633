import msod
import numpy as np
import pandas as pd
from ._utils import log_params


def mem(
    csv: str,
    out: str,
    graph: str = msod.spatial.DEFAULT_GRAPH,
    weight: str = msod.spatial.DEFAULT_WEIGHT,
    exponent: float = 1.0,
    style: str = msod.spatial.DEFAULT_STYLE,
    autocor: str = msod.spatial.DEFAULT_AUTOCOR,
    k: int = None,
    dist: float = None,
):
    """
    Compute Moran eigenvector maps (MEM) from the coordinates of the individuals.

    Parameters
    ----------
    csv : str
        Path to the input table. 1st - 2nd columns: coordinates. 3rd column: habitat.
        4th - nth columns: allele counts.
    out : str
        Output prefix. :code:`<out>.mem.tsv` (MEM vectors, one individual per row)
        and :code:`<out>.eigenval.tsv` (eigenvalue and Moran's I of each MEM) will
        be created.
    graph : str
        Neighbor graph: gabriel (default), delaunay, knn, distance
    weight : str
        Edge weighting: binary, flin, fup (default), fdown
    exponent : float
        Exponent of the fup / fdown edge weighting (default 1)
    style : str
        W (row-standardized, default) or B (raw weights)
    autocor : str
        MEMs to keep: positive (default), negative, non-null
    k : int
        Number of neighbors for :code:`--graph knn`
    dist : float
        Distance threshold for :code:`--graph distance`
    """
    log_params("mem", locals())
    dset = msod.io.read_csv(csv)
    w = msod.spatial.spatial_weights(
        dset.coords,
        graph=graph,
        weight=weight,
        exponent=exponent,
        style=style,
        k=k,
        dist=dist,
    )
    df_mem, eigenval = msod.spatial.mem(w=w, autocor=autocor)
    df_mem.index = dset.indiv.index

    df_eigenval = pd.DataFrame(
        {
            "EIGENVAL": eigenval.values,
            "MORAN_I": np.atleast_1d(msod.spatial.moran_i(df_mem.values, w)),
        },
        index=eigenval.index,
    )
    msod.io.write_table(df_mem, f"{out}.mem.tsv")
    msod.io.write_table(df_eigenval, f"{out}.eigenval.tsv")
