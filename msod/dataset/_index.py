import pandas as pd
import numpy as np
from typing import (
    Union,
    Tuple,
    Sequence,
)


def normalize_indices(
    index, loci_names: pd.Index, indiv_names: pd.Index
) -> Tuple[Union[slice, int, np.ndarray], Union[slice, int, np.ndarray]]:
    """Normalize the indices to return the loci slices, and individual slices

    Parameters
    ----------
    index : int, slice, str, array-like or tuple of these
        indexer passed to `Dataset.__getitem__`
    loci_names : pd.Index
        names of the loci
    indiv_names : pd.Index
        names of the individuals

    Returns
    -------
    Tuple
        (loci positions, individual positions)

    Raises
    ------
    ValueError
        if more than two dimensions are indexed
    """
    # deal with tuples of length 1
    if isinstance(index, tuple) and len(index) == 1:
        index = index[0]

    if isinstance(index, tuple):
        if len(index) > 2:
            raise ValueError(
                "data can only be sliced in loci (first dim) and individuals (second dim)"
            )

    loci_ax, indiv_ax = unpack_index(index)
    loci_ax = _normalize_index(loci_ax, loci_names)
    indiv_ax = _normalize_index(indiv_ax, indiv_names)
    return loci_ax, indiv_ax


# convert the indexer (integer, slice, string, array) to the actual positions
# reference: https://github.com/theislab/anndata/blob/566f8fe56f0dce52b7b3d0c96b51d22ea7498156/anndata/_core/index.py#L16
def _normalize_index(
    indexer: Union[
        slice,
        int,
        str,
        np.ndarray,
    ],
    index: pd.Index,
) -> Union[slice, int, np.ndarray]:  # ndarray of int
    """Convert the indexer (integer, slice, string, array) to the actual positions"""

    def name_idx(i):
        if isinstance(i, str):
            i = index.get_loc(i)
        return i

    if isinstance(indexer, slice):
        start = name_idx(indexer.start)
        stop = name_idx(indexer.stop)
        # string slices are inclusive
        if isinstance(indexer.stop, str):
            stop = None if stop is None else stop + 1
        return slice(start, stop, indexer.step)
    elif isinstance(indexer, (np.integer, int)):
        return indexer
    elif isinstance(indexer, str):
        return index.get_loc(indexer)  # int
    elif isinstance(indexer, (Sequence, np.ndarray, pd.Index, pd.Series)):
        if not isinstance(indexer, (np.ndarray, pd.Index)):
            indexer = np.asarray(indexer)
        if issubclass(indexer.dtype.type, np.integer):
            return np.asarray(indexer)
        elif issubclass(indexer.dtype.type, np.bool_):
            if indexer.shape != index.shape:
                raise IndexError(
                    f"Boolean index does not match Dataset's shape along this "
                    f"dimension. Boolean index has shape {indexer.shape} while "
                    f"Dataset index has shape {index.shape}."
                )
            return np.where(indexer)[0]
        else:  # indexer should be string array
            positions = index.get_indexer(indexer)
            if np.any(positions < 0):
                not_found = np.asarray(indexer)[positions < 0]
                raise KeyError(
                    f"Values {list(not_found)}, from {list(indexer)}, "
                    "are not valid loci / indiv names."
                )
            return positions
    else:
        raise IndexError(f"Unknown indexer {indexer!r} of type {type(indexer)}")


def unpack_index(index):
    if not isinstance(index, tuple):
        return index, slice(None)
    elif len(index) == 2:
        return index
    elif len(index) == 1:
        return index[0], slice(None)
    else:
        raise IndexError("invalid number of indices")
