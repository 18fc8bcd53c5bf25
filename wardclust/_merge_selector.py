import numpy as np
from numba import njit
from typing import Sequence, Tuple
from ._dissimilarity import DissimilarityMatrix
from .exceptions import DegenerateMergeError


def best_merge(matrix: DissimilarityMatrix, cluster_ids: Sequence[int]) -> Tuple[int, int, float]:
    """
    Find the pair of live clusters with the lowest dissimilarity.

    Every pair of positions ``i < j`` in ``cluster_ids`` is visited in
    ascending order and the first pair reaching a new minimum is kept, so ties
    go to the pair found first. The scan stops at the first dissimilarity of
    exactly zero.

    Parameters
    ----------
    matrix : DissimilarityMatrix
        Current squared dissimilarities.
    cluster_ids : Sequence[int]
        Ids of the live clusters, in level order.

    Returns
    -------
    Tuple[int, int, float]
        Positions (pos_a, pos_b) within ``cluster_ids`` and their dissimilarity.
        The positions are ordered so that ``cluster_ids[pos_a] < cluster_ids[pos_b]``.
    """
    if len(cluster_ids) < 2:
        raise DegenerateMergeError(f"Cannot select a merge among {len(cluster_ids)} cluster(s)")

    ids = np.asarray(cluster_ids, dtype=np.int64)
    pos_a, pos_b, lowest = _scan_pairs(matrix.values, ids)

    # smaller id first
    if ids[pos_a] > ids[pos_b]:
        pos_a, pos_b = pos_b, pos_a

    return int(pos_a), int(pos_b), float(lowest)


@njit
def _scan_pairs(values: np.ndarray, ids: np.ndarray) -> Tuple[int, int, float]:
    """
    Exhaustive pairwise scan using Numba for performance.

    Parameters
    ----------
    values : np.ndarray
        Id-indexed square dissimilarity array.
    ids : np.ndarray
        Live cluster ids.

    Returns
    -------
    Tuple[int, int, float]
        Positions of the best pair and its dissimilarity.
    """
    lowest = np.inf
    best_i = 0
    best_j = 1

    for i in range(ids.shape[0]):
        a = ids[i]
        for j in range(i + 1, ids.shape[0]):
            b = ids[j]
            dist = values[a, b]

            if dist < lowest:
                best_i = i
                best_j = j
                lowest = dist
            if lowest == 0.0:
                return best_i, best_j, lowest

    return best_i, best_j, lowest
