import numpy as np
import warnings
from typing import Sequence
from ._dissimilarity import DissimilarityMatrix
from .exceptions import NumericInstabilityWarning, NumericOverflowError


def lance_williams_update(matrix: DissimilarityMatrix, a: int, b: int, a_count: int, b_count: int, ab_dist: float,
                          survivor_ids: Sequence[int], survivor_counts: Sequence[int]) -> np.ndarray:
    """
    Update the dissimilarities between a newly merged cluster and all survivors.

    For each surviving cluster C, Ward's recurrence on squared dissimilarities is

        d(AB, C) = [(|A|+|C|) d(A,C) + (|B|+|C|) d(B,C) - |C| d(A,B)] / (|A|+|B|+|C|)

    The merged cluster takes id ``min(a, b)`` and reuses its row; the other id
    is retired once every survivor is updated.

    Parameters
    ----------
    matrix : DissimilarityMatrix
        Squared dissimilarities, updated in place.
    a, b : int
        Ids of the two merged clusters.
    a_count, b_count : int
        Number of observations in each merged cluster.
    ab_dist : float
        Squared dissimilarity at which the two clusters merged.
    survivor_ids : Sequence[int]
        Ids of every cluster not involved in the merge.
    survivor_counts : Sequence[int]
        Number of observations in each survivor, aligned with ``survivor_ids``.

    Returns
    -------
    np.ndarray
        The new dissimilarities, aligned with ``survivor_ids``.

    Raises
    ------
    NumericOverflowError
        If any new dissimilarity is not finite.
    """
    merged_id, retired_id = min(a, b), max(a, b)
    cs = np.asarray(survivor_ids, dtype=np.intp)
    c_count = np.asarray(survivor_counts, dtype=np.float64)

    if cs.size == 0:
        matrix.retire(retired_id)
        return np.zeros(0)

    # read both rows before the merged row is overwritten
    ac_dist = matrix.values[a, cs].copy()
    bc_dist = matrix.values[b, cs].copy()

    with np.errstate(over='ignore', invalid='ignore'):
        updated = ((a_count + c_count) * ac_dist + (b_count + c_count) * bc_dist - c_count * ab_dist)
        updated = updated / (a_count + b_count + c_count)

    if not np.all(np.isfinite(updated)):
        overflowed = [int(c) for c in cs[~np.isfinite(updated)]]
        raise NumericOverflowError(f"Lance-Williams update overflowed when merging clusters {a} and {b} "
                                   f"(survivor(s) {overflowed})")

    negative = updated < 0
    if np.any(negative):
        warnings.warn(f"Lance-Williams update produced {int(np.sum(negative))} negative value(s) "
                      f"(lowest {updated[negative].min():.3e}) when merging clusters {a} and {b}; clamped to zero",
                      NumericInstabilityWarning)
        updated[negative] = 0.0

    matrix.values[merged_id, cs] = updated
    matrix.values[cs, merged_id] = updated
    matrix.retire(retired_id)

    return updated
