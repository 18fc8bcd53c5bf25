"""
Brute-force Ward clustering.

Each candidate merge is scored by recomputing the error sum of squares of the
raw observations, with no dissimilarity matrix and no recurrence. It is slow
(every pair is rescored at every step) and exists only to cross-check the
incremental algorithm in :mod:`wardclust.clusterer`.
"""

import numpy as np
from typing import Any, Dict, List, Sequence
from ._primitives import gather, error_sum_of_squares
from .clusterer import ClusterNode, Dendrogram, _validate_observations
from .exceptions import DegenerateMergeError


def reference_best_merge(data: np.ndarray, clusters: Sequence[Sequence[int]]) -> Dict[str, Any]:
    """
    Find the pair of clusters whose union increases the error sum of squares the least.

    Pairs are visited in the same order as the incremental selector, ties go to
    the pair found first and a zero increase stops the scan.

    Parameters
    ----------
    data : np.ndarray
        Observation matrix.
    clusters : Sequence[Sequence[int]]
        Member indices of every live cluster, in level order.

    Returns
    -------
    Dict[str, Any]
        ``a`` and ``b``: positions of the best pair (``a < b``);
        ``increase``: ESS(A u B) - ESS(A) - ESS(B) for that pair.
    """
    if len(clusters) < 2:
        raise DegenerateMergeError(f"Cannot select a merge among {len(clusters)} cluster(s)")

    groups = [gather(data, members) for members in clusters]
    own_ess = [error_sum_of_squares(group) for group in groups]

    best = {'a': 0, 'b': 1, 'increase': np.inf}

    for i in range(len(groups)):
        for j in range(i + 1, len(groups)):
            combined = np.concatenate([groups[i], groups[j]])
            increase = error_sum_of_squares(combined) - own_ess[i] - own_ess[j]

            if best['increase'] > increase:
                best = {'a': i, 'b': j, 'increase': increase}
            if best['increase'] == 0:
                return best

    return best


def reference_clustering(data: Any) -> Dendrogram:
    """
    Build the Ward dendrogram by brute force.

    Merge heights are reported as ``sqrt(2 * increase)``, which is the height
    the Lance-Williams recurrence yields on squared distances.

    Parameters
    ----------
    data : array-like
        Observation matrix with shape (n_observations, n_features).

    Returns
    -------
    Dendrogram
        Same layout as :func:`wardclust.clusterer.perform_clustering`.
    """
    observations = _validate_observations(data)

    clusters: List[ClusterNode] = [ClusterNode.leaf(i) for i in range(observations.shape[0])]
    levels = [clusters]

    while len(clusters) > 1:
        merge = reference_best_merge(observations, [each_cluster.instances for each_cluster in clusters])
        increase = max(merge['increase'], 0.0)

        new_node = ClusterNode.merge(clusters[merge['a']], clusters[merge['b']], float(np.sqrt(2.0 * increase)))
        survivors = [each_cluster for i, each_cluster in enumerate(clusters) if i != merge['a'] and i != merge['b']]

        clusters = [new_node] + survivors
        levels.append(clusters)

    return Dendrogram(levels)
