"""
Ward hierarchical clustering module.

This module builds the full merge history (dendrogram) of a set of numeric
observations with Ward's minimum-variance criterion on squared Euclidean
dissimilarities, and provides utilities to cut the resulting tree into flat
clusters.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Tuple, Optional, Sequence, Iterator, Any
from ._dissimilarity import DissimilarityMatrix
from ._merge_selector import best_merge
from ._lance_williams import lance_williams_update
from ._primitives import pairwise_distances
from .exceptions import InvalidInputError
from .plotting import plot_dendrogram


@dataclass(frozen=True)
class ClusterNode:
    """
    One cluster at one point of the merge history.

    Attributes
    ----------
    id : int
        Observation index for a leaf. A merged node takes the smaller id of its
        two children, which lets it reuse that child's dissimilarity row.
    instances : Tuple[int, ...]
        Indices of the observations in this cluster.
    children : Tuple[ClusterNode, ...]
        Empty for a leaf, otherwise the two merged clusters (smaller id first).
    dist : float
        Height at which the children were joined; 0.0 for a leaf.
    """
    id: int
    instances: Tuple[int, ...]
    children: Tuple['ClusterNode', ...] = ()
    dist: float = 0.0

    @classmethod
    def leaf(cls, index: int) -> 'ClusterNode':
        return cls(index, (index,))

    @classmethod
    def merge(cls, a: 'ClusterNode', b: 'ClusterNode', dist: float) -> 'ClusterNode':
        if a.id > b.id:
            a, b = b, a
        return cls(a.id, a.instances + b.instances, (a, b), dist)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def size(self) -> int:
        return len(self.instances)


class Dendrogram:
    """
    Ordered sequence of levels, from the leaves to the root.

    Level ``k`` partitions all observations into ``n - k`` clusters. Every
    level after the first starts with the cluster formed at that step,
    followed by the untouched clusters of the previous level.
    """

    def __init__(self, levels: Sequence[Sequence[ClusterNode]]):
        if not levels or not levels[0]:
            raise ValueError("A dendrogram needs at least one level with one leaf")
        self._levels = tuple(tuple(level) for level in levels)

    @property
    def levels(self) -> Tuple[Tuple[ClusterNode, ...], ...]:
        return self._levels

    @property
    def n_observations(self) -> int:
        return len(self._levels[0])

    @property
    def root(self) -> ClusterNode:
        return self._levels[-1][0]

    @property
    def merges(self) -> List[ClusterNode]:
        """Cluster formed at each merge step, in merge order."""
        return [level[0] for level in self._levels[1:]]

    @property
    def heights(self) -> np.ndarray:
        return np.array([node.dist for node in self.merges], dtype=np.float64)

    def level_with(self, n_clusters: int) -> Tuple[ClusterNode, ...]:
        """
        Return the level that partitions the observations into ``n_clusters`` clusters.
        """
        n = self.n_observations
        if not 1 <= n_clusters <= n:
            raise ValueError(f"n_clusters must be between 1 and {n}, got {n_clusters}")
        return self._levels[n - n_clusters]

    def to_linkage_matrix(self) -> np.ndarray:
        """
        Convert the merge history to a scipy linkage matrix.

        Returns
        -------
        np.ndarray
            Array with shape (n - 1, 4). Row ``k`` holds the two joined cluster
            indices, the merge height and the size of the new cluster. Leaves are
            numbered ``0..n-1`` and the cluster formed at step ``k`` is ``n + k``,
            as in `scipy.cluster.hierarchy.linkage <https://docs.scipy.org/doc/scipy/reference/generated/scipy.cluster.hierarchy.linkage.html>`_.
        """
        n = self.n_observations
        z = np.zeros((n - 1, 4), dtype=np.float64)

        # a cluster id is reused across merges, but never with the same size
        index = {(leaf.id, 1): leaf.id for leaf in self._levels[0]}

        for k, node in enumerate(self.merges):
            left, right = node.children
            i = index[(left.id, left.size)]
            j = index[(right.id, right.size)]
            z[k] = [min(i, j), max(i, j), node.dist, node.size]
            index[(node.id, node.size)] = n + k

        return z

    def __len__(self) -> int:
        return len(self._levels)

    def __getitem__(self, level: int) -> Tuple[ClusterNode, ...]:
        return self._levels[level]

    def __iter__(self) -> Iterator[Tuple[ClusterNode, ...]]:
        return iter(self._levels)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Dendrogram):
            return NotImplemented
        return self._levels == other._levels

    def __repr__(self) -> str:
        return f"Dendrogram(n_observations={self.n_observations}, levels={len(self)})"


class Cluster:
    """
    Container for a flat cluster cut from a dendrogram.

    Attributes
    ----------
    cluster_id : int
        Cluster number, starting from 1.
    indices_of_members : np.ndarray
        Original indices of cluster members.
    number_of_members : int
        Number of members in cluster.
    height : float
        Merge height of the cluster's node; 0.0 for a singleton.
    best_representative_member : int
        Index of the member with the lowest summed distance to the other members.
    """

    def __init__(self, cluster_id: int, indices_of_members: np.ndarray, height: float, best_representative_member: int):
        self.cluster_id = cluster_id
        self.indices_of_members = indices_of_members
        self.number_of_members = self.indices_of_members.size
        self.height = height
        self.best_representative_member = best_representative_member


def _validate_observations(data: Any) -> np.ndarray:
    """
    Convert ``data`` into a finite float matrix with shape (n_observations, n_features).

    A one-dimensional input is read as observations of a single feature.
    """
    try:
        observations = np.asarray(data, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"Observations must form a numeric matrix with rows of equal length: {e}")

    if observations.ndim == 1:
        observations = observations.reshape(-1, 1)
    if observations.ndim != 2:
        raise InvalidInputError(f"Observations must be a 2D matrix, got {observations.ndim} dimension(s)")
    if observations.shape[0] == 0:
        raise InvalidInputError("Cannot cluster an empty dataset")
    if observations.shape[1] == 0:
        raise InvalidInputError("Observations must have at least one feature")
    if not np.all(np.isfinite(observations)):
        bad_rows = np.where(~np.all(np.isfinite(observations), axis=1))[0]
        raise InvalidInputError(f"Observations contain non-finite values in row(s) {bad_rows.tolist()}")

    # upper bound on every squared distance
    with np.errstate(over='ignore', invalid='ignore'):
        widest = np.sum(np.square(np.ptp(observations, axis=0)))
    if not np.isfinite(widest):
        raise InvalidInputError("Observations span too wide a range: squared distances overflow")

    return observations


def _build_tree(data: np.ndarray) -> Dendrogram:
    """
    Merge the closest pair of clusters until one cluster remains.

    Parameters
    ----------
    data : np.ndarray
        Validated observation matrix.

    Returns
    -------
    Dendrogram
        ``n`` levels, produced by exactly ``n - 1`` merges.
    """
    clusters = [ClusterNode.leaf(i) for i in range(data.shape[0])]
    levels = [clusters]

    # squared Euclidean distances between observations
    matrix = DissimilarityMatrix.from_observations(data)

    while len(clusters) > 1:
        cluster_ids = [each_cluster.id for each_cluster in clusters]
        pos_a, pos_b, ab_dist = best_merge(matrix, cluster_ids)
        a = clusters[pos_a]
        b = clusters[pos_b]

        survivors = [each_cluster for i, each_cluster in enumerate(clusters) if i != pos_a and i != pos_b]

        lance_williams_update(matrix, a.id, b.id, a.size, b.size, ab_dist,
                              [c.id for c in survivors], [c.size for c in survivors])

        new_node = ClusterNode.merge(a, b, float(np.sqrt(ab_dist)))
        clusters = [new_node] + survivors
        levels.append(clusters)

    return Dendrogram(levels)


def perform_clustering(data: Any, plotDendrogram: bool = False) -> Dendrogram:
    """
    Cluster observations using Ward hierarchical clustering.

    Parameters
    ----------
    ``data`` : array-like
        Observation matrix with shape (n_observations, n_features). A flat
        sequence is treated as ``n_observations`` one-dimensional points.
    ``plotDendrogram`` : bool, default=False
        If True, displays dendrogram.

    Returns
    -------
    Dendrogram
        Full merge history, from one leaf per observation to a single root.
    """
    observations = _validate_observations(data)
    tree = _build_tree(observations)

    if plotDendrogram:
        plot_dendrogram(tree)

    return tree


@dataclass
class WardClustering:
    """Ward hierarchical clustering estimator.

    Parameters
    ----------
    n_clusters : Optional[int], optional
        If given, ``fit`` also cuts the tree into this many flat clusters and
        stores the labels in ``labels_``.

    Attributes
    ----------
    tree_ : Optional[Dendrogram]
        Merge history of the last fitted dataset.
    labels_ : Optional[np.ndarray]
        1-based flat cluster label of each observation.
    """

    n_clusters: Optional[int] = None

    tree_: Optional[Dendrogram] = None
    labels_: Optional[np.ndarray] = None

    def fit(self, X: Any) -> "WardClustering":
        """Build the dendrogram of ``X``.

        Parameters
        ----------
        X : array-like
            Dataset of shape (n_observations, n_features).

        Returns
        -------
        WardClustering
            The fitted estimator.
        """
        self.tree_ = perform_clustering(X)
        self.labels_ = None
        if self.n_clusters is not None:
            self.labels_ = flat_clusters(self.tree_, self.n_clusters)
        return self

    def fit_predict(self, X: Any) -> np.ndarray:
        """Fit the model to ``X`` and return the flat cluster labels."""
        if self.n_clusters is None:
            raise ValueError("n_clusters must be set to predict flat cluster labels")
        return self.fit(X).labels_  # type: ignore[return-value]

    @property
    def root_(self) -> ClusterNode:
        if self.tree_ is None:
            raise RuntimeError("Model is not fitted. Call fit(X) first.")
        return self.tree_.root

    @property
    def n_merges_(self) -> int:
        if self.tree_ is None:
            raise RuntimeError("Model is not fitted. Call fit(X) first.")
        return len(self.tree_) - 1


def flat_clusters(tree: Dendrogram, n_clusters: int) -> np.ndarray:
    """
    Cut the dendrogram into ``n_clusters`` flat clusters.

    Clusters are numbered from 1 in increasing order of their node id, so the
    cluster holding observation 0 is always cluster 1.

    Returns
    -------
    np.ndarray
        Cluster label of each observation.
    """
    level = tree.level_with(n_clusters)
    labels = np.zeros(tree.n_observations, dtype=int)

    for cluster_no, node in enumerate(sorted(level, key=lambda each_node: each_node.id), start=1):
        labels[list(node.instances)] = cluster_no

    return labels


def create_cluster_list(tree: Dendrogram, data: Any, n_clusters: int) -> List[Cluster]:
    """
    Create Cluster objects from a cut of the dendrogram.

    Parameters
    ----------
    tree : Dendrogram
        Fitted merge history.
    data : array-like
        The observations the dendrogram was built from.
    n_clusters : int
        Number of flat clusters.

    Returns
    -------
    List[Cluster]
        List of Cluster objects, ordered by cluster number.
    """
    observations = _validate_observations(data)
    if observations.shape[0] != tree.n_observations:
        raise ValueError(f"Dendrogram has {tree.n_observations} observations but data has {observations.shape[0]}")

    cluster_list = []
    level = sorted(tree.level_with(n_clusters), key=lambda each_node: each_node.id)

    for i, node in enumerate(level, start=1):
        indices = np.sort(np.array(node.instances, dtype=int))

        if indices.size == 1:
            cluster_list.append(Cluster(i, indices, node.dist, int(indices[0])))
            continue

        dist_matrix = pairwise_distances(observations[indices])

        #get the index of the member with the lowest sum of distances
        min_cIndex = dist_matrix.sum(axis=0).argmin()
        representative_index = int(indices[min_cIndex])

        cluster_list.append(Cluster(i, indices, node.dist, representative_index))

    return cluster_list
