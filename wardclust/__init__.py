"""
Top-level for wardclust clustering package.

This package provides Ward hierarchical clustering of numeric observations.
End users should use the main functions: read_observations, perform_clustering, and related utilities.
"""

from .clusterer import (
    ClusterNode,
    Dendrogram,
    Cluster,
    WardClustering,
    perform_clustering,
    flat_clusters,
    create_cluster_list
)

from ._reference import (
    reference_clustering
)

from .plotting import (
    DendrogramStyle,
    plot_dendrogram
)

from .io import (
    read_observations
)

from .experiment_controller import (
    compare_with_reference,
    write_merge_report
)

from .exceptions import (
    InvalidInputError,
    DegenerateMergeError,
    NumericInstabilityWarning,
    NumericOverflowError
)

__all__ = [
    "ClusterNode",
    "Dendrogram",
    "Cluster",
    "WardClustering",
    "perform_clustering",
    "flat_clusters",
    "create_cluster_list",
    "reference_clustering",
    "DendrogramStyle",
    "plot_dendrogram",
    "read_observations",
    "compare_with_reference",
    "write_merge_report",
    "InvalidInputError",
    "DegenerateMergeError",
    "NumericInstabilityWarning",
    "NumericOverflowError"
]

__version__ = "0.1.0"
