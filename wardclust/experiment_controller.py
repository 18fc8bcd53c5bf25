"""
Validation and reporting utilities for Ward clustering runs.

This module cross-checks the incremental algorithm against the brute-force
formulation and writes merge histories to Excel reports.
"""

import os
import time
import numpy as np
from typing import Any, Dict, Optional, Sequence
import warnings
import xlsxwriter
from .clusterer import Dendrogram, perform_clustering
from ._reference import reference_clustering


def compare_with_reference(data: Any, atol: float = 1e-8) -> Dict[str, Any]:
    """
    Cluster ``data`` with both formulations and compare their merge histories.

    Parameters
    ----------
    data : array-like
        Observation matrix with shape (n_observations, n_features).
    atol : float, default=1e-8
        Absolute tolerance on merge heights.

    Returns
    -------
    Dict[str, Any]
        - ``tree``: Dendrogram from the incremental algorithm
        - ``reference_tree``: Dendrogram from the brute-force formulation
        - ``same_merges``: True if every step merged the same sets of observations
        - ``same_heights``: True if merge heights agree within ``atol``
        - ``max_height_difference``: Largest absolute difference in merge heights
        - ``run_time``: Incremental clustering time in seconds
        - ``reference_run_time``: Brute-force clustering time in seconds
    """
    begin_time = time.time()
    tree = perform_clustering(data)
    run_time = time.time() - begin_time

    begin_time = time.time()
    reference_tree = reference_clustering(data)
    reference_run_time = time.time() - begin_time

    merged_sets = [frozenset(node.instances) for node in tree.merges]
    reference_sets = [frozenset(node.instances) for node in reference_tree.merges]
    same_merges = merged_sets == reference_sets

    heights = tree.heights
    reference_heights = reference_tree.heights
    max_height_difference = float(np.max(np.abs(heights - reference_heights))) if heights.size else 0.0

    if not same_merges:
        warnings.warn("Incremental and brute-force merge sequences differ; check for ties between equal distances")

    return {
        'tree': tree,
        'reference_tree': reference_tree,
        'same_merges': same_merges,
        'same_heights': max_height_difference <= atol,
        'max_height_difference': max_height_difference,
        'run_time': run_time,
        'reference_run_time': reference_run_time
    }


def write_merge_report(tree: Dendrogram, output_path: str, labels: Optional[Sequence[str]] = None) -> str:
    """
    Write the merge history of ``tree`` to an Excel workbook.

    The 'merges' sheet has one row per merge step with the ids of the joined
    clusters, the merge height, the size of the new cluster and its members.

    Parameters
    ----------
    tree : Dendrogram
        Fitted merge history.
    output_path : str
        Path of the .xlsx file to create. Parent directories are created if needed.
    labels : Optional[Sequence[str]], default=None
        Observation labels used in the members column. Defaults to the indices.

    Returns
    -------
    str
        Path to the generated report.
    """
    if not output_path.lower().endswith('.xlsx'):
        raise ValueError("Report file must have .xlsx extension")
    if labels is not None and len(labels) != tree.n_observations:
        raise ValueError(f"Expected {tree.n_observations} labels, got {len(labels)}")

    output_dir = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(output_dir, exist_ok=True)

    w = xlsxwriter.Workbook(output_path)
    ws = w.add_worksheet('merges')
    ws.set_column('A:E', 12)
    ws.set_column('F:F', 40)

    for col, header in enumerate(['Step', 'Left Id', 'Right Id', 'Height', 'Size', 'Members']):
        ws.write(0, col, header)

    for step, node in enumerate(tree.merges, start=1):
        left, right = node.children
        members = [str(labels[i]) if labels is not None else str(i) for i in sorted(node.instances)]
        ws.write(step, 0, step)
        ws.write(step, 1, left.id)
        ws.write(step, 2, right.id)
        ws.write(step, 3, node.dist)
        ws.write(step, 4, node.size)
        ws.write(step, 5, ', '.join(members))

    w.close()
    print(f"Excel report saved to: {output_path}")

    return output_path
