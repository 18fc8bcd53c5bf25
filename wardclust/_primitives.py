import numpy as np
from scipy.spatial.distance import pdist, squareform
from typing import Sequence


def pairwise_distances(data: np.ndarray) -> np.ndarray:
    """
    Calculate the Euclidean distance between every pair of observations.

    Parameters
    ----------
    data : np.ndarray
        Observation matrix with shape (n_observations, n_features).

    Returns
    -------
    np.ndarray
        Symmetric distance matrix with shape (n_observations, n_observations)
        and a zero diagonal.
    """
    if data.shape[0] < 2:
        return np.zeros((data.shape[0], data.shape[0]))

    try:
        dRow = pdist(data, metric='euclidean')
    except Exception as e:
        raise ValueError(f"Error computing euclidean distance: {str(e)}")

    return squareform(dRow)


def gather(data: np.ndarray, indices: Sequence[int]) -> np.ndarray:
    """
    Select the rows of ``data`` listed in ``indices``, in that order.
    """
    return data[np.asarray(indices, dtype=np.intp)]


def error_sum_of_squares(rows: np.ndarray) -> float:
    """
    Sum of squared deviations of each row from the centroid of all rows.

    Parameters
    ----------
    rows : np.ndarray
        Matrix with shape (n_rows, n_features).

    Returns
    -------
    float
        Error sum of squares; 0.0 for an empty or single-row matrix.
    """
    if rows.shape[0] < 2:
        return 0.0
    centroid = rows.mean(axis=0)
    return float(np.sum(np.square(rows - centroid)))
