import numpy as np
from typing import Tuple
from ._primitives import pairwise_distances
from .exceptions import InvalidInputError


class DissimilarityMatrix:
    """
    Squared dissimilarities between live clusters, keyed by cluster id.

    Storage is a dense symmetric array indexed by cluster id rather than by
    position in a level, so a merge never reshuffles it. When clusters ``a < b``
    merge, the new cluster keeps id ``a`` and its row; row ``b`` is retired.

    Attributes
    ----------
    values : np.ndarray
        The (n, n) arena. Retired rows and columns hold NaN.
    """

    def __init__(self, values: np.ndarray):
        self.values = values
        self._live = np.ones(values.shape[0], dtype=bool)

    @classmethod
    def from_observations(cls, data: np.ndarray) -> 'DissimilarityMatrix':
        """
        Build the matrix from squared Euclidean distances between observations.

        Parameters
        ----------
        data : np.ndarray
            Observation matrix with shape (n_observations, n_features).

        Returns
        -------
        DissimilarityMatrix
        """
        distances = pairwise_distances(data)
        with np.errstate(over='ignore'):
            values = np.square(distances)
        if not np.all(np.isfinite(values)):
            raise InvalidInputError("Squared distances between observations overflow")
        return cls(values)

    def __len__(self) -> int:
        return self.values.shape[0]

    def _key(self, i: int, j: int) -> Tuple[int, int]:
        for cluster_id in (i, j):
            if not self._live[cluster_id]:
                raise KeyError(f"Cluster {cluster_id} has been merged away")
        return min(i, j), max(i, j)

    def get(self, i: int, j: int) -> float:
        x, y = self._key(i, j)
        return float(self.values[x, y])

    def set(self, i: int, j: int, value: float) -> None:
        x, y = self._key(i, j)
        self.values[x, y] = value
        self.values[y, x] = value

    def __getitem__(self, pair: Tuple[int, int]) -> float:
        return self.get(*pair)

    def __setitem__(self, pair: Tuple[int, int], value: float) -> None:
        self.set(pair[0], pair[1], value)

    def is_live(self, cluster_id: int) -> bool:
        return bool(self._live[cluster_id])

    def retire(self, cluster_id: int) -> None:
        """
        Invalidate every entry keyed by ``cluster_id``.
        """
        self._live[cluster_id] = False
        self.values[cluster_id, :] = np.nan
        self.values[:, cluster_id] = np.nan
