import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def four_points():
    return [0.0, 1.0, 9.0, 10.0]


@pytest.fixture
def random_data():
    rng = np.random.default_rng(7)
    return rng.normal(size=(12, 3))


@pytest.fixture
def blobs():
    """Three tight groups of five points around far-apart centres."""
    rng = np.random.default_rng(42)
    centres = np.array([[0.0, 0.0], [100.0, 0.0], [0.0, 100.0]])
    data = np.concatenate([centre + rng.normal(scale=0.1, size=(5, 2)) for centre in centres])
    groups = [set(range(0, 5)), set(range(5, 10)), set(range(10, 15))]
    return data, groups
