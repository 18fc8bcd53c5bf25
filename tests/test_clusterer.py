import numpy as np
import pytest
from scipy.cluster.hierarchy import linkage, fcluster, is_valid_linkage
from wardclust import (perform_clustering, WardClustering, ClusterNode, Dendrogram,
                       flat_clusters, create_cluster_list, reference_clustering, InvalidInputError)


def _partition(labels):
    groups = {}
    for i, label in enumerate(labels):
        groups.setdefault(label, set()).add(i)
    return sorted(map(frozenset, groups.values()), key=min)


def _assert_structure(tree, n):
    assert len(tree) == n
    assert [node.instances for node in tree[0]] == [(i,) for i in range(n)]
    for k, level in enumerate(tree):
        assert len(level) == n - k
        members = sorted(i for node in level for i in node.instances)
        assert members == list(range(n))
    assert sorted(tree.root.instances) == list(range(n))


def _assert_disjoint_unions(node):
    if node.is_leaf:
        assert node.instances == (node.id,)
        assert node.dist == 0.0
        return
    left, right = node.children
    assert set(left.instances).isdisjoint(right.instances)
    assert set(node.instances) == set(left.instances) | set(right.instances)
    assert node.size == left.size + right.size
    assert node.id == min(left.id, right.id)
    assert left.id < right.id
    assert node.dist >= 0.0
    _assert_disjoint_unions(left)
    _assert_disjoint_unions(right)


def test_four_points_scenario(four_points):
    tree = perform_clustering(four_points)
    first, second, top = tree.merges

    assert first.instances == (0, 1)
    assert first.dist == pytest.approx(1.0)
    assert second.instances == (2, 3)
    assert second.dist == pytest.approx(1.0)
    assert sorted(top.instances) == [0, 1, 2, 3]
    assert top.dist > first.dist and top.dist > second.dist
    # [(1+2) 289/3 + (1+2) 361/3 - 2] / 4 = 162
    assert top.dist == pytest.approx(np.sqrt(162.0))
    assert top is tree.root


def test_levels_start_with_new_cluster(four_points):
    tree = perform_clustering(four_points)
    assert [node.id for node in tree[1]] == [0, 2, 3]
    assert [node.id for node in tree[2]] == [2, 0]
    assert tree[2][1] is tree[1][0]


@pytest.mark.parametrize("n", [1, 2, 3, 7, 20])
def test_structure_for_any_size(n):
    rng = np.random.default_rng(n)
    tree = perform_clustering(rng.normal(size=(n, 2)))
    _assert_structure(tree, n)
    _assert_disjoint_unions(tree.root)
    assert len(tree.merges) == n - 1


def test_single_observation():
    tree = perform_clustering([[3.0, 4.0]])
    assert len(tree) == 1
    assert tree.root == ClusterNode(0, (0,))
    assert tree.merges == []
    assert tree.heights.size == 0
    assert tree.to_linkage_matrix().shape == (0, 4)


def test_two_observations():
    tree = perform_clustering([[0.0, 0.0], [3.0, 4.0]])
    assert len(tree) == 2
    assert tree.root.children == (ClusterNode(0, (0,)), ClusterNode(1, (1,)))
    assert tree.root.dist == pytest.approx(5.0)


def test_heights_non_decreasing_on_separated_groups(blobs):
    data, groups = blobs
    heights = perform_clustering(data).heights
    assert np.all(heights >= 0.0)
    assert np.all(np.diff(heights) >= 0.0)


def test_groups_merge_before_joining(blobs):
    data, groups = blobs
    tree = perform_clustering(data)
    assert _partition(flat_clusters(tree, 3)) == sorted(map(frozenset, groups), key=min)


def test_heights_match_scipy_ward(random_data):
    tree = perform_clustering(random_data)
    z = linkage(random_data, method='ward')
    np.testing.assert_allclose(np.sort(tree.heights), np.sort(z[:, 2]), rtol=1e-9)


def test_linkage_matrix_is_usable_by_scipy(blobs):
    data, groups = blobs
    tree = perform_clustering(data)
    z = tree.to_linkage_matrix()
    assert z.shape == (14, 4)
    assert is_valid_linkage(z)
    assert z[-1, 3] == 15
    assert _partition(fcluster(z, 3, criterion='maxclust')) == _partition(flat_clusters(tree, 3))


def test_clustering_is_deterministic(random_data):
    assert perform_clustering(random_data) == perform_clustering(random_data.copy())


def test_duplicate_points_merge_at_zero():
    tree = perform_clustering([[1.0, 1.0], [5.0, 5.0], [1.0, 1.0]])
    assert tree.merges[0].instances == (0, 2)
    assert tree.merges[0].dist == 0.0


@pytest.mark.parametrize("data", [
    [],
    [[]],
    [[1.0, 2.0], [3.0]],
    [[1.0, np.nan], [2.0, 3.0]],
    [[1.0, np.inf]],
    [["a", "b"]],
    np.zeros((2, 2, 2)),
])
def test_invalid_input_is_rejected(data):
    with pytest.raises(InvalidInputError):
        perform_clustering(data)


@pytest.mark.parametrize("data", [
    [[0.0], [1e200], [3e200]],
    [[0.0], [1e155], [1.1e155], [5e155]],
    [[-1e308, 0.0], [1e308, 0.0]],
])
def test_overflowing_distances_are_rejected(data):
    with pytest.raises(InvalidInputError):
        perform_clustering(data)
    with pytest.raises(InvalidInputError):
        reference_clustering(data)


def test_large_but_representable_distances():
    tree = perform_clustering([[0.0], [1e100], [3e100]])
    assert np.all(np.isfinite(tree.heights))
    assert tree.merges[0].instances == (0, 1)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        perform_clustering([])


def test_estimator_fit(blobs):
    data, groups = blobs
    model = WardClustering().fit(data)
    assert isinstance(model.tree_, Dendrogram)
    assert model.n_merges_ == 14
    assert model.root_.size == 15
    assert model.labels_ is None


def test_estimator_fit_predict(blobs):
    data, groups = blobs
    labels = WardClustering(n_clusters=3).fit_predict(data)
    assert labels[0] == 1
    assert set(labels.tolist()) == {1, 2, 3}
    assert _partition(labels) == sorted(map(frozenset, groups), key=min)


def test_estimator_requires_fit():
    with pytest.raises(RuntimeError):
        WardClustering().root_
    with pytest.raises(ValueError):
        WardClustering().fit_predict([[0.0], [1.0]])


def test_flat_clusters_bounds(four_points):
    tree = perform_clustering(four_points)
    np.testing.assert_array_equal(flat_clusters(tree, 1), [1, 1, 1, 1])
    np.testing.assert_array_equal(flat_clusters(tree, 2), [1, 1, 2, 2])
    np.testing.assert_array_equal(flat_clusters(tree, 4), [1, 2, 3, 4])
    for bad in (0, 5):
        with pytest.raises(ValueError):
            flat_clusters(tree, bad)


def test_create_cluster_list():
    data = [[0.0], [1.0], [2.0], [50.0]]
    tree = perform_clustering(data)
    cluster_list = create_cluster_list(tree, data, 2)

    assert [c.cluster_id for c in cluster_list] == [1, 2]
    np.testing.assert_array_equal(cluster_list[0].indices_of_members, [0, 1, 2])
    assert cluster_list[0].number_of_members == 3
    assert cluster_list[0].best_representative_member == 1
    assert cluster_list[0].height > 0.0
    assert cluster_list[1].best_representative_member == 3
    assert cluster_list[1].height == 0.0


def test_create_cluster_list_checks_size(four_points):
    tree = perform_clustering(four_points)
    with pytest.raises(ValueError):
        create_cluster_list(tree, four_points[:3], 2)
