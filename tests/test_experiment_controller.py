import numpy as np
import pandas as pd
import pytest
from wardclust import perform_clustering, compare_with_reference, write_merge_report


def test_compare_with_reference(random_data):
    results = compare_with_reference(random_data)
    assert results['same_merges']
    assert results['same_heights']
    assert results['max_height_difference'] < 1e-8
    assert results['tree'].n_observations == 12
    assert results['reference_tree'].n_observations == 12
    assert results['run_time'] >= 0.0


def test_compare_single_observation():
    results = compare_with_reference([[1.0, 2.0]])
    assert results['same_merges']
    assert results['max_height_difference'] == 0.0


def test_write_merge_report(tmp_path, four_points, capsys):
    path = str(tmp_path / 'reports' / 'merges.xlsx')
    assert write_merge_report(perform_clustering(four_points), path, labels=['a', 'b', 'c', 'd']) == path
    assert 'Excel report saved to' in capsys.readouterr().out

    report = pd.read_excel(path, sheet_name='merges')
    assert list(report.columns) == ['Step', 'Left Id', 'Right Id', 'Height', 'Size', 'Members']
    assert report['Step'].tolist() == [1, 2, 3]
    assert report['Members'].tolist() == ['a, b', 'c, d', 'a, b, c, d']
    np.testing.assert_allclose(report['Height'], [1.0, 1.0, np.sqrt(162.0)])


def test_write_merge_report_rejects_bad_arguments(tmp_path, four_points):
    tree = perform_clustering(four_points)
    with pytest.raises(ValueError):
        write_merge_report(tree, str(tmp_path / 'merges.csv'))
    with pytest.raises(ValueError):
        write_merge_report(tree, str(tmp_path / 'merges.xlsx'), labels=['a'])
