# test_metrics.py

import numpy as np
import pytest
from sklearn.datasets import make_blobs

import kmeans2d.metrics as metrics


@pytest.fixture
def blob_data():
    X, y = make_blobs(n_samples=100, centers=3, cluster_std=0.5, random_state=0)
    return X, y


def test_inertia_matches_manual_sum():
    X = np.array([[0, 0], [1, 1], [10, 10], [11, 11]])
    labels = np.array([0, 0, 1, 1])
    cents = np.array([[0.5, 0.5], [10.5, 10.5]])
    assert metrics.compute_inertia(X, labels, cents) == pytest.approx(2.0)


def test_inertia_ignores_unassigned():
    X = np.array([[0, 0], [100, 100]])
    labels = np.array([0, -1])
    assert metrics.compute_inertia(X, labels, np.array([[1, 0]])) == pytest.approx(1.0)
    assert metrics.compute_inertia(X, np.array([-1, -1]), np.array([[1, 0]])) == 0.0


def test_wcss_per_cluster_and_unbalanced():
    X = np.array([[0, 0], [1, 1], [10, 10], [11, 11]])
    labels = np.array([0, 0, 1, 1])
    cents = np.array([[0.5, 0.5], [10.5, 10.5], [50, 50]])
    wcss = metrics.compute_wcss_per_cluster(X, labels, cents)
    assert wcss[0] == pytest.approx(1.0)
    assert wcss[1] == pytest.approx(1.0)
    assert wcss[2] == 0.0

    # largest cluster=2, smallest=1 → factor=2.0
    assert metrics.compute_unbalanced_factor(np.array([0, 0, 1])) == pytest.approx(2.0)
    assert np.isnan(metrics.compute_unbalanced_factor(np.array([0, 0, 0])))


def test_population_reports_empty_clusters():
    labels = np.array([0, 0, 2, -1])
    assert metrics.cluster_population_distribution(labels) == {0: 2, 2: 1}
    assert metrics.cluster_population_distribution(labels, n_clusters=3) == {0: 2, 1: 0, 2: 1}


def test_average_distance_nan_for_empty_cluster():
    X = np.array([[0, 0], [0, 2]])
    labels = np.array([0, 0])
    d = metrics.average_distance_to_centroids(X, labels, np.array([[0, 1], [9, 9]]))
    assert d[0] == pytest.approx(1.0)
    assert np.isnan(d[1])
    assert metrics.average_distance_to_centroids(X, labels, None) == {}


def test_quality_scores_on_blobs(blob_data):
    X, y = blob_data
    assert 0.3 < metrics.compute_silhouette(X, y) <= 1.0
    assert metrics.compute_calinski_harabasz(X, y) > 0
    assert metrics.compute_davies_bouldin(X, y) > 0


def test_quality_scores_nan_with_single_cluster(blob_data):
    X, _ = blob_data
    ones = np.zeros(len(X), dtype=int)
    assert np.isnan(metrics.compute_silhouette(X, ones))
    assert np.isnan(metrics.compute_calinski_harabasz(X, ones))
    assert np.isnan(metrics.compute_davies_bouldin(X, ones))


def test_compute_all_metrics_keys(blob_data):
    X, y = blob_data
    cents = np.vstack([X[y == k].mean(axis=0) for k in range(3)])
    m = metrics.compute_all_metrics(X, y, cents)
    for key in (
        'inertia',
        'silhouette',
        'calinski_harabasz',
        'davies_bouldin',
        'population',
        'avg_distance',
        'unbalanced_factor',
    ):
        assert key in m
    assert sum(m['population'].values()) == len(X)
    assert np.isnan(metrics.compute_all_metrics(X, y)['inertia'])


def test_compute_all_metrics_wcss():
    X = np.array([[0, 0], [1, 1], [10, 10], [11, 11]])
    labels = np.array([0, 0, 1, 1])
    cents = np.array([[0.5, 0.5], [10.5, 10.5]])
    m = metrics.compute_all_metrics(X, labels, cents)
    assert m['wcss'] == {0: pytest.approx(1.0), 1: pytest.approx(1.0)}
    assert metrics.compute_all_metrics(X, labels)['wcss'] == {}
