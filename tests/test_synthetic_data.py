import numpy as np
import pytest

from kmeans2d.synthetic_data import (
    generate_samples,
    generate_demo_dataset,
    create_centroids,
    init_centroids_from_points,
    make_blob_points,
)
from kmeans2d.samples import PointSet


def test_generate_samples_stay_in_box():
    pts = generate_samples((100, 200), 50, radius=10, random_state=0)
    assert len(pts) == 50
    assert np.all(np.abs(pts.X - [100, 200]) <= 10)
    assert not pts.assigned_mask().any()


def test_generate_samples_appends():
    pts = PointSet([[0, 0]])
    out = generate_samples((5, 5), 3, radius=1, random_state=0, points=pts)
    assert out is pts
    assert len(pts) == 4


def test_demo_dataset_has_four_groups():
    pts = generate_demo_dataset(num_samples=25, radius=50.0, random_state=1)
    assert len(pts) == 100
    groups = pts.X.reshape(4, 25, 2).mean(axis=1)
    expected = [(400, 300), (400, 450), (600, 450), (180, 450)]
    assert groups == pytest.approx(np.array(expected), abs=30)


def test_create_centroids_in_diagonal_bands():
    k = 3
    cents = create_centroids(k, width=800, height=600, random_state=0)
    assert len(cents) == k
    for i, c in enumerate(cents):
        assert 800 / k * i <= c.x < 800 / k * (i + 1)
        assert 600 / k * i <= c.y < 600 / k * (i + 1)


def test_create_centroids_reproducible_and_validated():
    a = create_centroids(4, random_state=3)
    b = create_centroids(4, random_state=3)
    assert np.array_equal(a.centers, b.centers)
    with pytest.raises(ValueError):
        create_centroids(0)


def test_init_centroids_from_points_picks_distinct_rows():
    X = np.arange(20, dtype=float).reshape(10, 2)
    cents = init_centroids_from_points(X, 4, random_state=0)
    rows = {tuple(r) for r in cents.centers}
    assert len(rows) == 4
    assert rows <= {tuple(r) for r in X}
    with pytest.raises(ValueError):
        init_centroids_from_points(X, 11)


def test_make_blob_points():
    pts, y = make_blob_points(n_samples=40, centers=2, random_state=0)
    assert len(pts) == 40
    assert y.shape == (40,)
    assert set(y) == {0, 1}
