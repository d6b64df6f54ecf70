# synthetic_data.py

import numpy as np
from sklearn.datasets import make_blobs

from kmeans2d.samples import PointSet, CentroidSet


def generate_samples(center, num_samples, radius, random_state=None, points=None):
    """
    Scatter ``num_samples`` unassigned points uniformly in the square of
    half-width ``radius`` around ``center``.

    Appends to ``points`` when given, otherwise returns a new PointSet.
    """
    rs = np.random.RandomState(random_state)
    offsets = rs.uniform(-radius, radius, size=(num_samples, 2))
    X = np.asarray(center, dtype=float) + offsets
    if points is None:
        return PointSet(X)
    points.extend(X)
    return points


def generate_demo_dataset(width=800, height=600, num_samples=25, radius=50.0, random_state=None):
    """
    Four square groups of points laid out like the interactive demo:
    the middle of the region, below it, below-right and below-left.
    """
    rs = np.random.RandomState(random_state)
    cx, cy = width / 2, height / 2
    centers = [
        (cx, cy),
        (cx, cy * 1.5),
        (cx * 1.5, cy * 1.5),
        (cx * 1.5 * 0.3, cy * 1.5),
    ]
    points = PointSet()
    for c in centers:
        generate_samples(c, num_samples, radius, random_state=rs.randint(0, 10**6), points=points)
    return points


def create_centroids(k, width=800, height=600, random_state=None):
    """
    Random initial centroids, one per diagonal band: centroid i is drawn
    from ``[i*w/k, (i+1)*w/k) x [i*h/k, (i+1)*h/k)``.  Spreads the seeds
    across the region so they rarely start on top of each other.
    """
    if k < 1:
        raise ValueError("k must be >= 1")
    rs = np.random.RandomState(random_state)
    x_sep = width / k
    y_sep = height / k
    i = np.arange(k)
    xs = rs.uniform(x_sep * i, x_sep * (i + 1))
    ys = rs.uniform(y_sep * i, y_sep * (i + 1))
    return CentroidSet(np.column_stack([xs, ys]))


def init_centroids_from_points(X, k, random_state=None):
    """Pick ``k`` distinct rows of X as the initial centroids."""
    X = np.asarray(X, dtype=float)
    if k < 1:
        raise ValueError("k must be >= 1")
    if k > len(X):
        raise ValueError(f"cannot pick {k} centroids from {len(X)} points")
    rs = np.random.RandomState(random_state)
    idx = rs.choice(len(X), size=k, replace=False)
    return CentroidSet(X[idx])


def make_blob_points(n_samples=300, centers=3, cluster_std=0.6, random_state=None):
    """
    Gaussian blobs as a PointSet, plus the generating labels.
    """
    X, y = make_blobs(
        n_samples=n_samples,
        centers=centers,
        n_features=2,
        cluster_std=cluster_std,
        random_state=random_state,
    )
    return PointSet(X), y
