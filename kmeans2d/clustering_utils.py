# clustering_utils.py
import logging
from collections import namedtuple

import numpy as np
from scipy.spatial.distance import cdist

from kmeans2d.metrics import compute_inertia
from kmeans2d.samples import CentroidSet, UNASSIGNED, _validate_coords


logger = logging.getLogger(__name__)

# a centroid that moved less than this (squared distance) counts as settled
EPSILON = 1e-4
MAX_ITERATIONS = 1000
DEFAULT_METRIC = "euclidean"
METRICS = ("euclidean", "sqeuclidean")


class InvalidStateError(RuntimeError):
    """Raised when clustering is attempted on inconsistent state."""


IterationState = namedtuple(
    "IterationState",
    ["iteration", "centroids", "labels", "inertia", "shift", "converged"],
)


def _validate_metric(metric):
    if metric not in METRICS:
        raise ValueError(f"metric must be one of {METRICS}, got {metric!r}")


def _validate_run_params(epsilon, max_iterations, metric):
    _validate_metric(metric)
    if epsilon < 0:
        raise ValueError("epsilon must be >= 0")
    if max_iterations is not None and max_iterations < 1:
        raise ValueError("max_iterations must be >= 1 or None")


def _require_centroids(centroids):
    if len(centroids) == 0:
        raise InvalidStateError("cannot cluster with an empty centroid set")


def assign_step(centroids, points, metric=DEFAULT_METRIC):
    """
    Label every point with the index of its nearest centroid.

    Exact ties go to the lowest centroid index (``argmin`` keeps the first
    minimum).  Euclidean and squared Euclidean rank centroids identically.
    Only ``points.labels_`` is written.
    """
    _validate_metric(metric)
    _require_centroids(centroids)
    if len(points) == 0:
        return
    dist = cdist(points.X, centroids.centers, metric=metric)   # (n, k)
    points.labels_[:] = dist.argmin(axis=1)


def update_step(centroids, points):
    """
    Move every centroid to the mean of the points labelled with it.

    Unassigned points are left out of the sums.  A centroid with no points
    keeps its current coordinates.  Labels outside ``[0, k)`` raise
    InvalidStateError before anything is written.

    Returns the per-cluster point counts.
    """
    k = len(centroids)
    labels = points.labels_
    bad = (labels < UNASSIGNED) | (labels >= k)
    if np.any(bad):
        idx = int(np.flatnonzero(bad)[0])
        raise InvalidStateError(
            f"point {idx} has cluster label {int(labels[idx])}, expected -1 or 0..{k - 1}"
        )

    mask = labels != UNASSIGNED
    lbl = labels[mask]
    pts = points.X[mask]

    counts = np.bincount(lbl, minlength=k)
    sum_x = np.bincount(lbl, weights=pts[:, 0], minlength=k)
    sum_y = np.bincount(lbl, weights=pts[:, 1], minlength=k)

    filled = counts > 0
    centroids.centers[filled, 0] = sum_x[filled] / counts[filled]
    centroids.centers[filled, 1] = sum_y[filled] / counts[filled]

    if not np.all(filled):
        logger.debug("empty clusters left in place: %s", np.flatnonzero(~filled).tolist())
    return counts


def centroid_shift(previous, current):
    """Largest squared displacement between matching centroids (NaN if sizes differ)."""
    if len(previous) != len(current):
        return np.nan
    if len(current) == 0:
        return 0.0
    d = previous.centers - current.centers
    return float(np.einsum('ij,ij->i', d, d).max())


def converged(previous, current, epsilon=EPSILON):
    """
    True when every centroid moved by a squared distance of at most
    ``epsilon``.  Sets of different length never count as converged, which
    is how the driver forces a first pass (it starts from an empty snapshot).
    """
    if len(previous) != len(current):
        return False
    d = previous.centers - current.centers
    return bool(np.all(np.einsum('ij,ij->i', d, d) <= epsilon))


def run_one_iteration(centroids, points, *, epsilon=EPSILON, metric=DEFAULT_METRIC):
    """
    One assign + update pass.  Returns True if the centroids stayed within
    ``epsilon`` of where they started, i.e. the pass hit a fixed point.
    """
    _validate_run_params(epsilon, None, metric)
    _require_centroids(centroids)
    previous = centroids.copy()
    assign_step(centroids, points, metric=metric)
    update_step(centroids, points)
    return converged(previous, centroids, epsilon)


def iterate_kmeans(
    centroids,
    points,
    *,
    epsilon: float = EPSILON,
    max_iterations: int = MAX_ITERATIONS,
    metric: str = DEFAULT_METRIC,
    should_stop=None,
):
    """
    Run k-means pass by pass, yielding an IterationState after each one.

    Stops after the pass that converges, after ``max_iterations`` passes, or
    as soon as ``should_stop()`` returns True (checked before every pass).
    ``centroids`` and ``points`` are mutated in place; the yielded arrays are
    copies.
    """
    _validate_run_params(epsilon, max_iterations, metric)
    _require_centroids(centroids)

    previous = CentroidSet()
    iteration = 0
    while not converged(previous, centroids, epsilon):
        if max_iterations is not None and iteration >= max_iterations:
            logger.warning(
                "k-means did not converge within %d iterations (last shift %.3g)",
                max_iterations, centroid_shift(previous, centroids),
            )
            return
        if should_stop is not None and should_stop():
            logger.info("k-means stopped by caller after %d iterations", iteration)
            return

        if len(previous) == len(centroids):
            previous.copy_from(centroids)
        else:
            previous = centroids.copy()
        assign_step(centroids, points, metric=metric)
        update_step(centroids, points)
        iteration += 1

        shift = centroid_shift(previous, centroids)
        inertia = compute_inertia(points.X, points.labels_, centroids.centers)
        done = converged(previous, centroids, epsilon)
        logger.debug("iteration %d: shift=%.6g inertia=%.6g", iteration, shift, inertia)

        yield IterationState(
            iteration,
            centroids.centers.copy(),
            points.labels_.copy(),
            inertia,
            shift,
            done,
        )

    logger.info("k-means converged after %d iterations", iteration)


def run_kmeans(
    centroids,
    points,
    *,
    epsilon: float = EPSILON,
    max_iterations: int = MAX_ITERATIONS,
    metric: str = DEFAULT_METRIC,
    should_stop=None,
):
    """
    Repeat assign + update until the centroids stop moving.

    Args:
      centroids      : CentroidSet, moved in place
      points         : PointSet, labels written in place
      epsilon        : squared-displacement tolerance per centroid
      max_iterations : cap on passes (None for no cap)
      metric         : "euclidean" or "sqeuclidean"
      should_stop    : optional callable, checked before every pass

    Returns:
      (n_iter, converged) : passes run and whether the last one converged
    """
    n_iter, done = 0, False
    for state in iterate_kmeans(
        centroids,
        points,
        epsilon=epsilon,
        max_iterations=max_iterations,
        metric=metric,
        should_stop=should_stop,
    ):
        n_iter, done = state.iteration, state.converged
    return n_iter, done


def assign_clusters(centroids, X, metric=DEFAULT_METRIC):
    """
    Nearest-centroid labels for arbitrary points (array, DataFrame or
    pairs, validated like a PointSet), without touching any PointSet.
    """
    _validate_metric(metric)
    _require_centroids(centroids)
    X = _validate_coords(X)
    if len(X) == 0:
        return np.empty(0, dtype=int)
    return cdist(X, centroids.centers, metric=metric).argmin(axis=1)
