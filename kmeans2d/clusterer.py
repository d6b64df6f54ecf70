import logging

import numpy as np
import pandas as pd

from kmeans2d.clustering_utils import (
    EPSILON,
    MAX_ITERATIONS,
    DEFAULT_METRIC,
    assign_clusters,
    iterate_kmeans,
    run_one_iteration,
    centroid_shift,
    _validate_run_params,
)
from kmeans2d.metrics import compute_all_metrics, compute_inertia
from kmeans2d.samples import PointSet, CentroidSet
from kmeans2d.synthetic_data import init_centroids_from_points


logger = logging.getLogger(__name__)


class KMeansClusterer:
    """
    Fit k-means on 2-D data with the fit / labels_ / centroids_ idiom.

    Initial centroids come from ``init`` (an array-like of shape
    (n_clusters, 2)) or, when omitted, from ``n_clusters`` distinct data
    points drawn with ``random_state``.  The fitted PointSet and
    CentroidSet are kept on ``points_`` and ``centroid_set_`` so that
    ``step()`` can keep refining them one pass at a time.
    """

    def __init__(
        self,
        n_clusters=2,
        *,
        init=None,
        epsilon=EPSILON,
        max_iterations=MAX_ITERATIONS,
        metric=DEFAULT_METRIC,
        random_state=None,
    ):
        if n_clusters < 1:
            raise ValueError("n_clusters must be >= 1")
        _validate_run_params(epsilon, max_iterations, metric)
        self.n_clusters = n_clusters
        self.init = init
        self.epsilon = epsilon
        self.max_iterations = max_iterations
        self.metric = metric
        self.random_state = random_state

    def _validate_input(self, X):
        if isinstance(X, PointSet):
            return X
        if isinstance(X, (pd.DataFrame, np.ndarray, list, tuple)):
            return PointSet(X)
        raise ValueError("Input must be a PointSet, numpy array or pandas DataFrame")

    def _initial_centroids(self, points):
        if self.init is not None:
            cs = CentroidSet(self.init)
            if len(cs) != self.n_clusters:
                raise ValueError(
                    f"init has {len(cs)} centroids but n_clusters={self.n_clusters}"
                )
            return cs
        return init_centroids_from_points(points.X, self.n_clusters, random_state=self.random_state)

    def start(self, X):
        """Set up points and initial centroids without running any pass."""
        self.points_ = self._validate_input(X)
        self.centroid_set_ = self._initial_centroids(self.points_)
        self.n_iter_ = 0
        self.converged_ = False
        self.history_ = []
        return self

    def fit(self, X, should_stop=None):
        self.start(X)
        for state in iterate_kmeans(
            self.centroid_set_,
            self.points_,
            epsilon=self.epsilon,
            max_iterations=self.max_iterations,
            metric=self.metric,
            should_stop=should_stop,
        ):
            self._record(state.iteration, state.shift, state.inertia, state.converged)
        logger.info(
            "fitted %d clusters on %d points: %d iterations, converged=%s",
            self.n_clusters, len(self.points_), self.n_iter_, self.converged_,
        )
        return self

    def step(self):
        """
        Run a single assign + update pass on the current state.

        Returns True once the pass leaves the centroids in place.  Meant for
        callers that advance the algorithm on their own schedule.
        """
        if not hasattr(self, "centroid_set_"):
            raise RuntimeError("call start() or fit() before step()")
        before = self.centroid_set_.copy()
        done = run_one_iteration(
            self.centroid_set_, self.points_, epsilon=self.epsilon, metric=self.metric
        )
        self._record(
            self.n_iter_ + 1,
            centroid_shift(before, self.centroid_set_),
            compute_inertia(self.points_.X, self.points_.labels_, self.centroid_set_.centers),
            done,
        )
        return done

    def _record(self, iteration, shift, inertia, done):
        self.n_iter_ = iteration
        self.converged_ = done
        self.history_.append({
            "iteration": iteration,
            "shift": shift,
            "inertia": inertia,
            "converged": done,
        })

    @property
    def labels_(self):
        return self.points_.labels_

    @property
    def centroids_(self):
        return self.centroid_set_.centers

    @property
    def X_(self):
        return self.points_.X

    def predict(self, X):
        """Nearest fitted centroid for each row of X."""
        return assign_clusters(self.centroid_set_, X, metric=self.metric)

    def get_virtual_centroids(self):
        return np.array(self.centroids_)

    def get_real_centroids(self):
        """
        Map each centroid to the nearest actual data point.
        Returns array of shape (n_clusters, 2).
        """
        virtual = self.get_virtual_centroids()
        real = []
        for vc in virtual:
            dists = np.linalg.norm(self.X_ - vc, axis=1)
            idx = np.nanargmin(dists)
            real.append(self.X_[idx])
        return np.vstack(real) if real else np.empty_like(virtual)

    def get_labels(self):
        return self.labels_

    def get_history(self):
        return pd.DataFrame(
            self.history_, columns=["iteration", "shift", "inertia", "converged"]
        )

    def get_metrics(self):
        return compute_all_metrics(self.X_, self.labels_, self.centroids_)
