from collections import namedtuple

import numpy as np
import pandas as pd


UNASSIGNED = -1

Point = namedtuple("Point", ["x", "y", "cluster"])
Centroid = namedtuple("Centroid", ["x", "y"])


def _validate_coords(X, name="X"):
    """
    Coerce X into a float64 array of shape (n, 2).

    Accepts a numpy array, a pandas DataFrame (uses the ``x``/``y`` columns
    when present, otherwise the first two columns) or a sequence of pairs.
    """
    if isinstance(X, pd.DataFrame):
        if {"x", "y"}.issubset(X.columns):
            X = X[["x", "y"]].values
        else:
            X = X.iloc[:, :2].values
    arr = np.array(X, dtype=float)
    if arr.size == 0:
        return np.empty((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"{name} must have shape (n, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains NaN or infinite coordinates")
    return arr


class PointSet:
    """
    Ordered 2-D points with one cluster label each.

    Coordinates live in ``X`` (n, 2) and labels in ``labels_`` (n,), where
    ``UNASSIGNED`` (-1) means the point has not been assigned yet.  Only the
    labels are meant to change during a clustering run.
    """

    def __init__(self, X=None, labels=None):
        self.X = _validate_coords([] if X is None else X)
        if labels is None:
            self.labels_ = np.full(len(self.X), UNASSIGNED, dtype=int)
        else:
            labels = np.array(
                [UNASSIGNED if l is None else l for l in labels], dtype=int
            )
            if labels.shape != (len(self.X),):
                raise ValueError("labels must have one entry per point")
            self.labels_ = labels

    def __len__(self):
        return len(self.X)

    def __getitem__(self, i):
        lbl = int(self.labels_[i])
        return Point(
            float(self.X[i, 0]),
            float(self.X[i, 1]),
            None if lbl == UNASSIGNED else lbl,
        )

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __repr__(self):
        return f"PointSet(n={len(self)}, assigned={int(self.assigned_mask().sum())})"

    def append(self, x, y):
        """Add one unassigned point at the end."""
        self.extend([[x, y]])

    def extend(self, X):
        """Add unassigned points at the end."""
        X = _validate_coords(X)
        self.X = np.vstack([self.X, X])
        self.labels_ = np.concatenate([self.labels_, np.full(len(X), UNASSIGNED, dtype=int)])

    def assigned_mask(self):
        return self.labels_ != UNASSIGNED

    def clear_labels(self):
        self.labels_[:] = UNASSIGNED

    def to_frame(self):
        df = pd.DataFrame(self.X, columns=["x", "y"])
        df["cluster"] = pd.array(
            [None if l == UNASSIGNED else int(l) for l in self.labels_],
            dtype="Int64",
        )
        return df


class CentroidSet:
    """
    Ordered k cluster centers, stored as a (k, 2) array in ``centers``.

    The index of a row is its cluster id.  Rows are moved in place by the
    update step and the set is never resized after construction.
    """

    def __init__(self, centers=None):
        self.centers = _validate_coords([] if centers is None else centers, name="centers")

    def __len__(self):
        return len(self.centers)

    def __getitem__(self, k):
        return Centroid(float(self.centers[k, 0]), float(self.centers[k, 1]))

    def __iter__(self):
        for k in range(len(self)):
            yield self[k]

    def __repr__(self):
        return f"CentroidSet(k={len(self)})"

    def copy(self):
        return CentroidSet(self.centers.copy())

    def copy_from(self, other):
        """Overwrite this set's coordinates with ``other``'s (same length required)."""
        if len(other) != len(self):
            raise ValueError("cannot copy between centroid sets of different size")
        self.centers[:] = other.centers

    def to_frame(self):
        df = pd.DataFrame(self.centers, columns=["x", "y"])
        df.index.name = "cluster"
        return df
