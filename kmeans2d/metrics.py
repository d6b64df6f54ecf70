import numpy as np
from sklearn.metrics import (
    silhouette_score,
    calinski_harabasz_score,
    davies_bouldin_score,
)


def _assigned(X, labels):
    X = np.asarray(X, dtype=float)
    labels = np.asarray(labels)
    mask = labels >= 0
    return X[mask], labels[mask]


def _enough_clusters(labels):
    # sklearn's internal scores need 2 <= n_labels <= n_samples - 1
    n_labels = len(set(labels.tolist()))
    return 1 < n_labels < len(labels)


def compute_silhouette(X, labels):
    X, labels = _assigned(X, labels)
    if _enough_clusters(labels):
        return float(silhouette_score(X, labels))
    return np.nan


def compute_calinski_harabasz(X, labels):
    X, labels = _assigned(X, labels)
    if _enough_clusters(labels):
        return float(calinski_harabasz_score(X, labels))
    return np.nan


def compute_davies_bouldin(X, labels):
    X, labels = _assigned(X, labels)
    if _enough_clusters(labels):
        return float(davies_bouldin_score(X, labels))
    return np.nan


def compute_inertia(X, labels, centroids):
    """
    Sum of squared distances from each assigned point to its centroid.

    This is the k-means objective; unassigned points (label -1) are ignored.
    """
    X, labels = _assigned(X, labels)
    if len(labels) == 0:
        return 0.0
    diffs = X - np.asarray(centroids, dtype=float)[labels]
    return float(np.einsum('ij,ij->', diffs, diffs))


def compute_wcss_per_cluster(X, labels, centroids):
    """
    Returns dict {cluster_id: within-cluster sum of squares}.
    """
    X, labels = _assigned(X, labels)
    wcss = {}
    for idx, c in enumerate(np.asarray(centroids, dtype=float)):
        pts = X[labels == idx]
        wcss[idx] = float(np.sum((pts - c)**2)) if len(pts) else 0.0
    return wcss


def cluster_population_distribution(labels, n_clusters=None):
    """
    Number of points per cluster.  With ``n_clusters`` given, empty
    clusters are reported with a count of 0.
    """
    labels = np.asarray(labels)
    labels = labels[labels >= 0]
    if n_clusters is None:
        unique, counts = np.unique(labels, return_counts=True)
        return {int(u): int(c) for u, c in zip(unique, counts)}
    counts = np.bincount(labels, minlength=n_clusters)
    return {k: int(counts[k]) for k in range(n_clusters)}


def average_distance_to_centroids(X, labels, centroids):
    if centroids is None:
        return {}
    X, labels = _assigned(X, labels)
    distances = {}
    for idx, center in enumerate(np.asarray(centroids, dtype=float)):
        pts = X[labels == idx]
        if len(pts) > 0:
            distances[idx] = float(np.mean(np.linalg.norm(pts - center, axis=1)))
        else:
            distances[idx] = np.nan
    return distances


def compute_unbalanced_factor(labels):
    """
    Ratio of largest cluster size to smallest non-empty cluster size.
    """
    labels = np.asarray(labels)
    unique, counts = np.unique(labels[labels >= 0], return_counts=True)
    if len(counts) < 2:
        return float('nan')
    return float(counts.max() / counts.min())


def compute_all_metrics(X, labels, centroids=None):
    n_clusters = None if centroids is None else len(centroids)
    return {
        "inertia": compute_inertia(X, labels, centroids) if centroids is not None else np.nan,
        "silhouette": compute_silhouette(X, labels),
        "calinski_harabasz": compute_calinski_harabasz(X, labels),
        "davies_bouldin": compute_davies_bouldin(X, labels),
        "population": cluster_population_distribution(labels, n_clusters),
        "avg_distance": average_distance_to_centroids(X, labels, centroids),
        "wcss": compute_wcss_per_cluster(X, labels, centroids) if centroids is not None else {},
        "unbalanced_factor": compute_unbalanced_factor(labels),
    }
