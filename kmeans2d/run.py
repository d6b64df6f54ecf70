# run.py

import logging

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from kmeans2d.clusterer import KMeansClusterer
from kmeans2d.plotter import plot_clusters, plot_history
from kmeans2d.synthetic_data import generate_demo_dataset, create_centroids


logger = logging.getLogger(__name__)


def main(
    k=3,
    num_samples=25,
    radius=50.0,
    random_state=42,
    max_iterations=1000,
    savepath="kmeans_labels.png",
):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # 1) Four square groups of points, plus k banded seeds
    points = generate_demo_dataset(num_samples=num_samples, radius=radius, random_state=random_state)
    seeds = create_centroids(k, random_state=random_state)

    # 2) Advance one pass at a time, the way an animation loop would
    km = KMeansClusterer(n_clusters=k, init=seeds.centers, max_iterations=max_iterations)
    km.start(points)
    while not km.step():
        if km.max_iterations is not None and km.n_iter_ >= km.max_iterations:
            logger.warning("gave up after %d iterations", km.n_iter_)
            break
    print(f"Stopped after {km.n_iter_} iterations (converged={km.converged_})")
    print(km.centroid_set_.to_frame())

    # 3) Report
    m = km.get_metrics()
    print(f"Inertia: {m['inertia']:.2f}  silhouette: {m['silhouette']:.3f}")
    print(f"Population: {m['population']}")

    # 4) Plot
    ax = plot_clusters(
        km.X_, km.labels_, centroids=km.centroids_,
        title=f"k-means (k={k})",
        savepath=savepath,
    )
    plt.close(ax.figure)
    if savepath:
        fig = plot_history(km.get_history(), savepath=savepath.replace(".png", "_history.png"))
        plt.close(fig)
    return km


if __name__ == "__main__":
    main()
