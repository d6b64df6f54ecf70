import numpy as np
import matplotlib.pyplot as plt
import matplotlib as mpl


UNASSIGNED_COLOR = "#FFC0CB"


def plot_clusters(
        X: np.ndarray,
        labels: np.ndarray,
        centroids: np.ndarray = None,
        title: str = None,
        palette: list = None,
        figsize: tuple = (6, 6),
        savepath: str = None,
        point_size: int = 20,
        alpha: float = 0.7
) -> plt.Axes:
    """
    Scatter-plot X colored by `labels`.  Optionally overplot `centroids`
    in their cluster's color.

    Args:
      X          : array-like, shape (n_samples, 2)
      labels     : int array, shape (n_samples,); -1 marks unassigned points
      centroids  : array, shape (n_clusters, 2), optional
      title      : figure title
      palette    : list of colors, cycled by cluster index; defaults to tab10
      figsize    : figure size
      savepath   : if given, calls fig.savefig(savepath)
      point_size : marker size for data points
      alpha      : point transparency

    Returns:
      ax : the matplotlib Axes instance
    """
    X = np.asarray(X, dtype=float)
    labels = np.asarray(labels)
    fig, ax = plt.subplots(figsize=figsize)

    if palette is None:
        palette = list(mpl.colormaps['tab10'].colors)

    def color_of(lab):
        return palette[int(lab) % len(palette)]

    for lab in np.unique(labels):
        mask = labels == lab
        if lab >= 0:
            col, text = color_of(lab), f"Cluster {lab}"
        else:
            col, text = UNASSIGNED_COLOR, "Unassigned"
        ax.scatter(
            X[mask, 0], X[mask, 1],
            c=[col],
            s=point_size,
            alpha=alpha,
            label=text,
            edgecolor='k' if lab >= 0 else None,
            linewidth=0.2
        )

    if centroids is not None:
        centroids = np.asarray(centroids, dtype=float)
        ax.scatter(
            centroids[:, 0], centroids[:, 1],
            c=[color_of(k) for k in range(len(centroids))],
            edgecolor='black',
            s=200,
            marker='X',
            linewidth=1.5,
            label='Centroids'
        )

    ax.set_aspect('equal', 'box')
    if title:
        ax.set_title(title)
    ax.legend(loc='best', fontsize='small', framealpha=0.8)
    ax.grid(True)
    fig.tight_layout()

    if savepath:
        fig.savefig(savepath)
    return ax


def plot_history(history, figsize=(10, 4), savepath=None):
    """
    Inertia and centroid shift per iteration, from
    ``KMeansClusterer.get_history()``.
    """
    fig, (ax_in, ax_sh) = plt.subplots(1, 2, figsize=figsize, sharex=True)
    its = history['iteration'].to_numpy()

    ax_in.plot(its, history['inertia'].to_numpy(), 'o-', lw=2, color="#0072B2")
    ax_in.set_title("Inertia")
    ax_in.set_xlabel("Iteration")
    ax_in.grid(True)

    ax_sh.plot(its, history['shift'].to_numpy(), 'o-', lw=2, color="#D55E00")
    ax_sh.set_title("Max squared centroid shift")
    ax_sh.set_xlabel("Iteration")
    ax_sh.grid(True)

    fig.tight_layout()
    if savepath:
        fig.savefig(savepath)
    return fig
