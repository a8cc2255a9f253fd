"""Draw render primitives with matplotlib."""

from matplotlib.figure import Figure
from matplotlib.patches import Circle as CirclePatch

from .render import Circle, Label, project


def draw_primitives(ax, primitives, bounds, title=None):
    ax.clear()
    for item in primitives:
        if isinstance(item, Circle):
            ax.add_patch(CirclePatch(
                (item.x, item.y), item.radius,
                facecolor=item.fill if item.fill else "none",
                edgecolor=item.outline if item.outline else "none",
                linewidth=item.width,
                alpha=item.alpha,
            ))
        elif isinstance(item, Label):
            ax.text(item.x, item.y, item.text, color=item.colour, fontsize=9)
    ax.set_xlim(0, bounds.width)
    # Canvas coordinates: y grows downwards.
    ax.set_ylim(bounds.height, 0)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    if title:
        ax.set_title(title)


def snapshot_title(snapshot) -> str:
    if snapshot.algorithm == "kmeans":
        return f"K-means (k={len(snapshot.centroids)}), iteration {snapshot.step}"
    return f"DBSCAN, step {snapshot.step}, clusters {snapshot.cluster_count}"


def snapshot_figure(snapshot, figsize=(8, 5)) -> Figure:
    fig = Figure(figsize=figsize)
    ax = fig.add_subplot(111)
    draw_primitives(ax, project(snapshot), snapshot.bounds, title=snapshot_title(snapshot))
    return fig


def save_snapshot(snapshot, path, **kwargs):
    snapshot_figure(snapshot).savefig(path, **kwargs)
