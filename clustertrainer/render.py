"""
Render projection: snapshot → drawable primitives and explanation text.

Nothing here draws. The Tk canvas and the matplotlib backend both consume
the same primitives, so what a student sees does not depend on the host.
Primitives are listed back to front.
"""

from dataclasses import dataclass

from .config import PALETTE
from .controller import SimulationState
from .dbscan import Outcome
from .geometry import UNASSIGNED, Classification
from .kmeans import Termination

UNASSIGNED_COLOUR = "#cccccc"
NOISE_COLOUR = "#999999"

POINT_RADIUS = {
    Classification.CORE: 7,
    Classification.BORDER: 5,
    Classification.NOISE: 3,
    Classification.UNCLASSIFIED: 5,
}
CENTROID_RADIUS = 8


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float
    fill: str | None
    outline: str | None = None
    width: float = 0.0
    alpha: float = 1.0
    tag: str = "point"


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    text: str
    colour: str = "#000000"
    tag: str = "label"


def cluster_colour(cluster_id) -> str:
    return PALETTE[cluster_id % len(PALETTE)]


# =============================================================================
# Projection
# =============================================================================

def project(snapshot) -> list:
    if snapshot.algorithm == "kmeans":
        return _project_kmeans(snapshot)
    if snapshot.algorithm == "dbscan":
        return _project_dbscan(snapshot)
    raise ValueError(f"Unknown algorithm {snapshot.algorithm!r}")


def _project_kmeans(snapshot):
    out = []
    for p in snapshot.points:
        fill = cluster_colour(p.cluster_id) if p.cluster_id != UNASSIGNED else UNASSIGNED_COLOUR
        out.append(Circle(p.x, p.y, 5, fill))
    for i, (x, y) in enumerate(snapshot.centroids):
        out.append(Circle(x, y, CENTROID_RADIUS, cluster_colour(i), outline="#000000", width=2, tag="centroid"))
        out.append(Label(x + CENTROID_RADIUS + 4, y + CENTROID_RADIUS + 4, f"C{i}", tag="centroid_label"))
    return out


def _project_dbscan(snapshot):
    out = []
    visit = snapshot.extra.get("visit")
    epsilon = snapshot.extra.get("epsilon", snapshot.config.epsilon)
    highlight = visit is not None and visit.outcome != Outcome.SKIPPED

    if highlight:
        p = snapshot.points[visit.index]
        out.append(Circle(p.x, p.y, epsilon, "#c8c8c8", outline="#969696", width=1, alpha=0.2, tag="epsilon"))

    for i, p in enumerate(snapshot.points):
        size = POINT_RADIUS[p.classification]
        if p.cluster_id != UNASSIGNED:
            fill = cluster_colour(p.cluster_id)
        elif p.classification == Classification.NOISE:
            fill = NOISE_COLOUR
        else:
            fill = UNASSIGNED_COLOUR

        if highlight and i == visit.index:
            out.append(Circle(p.x, p.y, size + 5, "#ffff00", alpha=0.3, tag="processing"))
        if highlight and i in visit.neighbors:
            out.append(Circle(p.x, p.y, size + 3, "#00ffff", alpha=0.3, tag="neighbor"))

        if p.classification == Classification.CORE:
            out.append(Circle(p.x, p.y, size, fill, outline="#000000", width=2))
        elif p.classification == Classification.BORDER:
            out.append(Circle(p.x, p.y, size, fill, outline="#555555", width=1))
        else:
            out.append(Circle(p.x, p.y, size, fill))
    return out


# =============================================================================
# Legend & explanation
# =============================================================================

def legend(snapshot) -> list[tuple[str, str]]:
    if snapshot.algorithm == "dbscan":
        entries = [("Unclassified", UNASSIGNED_COLOUR), ("Noise", NOISE_COLOUR)]
        ids = range(snapshot.cluster_count)
    else:
        entries = [("Unassigned", UNASSIGNED_COLOUR)]
        ids = range(len(snapshot.centroids))
    entries += [(f"Cluster {cid}", cluster_colour(cid)) for cid in ids]
    return entries


def describe(snapshot) -> str:
    if snapshot.algorithm == "kmeans":
        return _describe_kmeans(snapshot)
    return _describe_dbscan(snapshot)


def _describe_kmeans(snapshot):
    extra = snapshot.extra
    n = len(snapshot.points)
    header = f"Iteration {snapshot.step} / {extra.get('max_iterations')}"
    if snapshot.step == 0:
        return (f"{header}\n{n} points, {len(snapshot.centroids)} centroids placed at random.\n"
                "Each iteration assigns every point to its nearest centroid, "
                "then moves each centroid to the mean of its points.")
    lines = [header, f"Inertia: {extra.get('inertia', 0.0):.1f}",
             f"Non-empty clusters: {extra.get('occupied', snapshot.cluster_count)} / {snapshot.cluster_count}"]
    if extra.get("changed"):
        lines.append("Some points changed cluster; centroids moved to the new means.")
    else:
        lines.append("No point changed cluster.")
    termination = extra.get("termination")
    if termination == Termination.CONVERGED:
        lines.append(f"Converged after {snapshot.step} iterations.")
    elif termination == Termination.MAX_ITERATIONS:
        lines.append("Stopped at the iteration limit without converging.")
    return "\n".join(lines)


def _describe_dbscan(snapshot):
    extra = snapshot.extra
    visit = extra.get("visit")
    counts = extra.get("counts", {})
    lines = [f"Step {snapshot.step} / {len(snapshot.points)}, clusters found: {snapshot.cluster_count}"]

    if visit is None:
        lines.append(f"ε = {snapshot.config.epsilon:g}, minPts = {snapshot.config.min_points}. "
                     "Points are visited in order.")
    elif visit.outcome == Outcome.SKIPPED:
        lines.append(f"Point {visit.index} was already labelled, skipped.")
    elif visit.outcome == Outcome.NOISE:
        lines.append(f"Point {visit.index} has {len(visit.neighbors)} ε-neighbours "
                     f"(< {snapshot.config.min_points}) → NOISE for now.")
    else:
        lines.append(f"Point {visit.index} has {len(visit.neighbors)} ε-neighbours → CORE, "
                     f"starts cluster {visit.cluster_id}.")
        lines.append(f"Expanded over {len(visit.seed_set)} reachable points.")

    if counts:
        lines.append(", ".join(f"{c.value}: {counts.get(c, 0)}" for c in Classification))
    if snapshot.state == SimulationState.COMPLETED:
        lines.append("All points visited. Final labels assigned.")
    return "\n".join(lines)
