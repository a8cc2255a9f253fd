"""
K-means kernel (Lloyd's algorithm), one iteration at a time.

An iteration is an ASSIGN pass (every point to its nearest centroid) followed
by an UPDATE pass (every non-empty cluster's centroid to the mean of its
members). Centroids are seeded uniformly inside the canvas rather than from
the data, so a centroid can start far away from every point and stay empty;
empty clusters keep their centroid.
"""

import logging
from enum import Enum

import numpy as np

from .geometry import UNASSIGNED, Centroid, as_array

logger = logging.getLogger(__name__)


class Termination(str, Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"


# -----------------------------------------------------------------------------
# Kernel functions
# -----------------------------------------------------------------------------

def initialize_centroids(k, bounds, rng) -> list[Centroid]:
    """K centroids uniformly at random within the canvas bounds."""
    xs = rng.uniform(0, bounds.width, size=k)
    ys = rng.uniform(0, bounds.height, size=k)
    return [Centroid(float(x), float(y)) for x, y in zip(xs, ys)]


def assign_points(points, centroids) -> bool:
    """Assign each point to its nearest centroid.

    Ties go to the lowest centroid index. Returns True iff any point's
    ``cluster_id`` changed.
    """
    if not points:
        return False
    X = as_array(points)
    C = as_array(centroids)
    dists = np.linalg.norm(X[:, None] - C[None, :], axis=2)
    labels = np.argmin(dists, axis=1)

    changed = False
    for p, label in zip(points, labels):
        label = int(label)
        if p.cluster_id != label:
            p.cluster_id = label
            changed = True
    return changed


def update_centroids(points, centroids):
    """Move each centroid to the mean of its members, in place."""
    if not points:
        return
    X = as_array(points)
    labels = np.array([p.cluster_id for p in points])
    for j, c in enumerate(centroids):
        members = X[labels == j]
        if len(members) == 0:
            continue
        c.x, c.y = (float(v) for v in members.mean(axis=0))


def inertia(points, centroids) -> float:
    """Sum of squared distances from assigned points to their centroid."""
    total = 0.0
    for p in points:
        if p.cluster_id == UNASSIGNED:
            continue
        c = centroids[p.cluster_id]
        total += (p.x - c.x) ** 2 + (p.y - c.y) ** 2
    return total


# -----------------------------------------------------------------------------
# Run state machine
# -----------------------------------------------------------------------------

class KMeansRun:
    """A single K-means run over a shared point list.

    ``step()`` performs one full iteration. The run is over once an
    iteration reassigns nothing or ``max_iterations`` iterations were done.
    """

    def __init__(self, points, k, max_iterations, bounds, rng, centroids=None):
        self.points = points
        self.k = k
        self.max_iterations = max_iterations
        self.bounds = bounds
        self.rng = rng
        self.centroids = centroids if centroids is not None else initialize_centroids(k, bounds, rng)
        self.iteration = 0
        self.last_changed = None
        self._converged = False

    @property
    def converged(self) -> bool:
        return self._converged

    @property
    def termination(self) -> Termination | None:
        if self._converged:
            return Termination.CONVERGED
        if self.iteration >= self.max_iterations:
            return Termination.MAX_ITERATIONS
        return None

    @property
    def is_complete(self) -> bool:
        return self.termination is not None

    def step(self) -> bool:
        if self.is_complete:
            return False
        changed = assign_points(self.points, self.centroids)
        update_centroids(self.points, self.centroids)
        self.iteration += 1
        self.last_changed = changed
        if not changed:
            self._converged = True
        logger.debug(f"Iteration {self.iteration}: changed={changed}")
        return changed

    def restart(self, centroids=None):
        for p in self.points:
            p.clear()
        self.centroids = centroids if centroids is not None else initialize_centroids(self.k, self.bounds, self.rng)
        self.iteration = 0
        self.last_changed = None
        self._converged = False

    def cluster_count(self) -> int:
        # Empty clusters count too.
        return len(self.centroids)

    def occupied_clusters(self) -> int:
        return len({p.cluster_id for p in self.points if p.cluster_id != UNASSIGNED})
