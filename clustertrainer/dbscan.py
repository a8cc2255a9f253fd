"""
DBSCAN kernel, one visitation at a time.

Stepping behaviour
==================
* Points are visited in index order; each ``step()`` handles exactly one.
* A point already in a cluster, or already marked noise, is skipped.
* **Noise** — fewer than ``min_points`` neighbours within epsilon (the point
  itself is not counted). A later expansion may still reclaim it as border.
* **Core** — enough neighbours: it opens the next cluster and the whole
  cluster is grown in the same step from a seed list of its neighbours.
* **Border** — pulled into a cluster during expansion without enough
  neighbours of its own.

The seed list only ever grows at the end and is walked by a cursor, so a
point is expanded at most once per cluster.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .geometry import UNASSIGNED, Classification, neighbors

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SKIPPED = "skipped"
    NOISE = "noise"
    CLUSTER = "cluster"


@dataclass(frozen=True)
class Visit:
    """What one visitation did; enough for the render layer to highlight it."""
    index: int
    outcome: Outcome
    neighbors: tuple[int, ...] = ()
    cluster_id: int = UNASSIGNED
    seed_set: tuple[int, ...] = ()


class DBSCANRun:
    def __init__(self, points, epsilon, min_points):
        self.points = points
        self.epsilon = epsilon
        self.min_points = min_points
        self.cursor = 0
        self.current_cluster = 0
        self.last_visit: Visit | None = None

    @property
    def is_complete(self) -> bool:
        return self.cursor >= len(self.points)

    def neighbors(self, i) -> list[int]:
        return neighbors(self.points, i, self.epsilon)

    def step(self) -> Visit | None:
        if self.is_complete:
            return None

        index = self.cursor
        p = self.points[index]
        self.cursor += 1

        if p.cluster_id != UNASSIGNED or p.classification == Classification.NOISE:
            visit = Visit(index, Outcome.SKIPPED)
            logger.debug(f"Point {index} already labelled {p.classification.value}, skipped")
            self.last_visit = visit
            return visit

        neigh = self.neighbors(index)
        if len(neigh) < self.min_points:
            p.classification = Classification.NOISE
            visit = Visit(index, Outcome.NOISE, tuple(neigh))
            logger.debug(f"Point {index} has {len(neigh)} neighbours → NOISE")
            self.last_visit = visit
            return visit

        cluster_id = self.current_cluster
        p.cluster_id = cluster_id
        p.classification = Classification.CORE
        seed_set = self._expand(cluster_id, neigh)
        self.current_cluster += 1

        visit = Visit(index, Outcome.CLUSTER, tuple(neigh), cluster_id, tuple(seed_set))
        logger.debug(f"Point {index} is CORE, cluster {cluster_id} grown over {len(seed_set)} seeds")
        self.last_visit = visit
        return visit

    def _expand(self, cluster_id, neigh) -> list[int]:
        seed_set = list(neigh)
        listed = set(seed_set)
        seed_index = 0

        while seed_index < len(seed_set):
            q = self.points[seed_set[seed_index]]

            if q.classification == Classification.NOISE:
                q.cluster_id = cluster_id
                q.classification = Classification.BORDER
            elif q.cluster_id == UNASSIGNED:
                q.cluster_id = cluster_id
                q.classification = Classification.BORDER
                q_neigh = self.neighbors(seed_set[seed_index])
                if len(q_neigh) >= self.min_points:
                    q.classification = Classification.CORE
                    for n in q_neigh:
                        if n not in listed and self.points[n].cluster_id == UNASSIGNED:
                            seed_set.append(n)
                            listed.add(n)

            seed_index += 1

        return seed_set

    def restart(self):
        for p in self.points:
            p.clear()
        self.cursor = 0
        self.current_cluster = 0
        self.last_visit = None

    def counts(self) -> dict[Classification, int]:
        out = {c: 0 for c in Classification}
        for p in self.points:
            out[p.classification] += 1
        return out
