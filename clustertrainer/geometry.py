"""
Points, centroids and the brute-force neighbourhood query shared by both
kernels.

Coordinates are canvas pixels with the origin in the top-left corner.
"""

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

UNASSIGNED = -1


class Classification(str, Enum):
    UNCLASSIFIED = "unclassified"
    CORE = "core"
    BORDER = "border"
    NOISE = "noise"


# =============================================================================
# Data structures
# =============================================================================

@dataclass
class Point:
    x: float
    y: float
    cluster_id: int = UNASSIGNED
    classification: Classification = Classification.UNCLASSIFIED

    def clear(self):
        self.cluster_id = UNASSIGNED
        self.classification = Classification.UNCLASSIFIED


@dataclass
class Centroid:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float

    def contains(self, x, y) -> bool:
        return 0 <= x <= self.width and 0 <= y <= self.height


# =============================================================================
# Utility functions
# =============================================================================

def distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def neighbors(points, i, epsilon) -> list[int]:
    """Indices ``j != i`` within ``epsilon`` of ``points[i]``, ascending.

    The boundary is inclusive: a point exactly ``epsilon`` away counts.
    """
    p = points[i]
    return [j for j, q in enumerate(points) if j != i and distance(p, q) <= epsilon]


def as_array(items) -> np.ndarray:
    """Coordinates of points or centroids as an ``(n, 2)`` float array."""
    return np.array([(p.x, p.y) for p in items], dtype=float).reshape(-1, 2)
