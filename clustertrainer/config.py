"""
Configuration for the trainers.

Parameters are frozen dataclasses so that a running simulation never sees a
half-edited configuration; the controller swaps in a validated copy instead.
Widget ranges in the Tk windows are taken from the ``*_RANGE`` constants.
"""

import logging
import math
import numbers
from dataclasses import dataclass, fields

from .errors import ConfigurationError
from .geometry import Bounds

# =============================================================================
# Constants
# =============================================================================

DEFAULT_BOUNDS = Bounds(800.0, 500.0)

EPSILON_RANGE = (10.0, 100.0)
MIN_POINTS_RANGE = (2, 20)
K_RANGE = (1, 10)
SPEED_RANGE = (1, 10)
MAX_ITERATIONS_RANGE = (1, 100)

KMEANS_POINT_COUNT = 100
BLOB_SIZES = (40, 40)
NOISE_POINT_COUNT = 20

# Host redraw cadence; the controller gates the actual step rate.
FRAME_INTERVAL_MS = 16

PALETTE = (
    "#3498db", "#e74c3c", "#2ecc71", "#f39c12", "#9b59b6",
    "#1abc9c", "#d35400", "#34495e", "#16a085", "#c0392b",
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _check_range(name, value, bounds, integer=False):
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    if integer and int(value) != value:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ConfigurationError(f"{name} must be in [{low}, {high}], got {value!r}")


# =============================================================================
# Parameter sets
# =============================================================================

@dataclass(frozen=True)
class KMeansConfig:
    k: int = 3
    max_iterations: int = 20
    speed: int = 1

    # Changing one of these invalidates the progress of a run.
    KERNEL_FIELDS = ("k",)

    def validate(self) -> "KMeansConfig":
        _check_range("k", self.k, K_RANGE, integer=True)
        _check_range("max_iterations", self.max_iterations, MAX_ITERATIONS_RANGE, integer=True)
        _check_range("speed", self.speed, SPEED_RANGE, integer=True)
        return self


@dataclass(frozen=True)
class DBSCANConfig:
    epsilon: float = 30.0
    min_points: int = 5
    speed: int = 1

    KERNEL_FIELDS = ("epsilon", "min_points")

    def validate(self) -> "DBSCANConfig":
        _check_range("epsilon", self.epsilon, EPSILON_RANGE)
        _check_range("min_points", self.min_points, MIN_POINTS_RANGE, integer=True)
        _check_range("speed", self.speed, SPEED_RANGE, integer=True)
        return self


def field_names(config) -> set[str]:
    return {f.name for f in fields(config)}


def configure_logging(level="INFO"):
    """Install a root handler. Only the launcher calls this."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
