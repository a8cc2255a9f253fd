"""
The two trainers' simulations: each owns its point arena, its random
generator and the canvas bounds, and exposes its kernel through
:class:`~clustertrainer.controller.StepwiseSimulation`.
"""

import logging
from types import MappingProxyType

import numpy as np

from .config import DEFAULT_BOUNDS, DBSCANConfig, KMeansConfig
from .controller import StepwiseSimulation, view_points
from .datasets import blobs_with_noise, uniform_points
from .dbscan import DBSCANRun
from .errors import ConfigurationError
from .geometry import Point
from .kmeans import KMeansRun, inertia

logger = logging.getLogger(__name__)


def _make_rng(seed):
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


class KMeansSimulation(StepwiseSimulation):
    algorithm = "kmeans"

    def __init__(self, points=None, bounds=DEFAULT_BOUNDS, seed=None, centroids=None):
        self.bounds = bounds
        self.rng = _make_rng(seed)
        if points is None:
            points = uniform_points(bounds, self.rng)
        defaults = KMeansConfig()
        k = len(centroids) if centroids is not None else defaults.k
        self.run = KMeansRun(points, k, defaults.max_iterations, bounds, self.rng, centroids=centroids)
        self._fixed_centroids = centroids is not None

    @property
    def points(self):
        return self.run.points

    @property
    def centroids(self):
        return self.run.centroids

    def step(self):
        return self.run.step()

    @property
    def is_complete(self) -> bool:
        return self.run.is_complete

    @property
    def step_count(self) -> int:
        return self.run.iteration

    @property
    def cluster_count(self) -> int:
        return self.run.cluster_count()

    def restart(self, centroids=None):
        self.run.restart(centroids)

    def regenerate(self):
        self.run.points = uniform_points(self.bounds, self.rng)
        self.run.restart()
        logger.info(f"Generated {len(self.run.points)} uniform points")

    def add_point(self, x, y):
        self.run.points.append(Point(float(x), float(y)))

    def apply_config(self, config, restart):
        if self._fixed_centroids and config.k != self.run.k:
            raise ConfigurationError(
                f"K={config.k} does not match the {self.run.k} centroids this simulation was given")
        self._fixed_centroids = False
        self.run.max_iterations = config.max_iterations
        if config.k != self.run.k:
            self.run.k = config.k
            restart = True
        if restart:
            self.run.restart()

    def validate_run(self, config):
        if config.k > len(self.run.points):
            raise ConfigurationError(f"K={config.k} exceeds the number of points ({len(self.run.points)})")

    def snapshot_fields(self) -> dict:
        run = self.run
        return dict(
            points=view_points(run.points),
            bounds=self.bounds,
            centroids=tuple((c.x, c.y) for c in run.centroids),
            extra=dict(
                termination=run.termination,
                converged=run.converged,
                changed=run.last_changed,
                max_iterations=run.max_iterations,
                inertia=inertia(run.points, run.centroids),
                occupied=run.occupied_clusters(),
            ),
        )


class DBSCANSimulation(StepwiseSimulation):
    algorithm = "dbscan"

    def __init__(self, points=None, bounds=DEFAULT_BOUNDS, seed=None):
        self.bounds = bounds
        self.rng = _make_rng(seed)
        if points is None:
            points = blobs_with_noise(bounds, self.rng)
        defaults = DBSCANConfig()
        self.run = DBSCANRun(points, defaults.epsilon, defaults.min_points)

    @property
    def points(self):
        return self.run.points

    def step(self):
        return self.run.step()

    @property
    def is_complete(self) -> bool:
        return self.run.is_complete

    @property
    def step_count(self) -> int:
        return self.run.cursor

    @property
    def cluster_count(self) -> int:
        return self.run.current_cluster

    def restart(self):
        self.run.restart()

    def regenerate(self):
        self.run.points = blobs_with_noise(self.bounds, self.rng)
        self.run.restart()
        logger.info(f"Generated {len(self.run.points)} points (blobs + noise)")

    def add_point(self, x, y):
        self.run.points.append(Point(float(x), float(y)))

    def apply_config(self, config, restart):
        self.run.epsilon = config.epsilon
        self.run.min_points = config.min_points
        if restart:
            self.run.restart()

    def snapshot_fields(self) -> dict:
        run = self.run
        return dict(
            points=view_points(run.points),
            bounds=self.bounds,
            extra=dict(
                visit=run.last_visit,
                epsilon=run.epsilon,
                counts=MappingProxyType(run.counts()),
            ),
        )
