"""Random point sets for the two trainers."""

import logging

import numpy as np
from sklearn.datasets import make_blobs

from .config import BLOB_SIZES, KMEANS_POINT_COUNT, NOISE_POINT_COUNT
from .geometry import Point

logger = logging.getLogger(__name__)


def uniform_points(bounds, rng, n=KMEANS_POINT_COUNT) -> list[Point]:
    xs = rng.uniform(0, bounds.width, size=n)
    ys = rng.uniform(0, bounds.height, size=n)
    return [Point(float(x), float(y)) for x, y in zip(xs, ys)]


def blob_centers(bounds) -> np.ndarray:
    """Upper-left and lower-right blob centres, scaled to the canvas."""
    return np.array([
        (0.22 * bounds.width, 0.35 * bounds.height),
        (0.59 * bounds.width, 0.75 * bounds.height),
    ])


def blobs_with_noise(bounds, rng, sizes=BLOB_SIZES, n_noise=NOISE_POINT_COUNT,
                     cluster_std=None) -> list[Point]:
    """Gaussian blobs followed by uniform noise, in that order.

    Blob points come first so the DBSCAN scan meets a dense region before
    any noise.
    """
    if cluster_std is None:
        cluster_std = 0.05 * min(bounds.width, bounds.height)
    X, _ = make_blobs(
        n_samples=list(sizes),
        centers=blob_centers(bounds)[:len(sizes)],
        cluster_std=cluster_std,
        shuffle=False,
        random_state=int(rng.integers(2**31 - 1)),
    )
    X = np.clip(X, (0, 0), (bounds.width, bounds.height))
    noise = np.column_stack((
        rng.uniform(0, bounds.width, size=n_noise),
        rng.uniform(0, bounds.height, size=n_noise),
    ))
    X = np.vstack([X, noise])
    logger.debug(f"Generated {len(X)} points ({sum(sizes)} in blobs, {n_noise} noise)")
    return [Point(float(x), float(y)) for x, y in X]
