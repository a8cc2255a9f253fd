import numpy as np
import pytest

from clustertrainer.geometry import Point


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def make_points(coords):
    return [Point(float(x), float(y)) for x, y in coords]


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def two_pairs():
    return make_points([(0, 0), (0, 1), (10, 10), (10, 11)])


@pytest.fixture
def line_points():
    # 0 is too sparse on its own but sits next to the core point 1.
    return make_points([(0, 0), (1, 0), (2, 0), (3, 0)])
