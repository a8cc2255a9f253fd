import dataclasses
import math

import pytest

from clustertrainer.config import DBSCANConfig, KMeansConfig
from clustertrainer.controller import SimulationController, SimulationState
from clustertrainer.errors import ConfigurationError, SimulationStateError
from clustertrainer.geometry import Centroid, Classification
from clustertrainer.kmeans import Termination
from clustertrainer.simulations import DBSCANSimulation, KMeansSimulation
from conftest import make_points

S = SimulationState


@pytest.fixture
def dbscan(clock):
    sim = DBSCANSimulation(seed=1)
    return SimulationController(sim, DBSCANConfig(epsilon=30, min_points=5, speed=1), clock=clock)


@pytest.fixture
def small_dbscan(clock):
    sim = DBSCANSimulation(points=make_points([(0, 0), (1, 0), (2, 0), (3, 0)]), seed=1)
    return SimulationController(sim, DBSCANConfig(epsilon=10, min_points=2, speed=10), clock=clock)


@pytest.fixture
def kmeans(clock, two_pairs):
    sim = KMeansSimulation(points=two_pairs, seed=1, centroids=[Centroid(1, 1), Centroid(9, 9)])
    return SimulationController(sim, KMeansConfig(k=2, max_iterations=20, speed=1), clock=clock)


def test_initial_state(dbscan):
    snap = dbscan.snapshot()
    assert snap.state == S.IDLE
    assert snap.step == 0
    assert snap.cluster_count == 0
    assert len(snap.points) == 100


def test_manual_step_from_idle_pauses(dbscan):
    assert dbscan.step() is True
    assert dbscan.state == S.PAUSED
    assert dbscan.simulation.step_count == 1


def test_step_rejected_while_running(dbscan):
    dbscan.start()
    before = dbscan.snapshot()
    assert dbscan.step() is False
    after = dbscan.snapshot()
    assert after.state == S.RUNNING
    assert after.step == before.step
    assert after.points == before.points


def test_tick_respects_minimum_interval(dbscan, clock):
    dbscan.start()
    assert dbscan.tick() is True
    assert dbscan.simulation.step_count == 1
    clock.now = 999
    assert dbscan.tick() is True
    assert dbscan.simulation.step_count == 1
    clock.now = 1000
    dbscan.tick()
    assert dbscan.simulation.step_count == 2

    dbscan.pause()
    dbscan.update_config(speed=4)
    dbscan.start()
    clock.now = 1249
    dbscan.tick()
    assert dbscan.simulation.step_count == 2
    clock.now = 1250
    dbscan.tick()
    assert dbscan.simulation.step_count == 3


def test_tick_is_noop_unless_running(dbscan):
    assert dbscan.tick(0) is False
    assert dbscan.simulation.step_count == 0
    dbscan.start()
    dbscan.tick(0)
    dbscan.pause()
    assert dbscan.tick(5000) is False
    assert dbscan.simulation.step_count == 1
    dbscan.reset()
    assert dbscan.tick(10000) is False
    assert dbscan.simulation.step_count == 0


def test_pause_start_resumes_exactly(dbscan):
    dbscan.start()
    for t in (0, 1000, 2000):
        dbscan.tick(t)
    dbscan.pause()
    assert dbscan.state == S.PAUSED
    paused_at = dbscan.snapshot()
    assert paused_at.step == 3

    dbscan.start()
    assert dbscan.snapshot().step == 3
    dbscan.tick(3000)
    assert dbscan.snapshot().step == 4
    assert dbscan.simulation.run.last_visit.index == 3


def test_reset_returns_to_idle_with_new_points(dbscan):
    old_points = dbscan.simulation.points
    dbscan.fast_forward(limit=10)
    dbscan.reset()
    snap = dbscan.snapshot()
    assert snap.state == S.IDLE
    assert snap.step == 0
    assert snap.cluster_count == 0
    assert dbscan.simulation.points is not old_points
    assert all(p.classification == Classification.UNCLASSIFIED for p in snap.points)


def test_completes_on_its_own_under_ticks(small_dbscan):
    small_dbscan.start()
    results = [small_dbscan.tick(t) for t in (0, 100, 200, 300)]
    assert results == [True, True, True, False]
    assert small_dbscan.state == S.COMPLETED
    assert small_dbscan.tick(400) is False
    assert small_dbscan.snapshot().step == 4


def test_completes_on_manual_step(small_dbscan):
    for _ in range(4):
        assert small_dbscan.step() is True
    assert small_dbscan.state == S.COMPLETED
    assert small_dbscan.step() is False
    assert small_dbscan.start() is False


def test_toggle_cycle(small_dbscan):
    assert small_dbscan.toggle() is True
    assert small_dbscan.state == S.RUNNING
    assert small_dbscan.toggle() is False
    assert small_dbscan.state == S.PAUSED

    small_dbscan.fast_forward()
    assert small_dbscan.state == S.COMPLETED
    points = small_dbscan.simulation.points

    assert small_dbscan.toggle() is True
    assert small_dbscan.state == S.RUNNING
    assert small_dbscan.snapshot().step == 0
    assert small_dbscan.simulation.points is points


def test_config_rejected_while_running(dbscan):
    dbscan.start()
    with pytest.raises(SimulationStateError):
        dbscan.update_config(epsilon=50)
    assert dbscan.config.epsilon == 30
    assert dbscan.state == S.RUNNING


def test_config_validation(dbscan):
    with pytest.raises(ConfigurationError):
        dbscan.update_config(epsilon=500)
    with pytest.raises(ConfigurationError):
        dbscan.update_config(k=3)
    assert dbscan.config == DBSCANConfig(epsilon=30, min_points=5, speed=1)


def test_kernel_change_restarts_but_speed_does_not(dbscan):
    dbscan.fast_forward(limit=5)
    dbscan.update_config(speed=5)
    assert dbscan.state == S.PAUSED
    assert dbscan.snapshot().step == 5

    dbscan.update_config(epsilon=40)
    snap = dbscan.snapshot()
    assert snap.state == S.IDLE
    assert snap.step == 0
    assert dbscan.simulation.run.epsilon == 40
    assert all(p.cluster_id == -1 for p in snap.points)


def test_add_point(small_dbscan):
    small_dbscan.add_point(100, 100)
    assert len(small_dbscan.simulation.points) == 5

    small_dbscan.start()
    with pytest.raises(SimulationStateError):
        small_dbscan.add_point(5, 5)
    assert len(small_dbscan.simulation.points) == 5

    small_dbscan.pause()
    small_dbscan.fast_forward()
    assert small_dbscan.state == S.COMPLETED
    small_dbscan.add_point(200, 200)
    assert small_dbscan.state == S.IDLE
    assert small_dbscan.snapshot().step == 0
    assert len(small_dbscan.simulation.points) == 6


def test_fast_forward_rejected_while_running(dbscan):
    dbscan.start()
    with pytest.raises(SimulationStateError):
        dbscan.fast_forward()


def test_fast_forward_visits_every_point(dbscan):
    done = dbscan.fast_forward()
    assert done == 100
    assert dbscan.state == S.COMPLETED
    assert all(p.classification != Classification.UNCLASSIFIED for p in dbscan.snapshot().points)


def test_subscribers(dbscan):
    seen = []
    unsubscribe = dbscan.subscribe(seen.append)
    dbscan.step()
    dbscan.start()
    dbscan.tick(0)
    assert [s.state for s in seen] == [S.PAUSED, S.RUNNING, S.RUNNING]
    assert seen[-1].step == 2
    unsubscribe()
    dbscan.pause()
    assert len(seen) == 3


def test_snapshot_is_immutable(dbscan):
    snap = dbscan.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.step = 5
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.points[0].cluster_id = 3
    dbscan.fast_forward()
    assert all(p.classification == Classification.UNCLASSIFIED for p in snap.points)


def test_kmeans_converges_through_controller(kmeans):
    kmeans.start()
    kmeans.tick(0)
    snap = kmeans.snapshot()
    assert snap.step == 1
    assert snap.centroids == (pytest.approx((0, 0.5)), pytest.approx((10, 10.5)))
    assert kmeans.tick(1000) is False
    snap = kmeans.snapshot()
    assert snap.state == S.COMPLETED
    assert snap.extra["termination"] == Termination.CONVERGED
    assert snap.cluster_count == 2


def test_kmeans_iteration_cap(kmeans):
    kmeans.update_config(max_iterations=1)
    assert kmeans.state == S.IDLE
    kmeans.step()
    snap = kmeans.snapshot()
    assert snap.state == S.COMPLETED
    assert snap.extra["termination"] == Termination.MAX_ITERATIONS
    assert snap.extra["converged"] is False

    kmeans.update_config(max_iterations=5)
    assert kmeans.state == S.PAUSED
    kmeans.step()
    assert kmeans.state == S.COMPLETED
    assert kmeans.snapshot().extra["termination"] == Termination.CONVERGED


def test_kmeans_rejects_k_above_point_count(kmeans):
    kmeans.update_config(k=5)
    with pytest.raises(ConfigurationError):
        kmeans.start()
    assert kmeans.state == S.IDLE
    with pytest.raises(ConfigurationError):
        kmeans.step()
    assert kmeans.state == S.IDLE


def test_kmeans_k_change_reseeds_centroids(kmeans):
    kmeans.update_config(k=3)
    assert len(kmeans.snapshot().centroids) == 3
    assert kmeans.state == S.IDLE


def test_kmeans_reset_regenerates(kmeans):
    kmeans.step()
    kmeans.reset()
    snap = kmeans.snapshot()
    assert len(snap.points) == 100
    assert snap.step == 0
    assert snap.state == S.IDLE
    assert len(snap.centroids) == 2


def test_kmeans_cap_reached_while_still_changing(clock):
    pts = make_points([(x, 0) for x in range(11)])
    sim = KMeansSimulation(points=pts, seed=1, centroids=[Centroid(0, 0), Centroid(1, 0)])
    controller = SimulationController(sim, KMeansConfig(k=2, max_iterations=3), clock=clock)
    assert controller.fast_forward() == 3
    snap = controller.snapshot()
    assert snap.state == S.COMPLETED
    assert snap.step == 3
    assert snap.extra["changed"] is True
    assert snap.extra["converged"] is False
    assert snap.extra["termination"] == Termination.MAX_ITERATIONS


def test_kmeans_cluster_ids_below_count_with_empty_cluster(clock):
    pts = make_points([(0, 0), (1, 0), (0, 1), (1, 1)])
    centroids = [Centroid(0, 0), Centroid(400, 400), Centroid(600, 400), Centroid(1, 0)]
    sim = KMeansSimulation(points=pts, seed=1, centroids=centroids)
    controller = SimulationController(sim, KMeansConfig(k=4), clock=clock)
    controller.step()
    snap = controller.snapshot()
    assert [p.cluster_id for p in snap.points] == [0, 3, 0, 3]
    assert snap.cluster_count == 4
    assert snap.extra["occupied"] == 2
    assert all(p.cluster_id == -1 or p.cluster_id < snap.cluster_count for p in snap.points)


def test_kmeans_centroids_must_match_k(two_pairs):
    sim = KMeansSimulation(points=two_pairs, centroids=[Centroid(1, 1), Centroid(9, 9)])
    with pytest.raises(ConfigurationError):
        SimulationController(sim, KMeansConfig(k=3))
    assert len(sim.centroids) == 2


def test_non_finite_config_rejected(dbscan):
    for value in (math.nan, math.inf, "3"):
        with pytest.raises(ConfigurationError):
            dbscan.update_config(min_points=value)
        with pytest.raises(ConfigurationError):
            dbscan.update_config(epsilon=value)
    assert dbscan.config == DBSCANConfig(epsilon=30, min_points=5, speed=1)


def test_snapshot_extra_is_read_only(small_dbscan, kmeans):
    small_dbscan.step()
    snap = small_dbscan.snapshot()
    with pytest.raises(TypeError):
        snap.extra["epsilon"] = 99
    with pytest.raises(TypeError):
        snap.extra["counts"][Classification.CORE] = 0
    with pytest.raises(TypeError):
        kmeans.snapshot().extra["changed"] = False
