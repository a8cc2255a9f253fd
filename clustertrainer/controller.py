"""
Stepwise simulation controller.

The controller separates "do one unit of work" (``StepwiseSimulation.step``)
from "do units at a wall-clock rate". The host owns the actual timer: it
calls :meth:`SimulationController.tick` from its animation callback and keeps
scheduling while ``tick`` returns True. The controller only decides whether
enough time has passed since the previous fired tick, and whether another
tick is wanted at all.

State machine::

    IDLE --step--> PAUSED --start--> RUNNING --pause--> PAUSED
      \\--start-------------------------^   |
                                            +--(terminal)--> COMPLETED
    any --reset--> IDLE

Everything runs on the host's single thread. A tick that was scheduled before
``pause()`` or ``reset()`` sees the new state and does nothing.
"""

import dataclasses
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .config import field_names
from .errors import ConfigurationError, SimulationStateError
from .geometry import Classification

logger = logging.getLogger(__name__)


class SimulationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


# =============================================================================
# Snapshots
# =============================================================================

@dataclass(frozen=True)
class PointView:
    x: float
    y: float
    cluster_id: int
    classification: Classification


@dataclass(frozen=True)
class Snapshot:
    """Immutable picture of a simulation after a tick."""
    algorithm: str
    state: SimulationState
    step: int
    cluster_count: int
    points: tuple[PointView, ...]
    config: Any
    bounds: Any = None
    centroids: tuple[tuple[float, float], ...] = ()
    extra: Mapping = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def is_running(self) -> bool:
        return self.state == SimulationState.RUNNING


def view_points(points) -> tuple[PointView, ...]:
    return tuple(PointView(p.x, p.y, p.cluster_id, p.classification) for p in points)


# =============================================================================
# Simulation interface
# =============================================================================

class StepwiseSimulation(ABC):
    """One algorithm whose work can be advanced a unit at a time."""

    algorithm = "simulation"

    @abstractmethod
    def step(self):
        """Perform exactly one unit of work."""

    @property
    @abstractmethod
    def is_complete(self) -> bool:
        ...

    @property
    @abstractmethod
    def step_count(self) -> int:
        ...

    @property
    @abstractmethod
    def cluster_count(self) -> int:
        ...

    @abstractmethod
    def restart(self):
        """Discard progress, keep the current points."""

    @abstractmethod
    def regenerate(self):
        """Replace the points with fresh random data and restart."""

    @abstractmethod
    def add_point(self, x, y):
        ...

    @abstractmethod
    def apply_config(self, config, restart: bool):
        ...

    def validate_run(self, config):
        """Raise ConfigurationError if a run cannot start with ``config``."""

    @abstractmethod
    def snapshot_fields(self) -> dict:
        """Keyword arguments for :class:`Snapshot` beyond the common ones."""


# =============================================================================
# Controller
# =============================================================================

class SimulationController:
    def __init__(self, simulation: StepwiseSimulation, config, clock: Callable[[], float] | None = None):
        self.simulation = simulation
        self.config = config.validate()
        self.simulation.apply_config(self.config, restart=False)
        self.state = SimulationState.IDLE
        self._clock = clock or (lambda: time.monotonic() * 1000.0)
        self._last_tick_at: float | None = None
        self._subscribers: list[Callable[[Snapshot], None]] = []

    # ------------------------------------------------ Observers
    def subscribe(self, callback: Callable[[Snapshot], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self) -> Snapshot:
        return Snapshot(
            algorithm=self.simulation.algorithm,
            state=self.state,
            step=self.simulation.step_count,
            cluster_count=self.simulation.cluster_count,
            config=self.config,
            **self.simulation.snapshot_fields(),
        )

    def _notify(self):
        if not self._subscribers:
            return
        snap = self.snapshot()
        for callback in list(self._subscribers):
            callback(snap)

    def _set_state(self, state):
        if state != self.state:
            logger.info(f"{self.simulation.algorithm}: {self.state.value} → {state.value}")
            self.state = state

    # ------------------------------------------------ Properties
    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.config.speed

    @property
    def is_running(self) -> bool:
        return self.state == SimulationState.RUNNING

    @property
    def can_edit(self) -> bool:
        return self.state != SimulationState.RUNNING

    # ------------------------------------------------ Stepping control
    def _advance(self):
        self.simulation.step()
        if self.simulation.is_complete:
            self._set_state(SimulationState.COMPLETED)

    def step(self) -> bool:
        """Perform one unit of work by hand.

        Rejected while RUNNING (the scheduled tick owns the next unit) and
        once COMPLETED. Returns whether a unit was performed.
        """
        if self.state == SimulationState.RUNNING:
            logger.debug("Manual step ignored while running")
            return False
        if self.state == SimulationState.COMPLETED:
            logger.debug("Manual step ignored, simulation completed")
            return False
        if self.state == SimulationState.IDLE:
            self.simulation.validate_run(self.config)
            self._set_state(SimulationState.PAUSED)
        self._advance()
        self._notify()
        return True

    def start(self) -> bool:
        if self.state == SimulationState.RUNNING:
            return False
        if self.state == SimulationState.COMPLETED:
            logger.debug("Start ignored, simulation completed; reset or toggle first")
            return False
        if self.state == SimulationState.IDLE:
            self.simulation.validate_run(self.config)
        if self.simulation.is_complete:
            # e.g. nothing to do on an empty point set
            self._set_state(SimulationState.COMPLETED)
            self._notify()
            return False
        self._set_state(SimulationState.RUNNING)
        self._notify()
        return True

    def pause(self) -> bool:
        if self.state != SimulationState.RUNNING:
            return False
        self._set_state(SimulationState.PAUSED)
        self._notify()
        return True

    def reset(self):
        """Throw away progress and points, regenerate data, back to IDLE."""
        self.simulation.regenerate()
        self._last_tick_at = None
        self._set_state(SimulationState.IDLE)
        self._notify()

    def restart(self):
        """Like :meth:`reset` but keep the current points."""
        self.simulation.restart()
        self._last_tick_at = None
        self._set_state(SimulationState.IDLE)
        self._notify()

    def toggle(self) -> bool:
        """Play/pause button. Returns True if the simulation is now running."""
        if self.state == SimulationState.RUNNING:
            self.pause()
            return False
        if self.state == SimulationState.COMPLETED:
            self.restart()
        return self.start()

    def tick(self, now: float | None = None) -> bool:
        """Host timer callback. Returns whether to schedule another tick."""
        if self.state != SimulationState.RUNNING:
            return False
        if now is None:
            now = self._clock()
        if self._last_tick_at is not None and now - self._last_tick_at < self.interval_ms:
            return True
        self._last_tick_at = now
        self._advance()
        self._notify()
        return self.state == SimulationState.RUNNING

    def fast_forward(self, limit: int | None = None) -> int:
        """Step until the run completes (or ``limit`` units). Returns units done."""
        if self.state == SimulationState.RUNNING:
            raise SimulationStateError("Pause the simulation before fast-forwarding")
        if self.state == SimulationState.COMPLETED:
            return 0
        if self.state == SimulationState.IDLE:
            self.simulation.validate_run(self.config)
            self._set_state(SimulationState.PAUSED)
        done = 0
        while self.state != SimulationState.COMPLETED and (limit is None or done < limit):
            if self.simulation.is_complete:
                self._set_state(SimulationState.COMPLETED)
                break
            self._advance()
            done += 1
        self._notify()
        return done

    # ------------------------------------------------ Editing
    def update_config(self, **changes):
        """Change parameters. Rejected while RUNNING.

        Changing a kernel parameter restarts the run on the same points.
        """
        if self.state == SimulationState.RUNNING:
            logger.warning(f"Rejected configuration change while running: {changes}")
            raise SimulationStateError("Configuration cannot change while the simulation is running")
        unknown = set(changes) - field_names(self.config)
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        new_config = dataclasses.replace(self.config, **changes).validate()
        if new_config == self.config:
            return self.config

        restart = any(getattr(new_config, f) != getattr(self.config, f) for f in new_config.KERNEL_FIELDS)
        self.config = new_config
        self.simulation.apply_config(new_config, restart=restart)
        if restart:
            self._last_tick_at = None
            self._set_state(SimulationState.IDLE)
        elif self.state == SimulationState.COMPLETED and not self.simulation.is_complete:
            # e.g. max_iterations raised after the cap was hit
            self._set_state(SimulationState.PAUSED)
        elif self.state == SimulationState.PAUSED and self.simulation.is_complete:
            self._set_state(SimulationState.COMPLETED)
        logger.info(f"Configuration updated: {new_config}")
        self._notify()
        return new_config

    def add_point(self, x, y):
        if self.state == SimulationState.RUNNING:
            logger.warning(f"Rejected point ({x:.1f}, {y:.1f}) while running")
            raise SimulationStateError("Points cannot be added while the simulation is running")
        self.simulation.add_point(x, y)
        if self.state == SimulationState.COMPLETED:
            self.simulation.restart()
            self._last_tick_at = None
            self._set_state(SimulationState.IDLE)
        self._notify()
