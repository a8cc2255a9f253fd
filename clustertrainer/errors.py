"""Exceptions raised at the controller boundary.

Both kinds are precondition violations: they are raised before any point or
cluster state is touched, so a caller can report them and carry on.
"""


class ClusterTrainerError(Exception):
    """Base class for everything the trainer raises on purpose."""


class ConfigurationError(ClusterTrainerError, ValueError):
    """A parameter is outside its allowed range."""


class SimulationStateError(ClusterTrainerError, RuntimeError):
    """The operation is not allowed in the current simulation state."""
