"""
StormSim Error Types

Both error kinds are caller-correctable input problems. They subclass
ValueError so existing ``except ValueError`` handlers keep catching them.
"""


class StormSimError(Exception):
    """Base class for StormSim errors."""


class InvalidConfigError(StormSimError, ValueError):
    """Missing or out-of-range field at construction or spawn time."""


class InvalidInputError(StormSimError, ValueError):
    """Negative time step or malformed environment / world object."""
