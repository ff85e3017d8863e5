"""
StormSim: Severe-Weather Entity Simulation

A deterministic, steppable simulation of hurricanes, supercells and
tornadoes with per-kind trajectory policies, radius-based impact queries
and seedable procedural spawning.
"""

import logging

from .types import (
    EntityKind,
    LifecycleStatus,
    EntityConfig,
    EnvironmentalConditions,
    WorldBounds,
    WorldObject,
    Waypoint,
    SupercellState,
    SupercellParameters,
)
from .config import (
    KIND_DEFAULTS,
    KIND_BOUNDS,
    HURRICANE_PARAMS,
    TORNADO_PARAMS,
    DEFAULT_LEAD_TIMES,
    DEFAULT_SIMULATION_DURATION,
)
from .errors import (
    StormSimError,
    InvalidConfigError,
    InvalidInputError,
)
from .entity import WeatherEntity, saffir_simpson_category
from .trajectory import (
    TrajectoryModel,
    HurricaneTrajectory,
    TornadoTrajectory,
    SupercellTrajectory,
    step_supercell_state,
    smooth_track,
    default_trajectory,
)
from .spatial import (
    check_collisions,
    assess_impact,
    ImpactAssessment,
)
from .generator import RandomGenerator
from .manager import EntityManager, TickReport
from .simulator import (
    Simulator,
    SimulationResult,
    create_simulator,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    # Types
    "EntityKind",
    "LifecycleStatus",
    "EntityConfig",
    "EnvironmentalConditions",
    "WorldBounds",
    "WorldObject",
    "Waypoint",
    "SupercellState",
    "SupercellParameters",
    # Config
    "KIND_DEFAULTS",
    "KIND_BOUNDS",
    "HURRICANE_PARAMS",
    "TORNADO_PARAMS",
    "DEFAULT_LEAD_TIMES",
    "DEFAULT_SIMULATION_DURATION",
    # Errors
    "StormSimError",
    "InvalidConfigError",
    "InvalidInputError",
    # Entity
    "WeatherEntity",
    "saffir_simpson_category",
    # Trajectory
    "TrajectoryModel",
    "HurricaneTrajectory",
    "TornadoTrajectory",
    "SupercellTrajectory",
    "step_supercell_state",
    "smooth_track",
    "default_trajectory",
    # Spatial
    "check_collisions",
    "assess_impact",
    "ImpactAssessment",
    # Generator
    "RandomGenerator",
    # Manager
    "EntityManager",
    "TickReport",
    # Simulator
    "Simulator",
    "SimulationResult",
    "create_simulator",
]
