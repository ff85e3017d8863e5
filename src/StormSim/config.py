"""
StormSim Configuration Constants

All tunable parameters and default values for the StormSim framework.
Per-kind tables are keyed by the entity kind value ("hurricane",
"supercell", "tornado").
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# =============================================================================
# Simulation Clock
# =============================================================================
DEFAULT_TIME_STEP: float = 1.0
"""Default tick length in seconds."""

DEFAULT_SIMULATION_DURATION: int = 100
"""Default number of steps for a supercell simulator run."""

# =============================================================================
# Entity Defaults
# =============================================================================
@dataclass(frozen=True)
class KindDefaults:
    """Values used when an entity config leaves an optional field unset."""
    intensity: float
    radius: float
    duration: float  # seconds

KIND_DEFAULTS: Dict[str, KindDefaults] = {
    # Tornado intensity is a 1-10 destructive scale
    "tornado": KindDefaults(intensity=1.0, radius=50.0, duration=30.0),
    # Hurricane intensity is maximum sustained wind in mph
    "hurricane": KindDefaults(intensity=80.0, radius=250.0, duration=600.0),
    # Supercell intensity is a 0-10 updraft strength scale
    "supercell": KindDefaults(intensity=2.0, radius=100.0, duration=120.0),
}

# =============================================================================
# Random Generation Bounds
# =============================================================================
@dataclass(frozen=True)
class KindBounds:
    """Half-open [low, high) ranges for procedurally generated entities."""
    intensity: Tuple[float, float]
    radius: Tuple[float, float]
    duration: Tuple[float, float]

KIND_BOUNDS: Dict[str, KindBounds] = {
    "tornado": KindBounds(
        intensity=(0.0, 10.0),
        radius=(50.0, 150.0),
        duration=(15.0, 60.0),
    ),
    "hurricane": KindBounds(
        intensity=(74.0, 180.0),
        radius=(150.0, 400.0),
        duration=(300.0, 900.0),
    ),
    "supercell": KindBounds(
        intensity=(0.0, 10.0),
        radius=(80.0, 200.0),
        duration=(60.0, 240.0),
    ),
}

# =============================================================================
# Hurricane Parameters
# =============================================================================
@dataclass(frozen=True)
class HurricaneParams:
    """Hurricane intensity and motion policy."""
    sst_threshold: float         # Sea-surface temperature for intensification (°C)
    intensification_rate: float  # mph per second per °C above threshold
    shear_penalty: float         # mph per second per m/s of wind shear
    landfall_decay: float        # Exponential decay rate after landfall (1/s)
    max_intensity: float         # Intensity ceiling (mph)
    ambient_pressure: float      # Environmental surface pressure (hPa)
    pressure_drop: float         # Central pressure drop per mph of wind (hPa)
    smoothing_alpha: float       # Track persistence smoothing (0-1)

HURRICANE_PARAMS = HurricaneParams(
    sst_threshold=26.5,
    intensification_rate=0.05,
    shear_penalty=0.02,
    landfall_decay=0.01,
    max_intensity=200.0,
    ambient_pressure=1013.0,
    pressure_drop=0.6,
    smoothing_alpha=0.3,
)

SAFFIR_SIMPSON_THRESHOLDS_MPH: Tuple[float, ...] = (74.0, 96.0, 111.0, 130.0, 157.0)
"""Lower wind bounds (mph) for categories 1 through 5."""

DEFAULT_LEAD_TIMES: Tuple[float, ...] = (60.0, 120.0, 180.0, 240.0)
"""Default projected-path lead times in seconds."""

TRACK_HISTORY_LENGTH: int = 64
"""Number of past positions each entity keeps."""

PATH_VELOCITY_SIGMA: float = 0.5
"""Velocity uncertainty (units/s) used to grow projected-path spread."""

# =============================================================================
# Tornado Parameters
# =============================================================================
@dataclass(frozen=True)
class TornadoParams:
    """Tornado random-walk policy."""
    intensity_jitter: float  # Max intensity change per second
    radius_jitter: float     # Max radius change per second
    wobble: float            # Max positional wobble per second
    decay_fraction: float    # Final share of lifetime spent decaying

TORNADO_PARAMS = TornadoParams(
    intensity_jitter=0.5,
    radius_jitter=2.0,
    wobble=1.0,
    decay_fraction=0.2,
)

# =============================================================================
# Supercell Parameters
# =============================================================================
SUPERCELL_INITIAL_STATE: Dict[str, float] = {
    "temperature": 300.0,  # K
    "pressure": 1.0,       # atm
    "humidity": 0.6,
    "wind_shear": 10.0,    # m/s
    "updraft": 0.0,        # m/s
    "rotation": 0.0,       # 1/s scaled
    "tornado_cooldown": 0.0,
    "tornadoes_spawned": 0,
}
"""Initial supercell state when a simulator config gives none."""

SUPERCELL_PARAMETERS: Dict[str, float] = {
    "reference_temperature": 295.0,  # K, buoyancy baseline
    "relaxation_rate": 0.1,          # 1/s, pull toward environment
    "updraft_gain": 2.0,
    "updraft_decay": 0.1,
    "rotation_gain": 0.002,
    "rotation_decay": 0.05,
    "updraft_per_intensity": 5.0,    # m/s of updraft per intensity unit
    "tornadogenesis_rotation": 1.0,
    "tornado_cooldown": 30.0,        # s
    "deviation": 7.5,                # m/s, right-mover deviation at full rotation
}
"""Default supercell simulation parameters."""
