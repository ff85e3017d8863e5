"""
StormSim Core Data Types

Data structures for entity configuration, environmental snapshots,
world bounds, projected paths and supercell state.
"""

import math
import numbers
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import SUPERCELL_INITIAL_STATE, SUPERCELL_PARAMETERS
from .errors import InvalidConfigError, InvalidInputError


def is_number(value: Any) -> bool:
    """True for finite real values, numpy scalars included (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def object_coordinates(obj: Any) -> Tuple[float, float]:
    """
    Read (x, y) from a world object.

    Accepts mappings with "x"/"y" keys or objects with x/y attributes.

    Raises:
        InvalidInputError: If the object has no usable coordinates
    """
    if isinstance(obj, Mapping):
        x, y = obj.get("x"), obj.get("y")
    else:
        x, y = getattr(obj, "x", None), getattr(obj, "y", None)
    if not (is_number(x) and is_number(y)):
        raise InvalidInputError(f"World object has no numeric x/y coordinates: {obj!r}")
    return (float(x), float(y))


class EntityKind(str, Enum):
    """Severe-weather phenomenon kinds."""
    HURRICANE = "hurricane"
    SUPERCELL = "supercell"
    TORNADO = "tornado"

    @classmethod
    def coerce(cls, value: Any) -> "EntityKind":
        """Accept an EntityKind or its (case-insensitive) name/value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidConfigError(f"Unknown entity kind: {value!r}")


class LifecycleStatus(Enum):
    """Entity lifecycle as seen by the manager."""
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass
class EntityConfig:
    """
    Recognized construction options for a weather entity.

    Attributes:
        kind: Entity kind
        x: Initial x-coordinate (required)
        y: Initial y-coordinate (required)
        intensity: Strength on the kind's scale. Default per kind.
        radius: Radius of the affected area. Default per kind.
        duration: Total lifetime in seconds. Default per kind.
        entity_id: Explicit identifier. Assigned on spawn if None.
        landfall: Hurricanes only: start already over land
        initial_state: Supercells only: initial SupercellState fields
    """
    kind: EntityKind
    x: Optional[float]
    y: Optional[float]
    intensity: Optional[float] = None
    radius: Optional[float] = None
    duration: Optional[float] = None
    entity_id: Optional[str] = None
    landfall: bool = False
    initial_state: Optional[Mapping[str, float]] = None

    @classmethod
    def from_mapping(
        cls,
        options: Mapping[str, Any],
        kind: Any = EntityKind.TORNADO,
    ) -> "EntityConfig":
        """
        Build a config from a plain mapping of recognized options.

        The mapping's own "kind" key wins over the ``kind`` argument.

        Raises:
            InvalidConfigError: On unknown keys or missing position
        """
        if not isinstance(options, Mapping):
            raise InvalidConfigError(f"Entity config must be a mapping, got {type(options).__name__}")
        recognized = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - recognized)
        if unknown:
            raise InvalidConfigError(f"Unrecognized entity options: {', '.join(unknown)}")
        for required in ("x", "y"):
            if required not in options:
                raise InvalidConfigError(f"Entity config is missing required field '{required}'")
        values = dict(options)
        values["kind"] = EntityKind.coerce(values.get("kind", kind))
        return cls(**values)


@dataclass(frozen=True)
class WorldBounds:
    """Spawn area [0, width) x [0, height)."""
    width: float
    height: float

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if not is_number(value) or value <= 0:
                raise InvalidConfigError(f"World bound '{name}' must be a positive number, got {value!r}")

    @classmethod
    def coerce(cls, bounds: Any) -> "WorldBounds":
        if isinstance(bounds, cls):
            return bounds
        if isinstance(bounds, Mapping):
            try:
                return cls(width=bounds["width"], height=bounds["height"])
            except KeyError as e:
                raise InvalidConfigError(f"World bounds missing {e.args[0]!r}") from e
        raise InvalidConfigError(f"Cannot interpret world bounds: {bounds!r}")


@dataclass
class WorldObject:
    """Point-like world object. Any object with x/y works; this is a convenience."""
    x: float
    y: float
    name: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)


FLAG_KEYS: Tuple[str, ...] = ("landfall",)


@dataclass(frozen=True)
class EnvironmentalConditions:
    """
    Immutable snapshot of atmospheric parameters for one tick.

    Recognized keys: temperature (K), pressure (atm), humidity (0-1),
    wind_shear (m/s), sea_surface_temperature (°C), steering_u and
    steering_v (m/s), landfall (bool). Other numeric keys are carried
    through untouched.
    """
    values: Mapping[str, Any] = field(default_factory=dict)
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.values, Mapping):
            raise InvalidInputError(
                f"Environment values must be a mapping, got {type(self.values).__name__}"
            )
        checked = {}
        for key, value in self.values.items():
            if not isinstance(key, str):
                raise InvalidInputError(f"Environment keys must be strings, got {key!r}")
            if key in FLAG_KEYS:
                if not isinstance(value, bool):
                    raise InvalidInputError(f"Environment flag '{key}' must be a bool, got {value!r}")
            elif not is_number(value):
                raise InvalidInputError(f"Environment value '{key}' must be a finite number, got {value!r}")
            checked[key] = value
        object.__setattr__(self, "values", MappingProxyType(checked))

    @classmethod
    def coerce(cls, environment: Any) -> "EnvironmentalConditions":
        """Accept None, a snapshot, or a plain mapping."""
        if environment is None:
            return cls()
        if isinstance(environment, cls):
            return environment
        if isinstance(environment, Mapping):
            return cls(values=environment)
        raise InvalidInputError(f"Malformed environment snapshot: {environment!r}")

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.values

    @property
    def steering(self) -> Optional[Tuple[float, float]]:
        """Steering flow (u, v), or None when the snapshot carries none."""
        if "steering_u" not in self.values and "steering_v" not in self.values:
            return None
        return (float(self.get("steering_u", 0.0)), float(self.get("steering_v", 0.0)))

    @property
    def landfall(self) -> bool:
        return bool(self.get("landfall", False))


@dataclass
class Waypoint:
    """
    Single projected-path position with uncertainty.

    Attributes:
        x: Projected x-coordinate
        y: Projected y-coordinate
        timestamp: Simulation time of the waypoint (seconds)
        sigma: Position uncertainty
    """
    x: float
    y: float
    timestamp: float
    sigma: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        """Position as (x, y) tuple."""
        return (self.x, self.y)


def _from_options(cls, options: Optional[Mapping[str, Any]], defaults: Mapping[str, Any], label: str):
    values = dict(defaults)
    if options:
        if not isinstance(options, Mapping):
            raise InvalidConfigError(f"{label} must be a mapping, got {type(options).__name__}")
        unknown = sorted(set(options) - set(defaults))
        if unknown:
            raise InvalidConfigError(f"Unrecognized {label} keys: {', '.join(unknown)}")
        values.update(options)
    for key, value in values.items():
        if not is_number(value):
            raise InvalidConfigError(f"{label} '{key}' must be a finite number, got {value!r}")
    return cls(**values)


@dataclass(frozen=True)
class SupercellState:
    """
    Internal supercell state, advanced once per tick.

    Attributes:
        temperature: In-cloud temperature (K)
        pressure: Surface pressure (atm)
        humidity: Relative humidity (0-1)
        wind_shear: Deep-layer shear magnitude (m/s)
        updraft: Updraft speed (m/s)
        rotation: Mesocyclone rotation strength
        tornado_cooldown: Seconds until another tornado may form
        tornadoes_spawned: Tornadoes produced so far
    """
    temperature: float = SUPERCELL_INITIAL_STATE["temperature"]
    pressure: float = SUPERCELL_INITIAL_STATE["pressure"]
    humidity: float = SUPERCELL_INITIAL_STATE["humidity"]
    wind_shear: float = SUPERCELL_INITIAL_STATE["wind_shear"]
    updraft: float = SUPERCELL_INITIAL_STATE["updraft"]
    rotation: float = SUPERCELL_INITIAL_STATE["rotation"]
    tornado_cooldown: float = SUPERCELL_INITIAL_STATE["tornado_cooldown"]
    tornadoes_spawned: int = SUPERCELL_INITIAL_STATE["tornadoes_spawned"]

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "SupercellState":
        return _from_options(cls, options, SUPERCELL_INITIAL_STATE, "supercell state")


@dataclass(frozen=True)
class SupercellParameters:
    """Rate constants and thresholds for supercell evolution."""
    reference_temperature: float = SUPERCELL_PARAMETERS["reference_temperature"]
    relaxation_rate: float = SUPERCELL_PARAMETERS["relaxation_rate"]
    updraft_gain: float = SUPERCELL_PARAMETERS["updraft_gain"]
    updraft_decay: float = SUPERCELL_PARAMETERS["updraft_decay"]
    rotation_gain: float = SUPERCELL_PARAMETERS["rotation_gain"]
    rotation_decay: float = SUPERCELL_PARAMETERS["rotation_decay"]
    updraft_per_intensity: float = SUPERCELL_PARAMETERS["updraft_per_intensity"]
    tornadogenesis_rotation: float = SUPERCELL_PARAMETERS["tornadogenesis_rotation"]
    tornado_cooldown: float = SUPERCELL_PARAMETERS["tornado_cooldown"]
    deviation: float = SUPERCELL_PARAMETERS["deviation"]

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "SupercellParameters":
        return _from_options(cls, options, SUPERCELL_PARAMETERS, "simulation parameter")
