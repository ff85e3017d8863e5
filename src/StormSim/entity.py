"""
Weather Entity Module

Shared lifecycle and state for hurricanes, supercells and tornadoes.
Kind-specific movement lives in trajectory policies held by the entity.
"""

import logging
import uuid
from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from util.math_utils import vector_magnitude

from .config import (
    HURRICANE_PARAMS,
    KIND_DEFAULTS,
    SAFFIR_SIMPSON_THRESHOLDS_MPH,
    TRACK_HISTORY_LENGTH,
)
from .errors import InvalidConfigError, InvalidInputError
from .types import (
    EntityConfig,
    EntityKind,
    LifecycleStatus,
    SupercellState,
    Waypoint,
    is_number,
    object_coordinates,
)

if TYPE_CHECKING:
    from .trajectory import TrajectoryModel

logger = logging.getLogger(__name__)


def saffir_simpson_category(wind_mph: float) -> int:
    """
    Saffir-Simpson category for a sustained wind speed.

    Returns:
        0 below hurricane strength, otherwise 1-5
    """
    category = 0
    for threshold in SAFFIR_SIMPSON_THRESHOLDS_MPH:
        if wind_mph >= threshold:
            category += 1
    return category


class WeatherEntity:
    """
    A simulated severe-weather phenomenon.

    The entity is active while ``elapsed_time < duration``. Once inactive
    it is terminal: further updates are no-ops.
    """

    def __init__(
        self,
        config: Union[EntityConfig, Mapping[str, Any]],
        trajectory: Optional["TrajectoryModel"] = None,
    ):
        """
        Create an entity from a config.

        Args:
            config: EntityConfig or mapping of recognized options
            trajectory: Movement/evolution policy, or None for a static entity

        Raises:
            InvalidConfigError: If required fields are missing or out of range
        """
        if isinstance(config, Mapping):
            config = EntityConfig.from_mapping(config)
        elif not isinstance(config, EntityConfig):
            raise InvalidConfigError(f"Expected EntityConfig or mapping, got {type(config).__name__}")

        kind = EntityKind.coerce(config.kind)
        defaults = KIND_DEFAULTS[kind.value]

        intensity = defaults.intensity if config.intensity is None else config.intensity
        radius = defaults.radius if config.radius is None else config.radius
        duration = defaults.duration if config.duration is None else config.duration

        for name, value in (("x", config.x), ("y", config.y)):
            if value is None:
                raise InvalidConfigError(f"Entity config is missing required field '{name}'")
            if not is_number(value):
                raise InvalidConfigError(f"Position '{name}' must be a finite number, got {value!r}")
        if not is_number(intensity) or intensity < 0:
            raise InvalidConfigError(f"Intensity must be a non-negative number, got {intensity!r}")
        if not is_number(radius) or radius < 0:
            raise InvalidConfigError(f"Radius must be a non-negative number, got {radius!r}")
        if not is_number(duration) or duration <= 0:
            raise InvalidConfigError(f"Duration must be a positive number, got {duration!r}")
        if config.initial_state is not None and kind is not EntityKind.SUPERCELL:
            raise InvalidConfigError(f"initial_state is only recognized for supercells, not {kind.value}")

        self.entity_id: str = config.entity_id or f"{kind.value}-{uuid.uuid4().hex[:8]}"
        self.kind = kind
        self.x = float(config.x)
        self.y = float(config.y)
        self.intensity = float(intensity)
        self.radius = float(radius)
        self.duration = float(duration)
        # Configured starting values; policy bounds are widened to include them
        self.initial_intensity = self.intensity
        self.initial_radius = self.radius
        self.elapsed_time = 0.0
        self.active = True
        self.status = LifecycleStatus.PENDING
        self.trajectory = trajectory

        self.velocity: Tuple[float, float] = (0.0, 0.0)
        self.track = deque([(self.x, self.y)], maxlen=TRACK_HISTORY_LENGTH)
        self.motion_history = deque(maxlen=TRACK_HISTORY_LENGTH)
        self.landfall = bool(config.landfall)
        self.path: List[Waypoint] = []
        self.supercell_state: Optional[SupercellState] = (
            SupercellState.from_mapping(config.initial_state)
            if kind is EntityKind.SUPERCELL else None
        )
        # Configs for entities this one wants spawned; drained by the manager
        self.pending_spawns: List[EntityConfig] = []

    def __repr__(self) -> str:
        return (
            f"WeatherEntity({self.entity_id!r}, kind={self.kind.value}, "
            f"pos=({self.x:.1f}, {self.y:.1f}), intensity={self.intensity:.2f}, "
            f"t={self.elapsed_time:.1f}/{self.duration:.1f}, {self.status.value})"
        )

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, obj: Any) -> float:
        """Planar distance from the entity center to a world object."""
        x, y = object_coordinates(obj)
        return vector_magnitude(x - self.x, y - self.y)

    @property
    def remaining_time(self) -> float:
        return max(0.0, self.duration - self.elapsed_time)

    @property
    def life_fraction(self) -> float:
        """Share of the lifetime already used, in [0, 1]."""
        return min(1.0, self.elapsed_time / self.duration)

    @property
    def category(self) -> Optional[int]:
        """Saffir-Simpson category (hurricanes only)."""
        if self.kind is not EntityKind.HURRICANE:
            return None
        return saffir_simpson_category(self.intensity)

    @property
    def pressure_center(self) -> Optional[float]:
        """Central pressure in hPa (hurricanes only); a linear placeholder in wind speed."""
        if self.kind is not EntityKind.HURRICANE:
            return None
        return HURRICANE_PARAMS.ambient_pressure - HURRICANE_PARAMS.pressure_drop * self.intensity

    def update(self, delta_time: float) -> None:
        """
        Advance the lifetime clock.

        Args:
            delta_time: Non-negative time step in seconds

        Raises:
            InvalidInputError: If delta_time is negative or not a finite number
        """
        if not is_number(delta_time) or delta_time < 0:
            raise InvalidInputError(f"delta_time must be a non-negative number, got {delta_time!r}")
        if not self.active:
            return

        self.elapsed_time += delta_time
        if self.elapsed_time >= self.duration:
            self.active = False
            logger.debug(f"{self.entity_id} reached end of life at t={self.elapsed_time:.1f}s")

    def move_to(self, x: float, y: float) -> None:
        """Set the position and record it in the track."""
        self.x = float(x)
        self.y = float(y)
        self.track.append((self.x, self.y))

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the entity's observable state."""
        snapshot = {
            "entity_id": self.entity_id,
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "intensity": self.intensity,
            "radius": self.radius,
            "elapsed_time": self.elapsed_time,
            "duration": self.duration,
            "active": self.active,
            "status": self.status.value,
        }
        if self.kind is EntityKind.HURRICANE:
            snapshot["landfall"] = self.landfall
            snapshot["category"] = self.category
            snapshot["pressure_center"] = self.pressure_center
            snapshot["path"] = [(wp.x, wp.y, wp.timestamp) for wp in self.path]
        elif self.kind is EntityKind.SUPERCELL:
            state = self.supercell_state
            snapshot["updraft"] = state.updraft
            snapshot["rotation"] = state.rotation
            snapshot["tornadoes_spawned"] = state.tornadoes_spawned
        return snapshot
