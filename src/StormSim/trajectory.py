"""
Trajectory Policy Module

Per-kind movement and intensity evolution. Each policy maps the current
entity state plus an environmental snapshot to the next state.
"""

import math
import random
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from scipy.signal import savgol_filter

from util.math_utils import (
    clamp,
    exponential_filter,
    linear_interpolate,
    rotate_vector_90,
    unit_vector,
)

from .config import (
    DEFAULT_LEAD_TIMES,
    DEFAULT_TIME_STEP,
    HURRICANE_PARAMS,
    KIND_BOUNDS,
    PATH_VELOCITY_SIGMA,
    TORNADO_PARAMS,
    HurricaneParams,
    KindBounds,
    TornadoParams,
)
from .entity import WeatherEntity
from .errors import InvalidInputError
from .types import (
    EntityConfig,
    EntityKind,
    EnvironmentalConditions,
    SupercellParameters,
    SupercellState,
    Waypoint,
    is_number,
)


def smooth_track(
    track: Sequence[Tuple[float, float]],
    window_length: Optional[int] = None,
    polyorder: int = 2
) -> List[Tuple[float, float]]:
    """
    Savitzky-Golay smoothing of an entity's position track.

    Args:
        track: (x, y) positions, oldest first
        window_length: Odd window size. Defaults to the largest odd size up to 7.
        polyorder: Polynomial order

    Returns:
        Smoothed positions. Tracks shorter than the window come back unchanged.

    Raises:
        ValueError: If an explicit window is even or not above polyorder
    """
    points = tuple((float(x), float(y)) for x, y in track)
    if window_length is None:
        window_length = min(7, len(points) - (1 - len(points) % 2))
    elif window_length % 2 == 0 or window_length <= polyorder:
        raise ValueError(f"Window must be odd and above polyorder {polyorder}, got {window_length}")
    return list(_savgol_track(points, window_length, polyorder))


# Hurricane paths re-project from the same track between moves
@lru_cache(maxsize=256)
def _savgol_track(
    points: Tuple[Tuple[float, float], ...],
    window_length: int,
    polyorder: int,
) -> Tuple[Tuple[float, float], ...]:
    if window_length <= polyorder or len(points) < window_length:
        return points
    smoothed = savgol_filter(np.asarray(points), window_length, polyorder, axis=0)
    return tuple((float(x), float(y)) for x, y in smoothed)


class TrajectoryModel(ABC):
    """
    Base class for trajectory policies.

    Subclasses implement ``_advance``; ``evolve`` validates input and
    skips zero-length steps and terminal entities.
    """

    kind: Optional[EntityKind] = None

    def evolve(
        self,
        entity: WeatherEntity,
        environment: Any = None,
        dt: float = DEFAULT_TIME_STEP,
    ) -> WeatherEntity:
        """
        Advance the entity's position and intensity by one step.

        Args:
            entity: Entity to evolve (mutated in place)
            environment: EnvironmentalConditions, plain mapping, or None
            dt: Step length in seconds

        Returns:
            The same entity, updated

        Raises:
            InvalidInputError: On a malformed environment, negative dt or kind mismatch
        """
        conditions = EnvironmentalConditions.coerce(environment)
        if not is_number(dt) or dt < 0:
            raise InvalidInputError(f"dt must be a non-negative number, got {dt!r}")
        if self.kind is not None and entity.kind is not self.kind:
            raise InvalidInputError(
                f"{type(self).__name__} cannot evolve a {entity.kind.value} entity"
            )
        if dt == 0 or not entity.active:
            return entity
        self._advance(entity, conditions, dt)
        return entity

    @abstractmethod
    def _advance(self, entity: WeatherEntity, environment: EnvironmentalConditions, dt: float) -> None:
        ...


# =============================================================================
# Hurricane
# =============================================================================

class HurricaneTrajectory(TrajectoryModel):
    """
    Steering-flow advection with sea-surface-temperature driven intensity.

    After landfall (sticky once seen) intensity decays exponentially and
    never increases again.
    """

    kind = EntityKind.HURRICANE

    def __init__(
        self,
        params: HurricaneParams = HURRICANE_PARAMS,
        lead_times: Sequence[float] = DEFAULT_LEAD_TIMES,
        velocity_sigma: float = PATH_VELOCITY_SIGMA,
    ):
        self.params = params
        self.lead_times = tuple(lead_times)
        self.velocity_sigma = velocity_sigma

    def motion(self, entity: WeatherEntity, environment: EnvironmentalConditions) -> Tuple[float, float]:
        """Smoothed motion vector; persistence when the snapshot has no steering."""
        if environment.steering is not None:
            entity.motion_history.append(environment.steering)
        if not entity.motion_history:
            return (0.0, 0.0)
        return exponential_filter(list(entity.motion_history), self.params.smoothing_alpha)

    def next_intensity(
        self,
        entity: WeatherEntity,
        environment: EnvironmentalConditions,
        dt: float
    ) -> float:
        """Intensity after dt seconds; never negative, never above the ceiling."""
        p = self.params
        if entity.landfall:
            return entity.intensity * math.exp(-p.landfall_decay * dt)

        delta = 0.0
        sst = environment.get("sea_surface_temperature")
        if sst is not None:
            delta += p.intensification_rate * (sst - p.sst_threshold) * dt
        delta -= p.shear_penalty * abs(environment.get("wind_shear", 0.0)) * dt
        return clamp(entity.intensity + delta, 0.0, p.max_intensity)

    def calculate_trajectory(
        self,
        entity: WeatherEntity,
        environment: Any = None,
        lead_times: Optional[Sequence[float]] = None,
    ) -> List[Waypoint]:
        """
        Project the hurricane path by linear advection.

        x(t + Δt) = x(t) + u × Δt, with position uncertainty growing as
        σ(t + Δt)² = σ(t)² + σ_v² × Δt².

        Returns:
            Waypoints ordered by lead time, timestamped in simulation time
        """
        conditions = EnvironmentalConditions.coerce(environment)
        if lead_times is None:
            lead_times = self.lead_times
        u, v = entity.velocity
        if conditions.steering is not None and not entity.motion_history:
            u, v = conditions.steering

        # Project from the smoothed analysis position when the track allows it
        x0, y0 = smooth_track(entity.track)[-1]

        waypoints = []
        sigma = 0.0
        prev_dt = 0.0
        for dt in sorted(lead_times):
            sigma = math.sqrt(sigma**2 + (self.velocity_sigma * (dt - prev_dt))**2)
            waypoints.append(Waypoint(
                x=x0 + u * dt,
                y=y0 + v * dt,
                timestamp=entity.elapsed_time + dt,
                sigma=sigma,
            ))
            prev_dt = dt
        return waypoints

    def _advance(self, entity: WeatherEntity, environment: EnvironmentalConditions, dt: float) -> None:
        if environment.landfall and not entity.landfall:
            entity.landfall = True

        entity.velocity = self.motion(entity, environment)
        entity.move_to(entity.x + entity.velocity[0] * dt, entity.y + entity.velocity[1] * dt)
        entity.intensity = self.next_intensity(entity, environment, dt)
        entity.path = self.calculate_trajectory(entity, environment)


# =============================================================================
# Tornado
# =============================================================================

def _widen(bounds: Tuple[float, float], start: float) -> Tuple[float, float]:
    """Bounds stretched to contain an entity's configured starting value."""
    low, high = bounds
    return (min(low, start), max(high, start))


class TornadoTrajectory(TrajectoryModel):
    """
    Seeded random walk of intensity, radius and position.

    Intensity and radius stay inside the configured bounds, widened to
    include the entity's starting values; during the
    final ``decay_fraction`` of the lifetime intensity is capped by a
    ceiling falling linearly to zero.
    """

    kind = EntityKind.TORNADO

    def __init__(
        self,
        params: TornadoParams = TORNADO_PARAMS,
        bounds: KindBounds = KIND_BOUNDS["tornado"],
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.params = params
        self.bounds = bounds
        self.rng = rng if rng is not None else random.Random(seed)

    def _jitter(self, scale: float, dt: float) -> float:
        return self.rng.uniform(-1.0, 1.0) * scale * dt

    def _advance(self, entity: WeatherEntity, environment: EnvironmentalConditions, dt: float) -> None:
        p = self.params
        i_low, i_high = _widen(self.bounds.intensity, entity.initial_intensity)
        r_low, r_high = _widen(self.bounds.radius, entity.initial_radius)

        intensity = clamp(entity.intensity + self._jitter(p.intensity_jitter, dt), i_low, i_high)
        remaining = 1.0 - entity.life_fraction
        if remaining < p.decay_fraction:
            ceiling = linear_interpolate(remaining, 0.0, p.decay_fraction, 0.0, i_high)
            intensity = min(intensity, ceiling)
        entity.intensity = max(0.0, intensity)
        entity.radius = max(0.0, clamp(entity.radius + self._jitter(p.radius_jitter, dt), r_low, r_high))

        u, v = environment.steering or (0.0, 0.0)
        u += self.rng.uniform(-1.0, 1.0) * p.wobble
        v += self.rng.uniform(-1.0, 1.0) * p.wobble
        entity.velocity = (u, v)
        entity.motion_history.append((u, v))
        entity.move_to(entity.x + u * dt, entity.y + v * dt)


# =============================================================================
# Supercell
# =============================================================================

def _relax(current: float, target: float, rate: float, dt: float) -> float:
    """Move current toward target without overshooting."""
    return current + (target - current) * min(1.0, rate * dt)


def _drive(current: float, forcing: float, decay: float, dt: float) -> float:
    """Forced decay dX/dt = forcing - decay·X, stepped without overshoot."""
    if decay <= 0:
        return current + forcing * dt
    return _relax(current, forcing / decay, decay, dt)


def step_supercell_state(
    state: SupercellState,
    params: SupercellParameters,
    environment: Any,
    dt: float,
) -> SupercellState:
    """
    Advance supercell state by dt seconds.

    Pure: the result depends only on the arguments, so a simulation can
    be replayed or restarted from any saved state.

    Temperature, pressure and humidity relax toward the environment.
    Buoyancy (warmth above the reference times humidity) drives the
    updraft; updraft times shear drives rotation. When rotation reaches
    the tornadogenesis threshold and the cooldown has expired, the
    cooldown resets and ``tornadoes_spawned`` increments.
    """
    conditions = EnvironmentalConditions.coerce(environment)
    if not is_number(dt) or dt < 0:
        raise InvalidInputError(f"dt must be a non-negative number, got {dt!r}")
    if dt == 0:
        return state

    rate = params.relaxation_rate
    temperature = _relax(state.temperature, conditions.get("temperature", state.temperature), rate, dt)
    pressure = _relax(state.pressure, conditions.get("pressure", state.pressure), rate, dt)
    humidity = clamp(_relax(state.humidity, conditions.get("humidity", state.humidity), rate, dt), 0.0, 1.0)
    wind_shear = abs(conditions.get("wind_shear", state.wind_shear))

    buoyancy = max(0.0, temperature - params.reference_temperature) * humidity
    updraft = max(0.0, _drive(state.updraft, params.updraft_gain * buoyancy, params.updraft_decay, dt))
    rotation = max(0.0, _drive(
        state.rotation, params.rotation_gain * updraft * wind_shear, params.rotation_decay, dt
    ))

    cooldown = max(0.0, state.tornado_cooldown - dt)
    spawned = state.tornadoes_spawned
    if rotation >= params.tornadogenesis_rotation and cooldown <= 0.0:
        cooldown = params.tornado_cooldown
        spawned += 1

    return SupercellState(
        temperature=temperature,
        pressure=pressure,
        humidity=humidity,
        wind_shear=wind_shear,
        updraft=updraft,
        rotation=rotation,
        tornado_cooldown=cooldown,
        tornadoes_spawned=spawned,
    )


class SupercellTrajectory(TrajectoryModel):
    """
    Supercell evolution driven by ``step_supercell_state``.

    Motion is the steering flow plus a right-moving deviation
    perpendicular to it, scaled by rotation strength.
    """

    kind = EntityKind.SUPERCELL

    def __init__(
        self,
        params: Optional[SupercellParameters] = None,
        bounds: KindBounds = KIND_BOUNDS["supercell"],
    ):
        self.params = params if params is not None else SupercellParameters()
        self.bounds = bounds

    def deviant_motion(self, state: SupercellState, steering: Tuple[float, float]) -> Tuple[float, float]:
        p = self.params
        right_u, right_v = rotate_vector_90(*unit_vector(*steering), clockwise=True)
        strength = min(1.0, state.rotation / p.tornadogenesis_rotation) if p.tornadogenesis_rotation > 0 else 1.0
        magnitude = p.deviation * strength
        return (steering[0] + right_u * magnitude, steering[1] + right_v * magnitude)

    def _advance(self, entity: WeatherEntity, environment: EnvironmentalConditions, dt: float) -> None:
        p = self.params
        previous = entity.supercell_state
        state = step_supercell_state(previous, p, environment, dt)
        entity.supercell_state = state

        i_low, i_high = self.bounds.intensity
        entity.intensity = clamp(state.updraft / p.updraft_per_intensity, i_low, i_high)

        entity.velocity = self.deviant_motion(state, environment.steering or (0.0, 0.0))
        entity.motion_history.append(entity.velocity)
        entity.move_to(entity.x + entity.velocity[0] * dt, entity.y + entity.velocity[1] * dt)

        if state.tornadoes_spawned > previous.tornadoes_spawned:
            threshold = p.tornadogenesis_rotation if p.tornadogenesis_rotation > 0 else 1.0
            entity.pending_spawns.append(EntityConfig(
                kind=EntityKind.TORNADO,
                x=entity.x,
                y=entity.y,
                intensity=clamp(state.rotation / threshold, 1.0, 10.0),
                entity_id=f"{entity.entity_id}-tornado-{state.tornadoes_spawned}",
            ))


def default_trajectory(
    kind: Any,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> TrajectoryModel:
    """Default policy for an entity kind."""
    kind = EntityKind.coerce(kind)
    if kind is EntityKind.HURRICANE:
        return HurricaneTrajectory()
    if kind is EntityKind.TORNADO:
        return TornadoTrajectory(seed=seed, rng=rng)
    return SupercellTrajectory()
