"""
Random Entity Generation Module

Seedable procedural spawn configurations with bounded attributes.
"""

import math
import random
from typing import Any, Dict, List, Mapping, Optional

from .config import KIND_BOUNDS, KindBounds
from .errors import InvalidConfigError
from .types import EntityConfig, EntityKind, WorldBounds


def _half_open(value: float, low: float, high: float) -> float:
    """Keep a scaled draw inside [low, high); float rounding can land on high."""
    if high > low and value >= high:
        return math.nextafter(high, low)
    return value


class RandomGenerator:
    """
    Procedural parameter generator for spawning entities.

    Output is deterministic when a seed is given, either per call or at
    construction. Without any seed the generator draws from OS entropy.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        bounds: Optional[Mapping[Any, KindBounds]] = None,
    ):
        """
        Args:
            seed: Seed for the generator's own random stream
            bounds: Per-kind ranges overriding config.KIND_BOUNDS
        """
        self.seed = seed
        self.rng = random.Random(seed)
        self.bounds: Dict[EntityKind, KindBounds] = {
            EntityKind.coerce(kind): b for kind, b in KIND_BOUNDS.items()
        }
        if bounds:
            for kind, b in bounds.items():
                self.bounds[EntityKind.coerce(kind)] = self._check_bounds(b)

    @staticmethod
    def _check_bounds(bounds: KindBounds) -> KindBounds:
        for name in ("intensity", "radius", "duration"):
            low, high = getattr(bounds, name)
            if low > high:
                raise InvalidConfigError(f"{name} range is inverted: ({low}, {high})")
            if low < 0:
                raise InvalidConfigError(f"{name} range must be non-negative, got ({low}, {high})")
        if bounds.duration[0] <= 0:
            raise InvalidConfigError(f"duration range must be positive, got {bounds.duration}")
        return bounds

    def generate_random(
        self,
        world_bounds: Any,
        kind: Any = EntityKind.TORNADO,
        seed: Optional[int] = None,
    ) -> EntityConfig:
        """
        Generate a random entity config.

        Args:
            world_bounds: WorldBounds or {"width": ..., "height": ...}
            kind: Entity kind
            seed: Per-call seed; identical seeds give identical configs

        Returns:
            EntityConfig with x in [0, width), y in [0, height) and
            intensity/radius/duration inside the kind's ranges
        """
        world = WorldBounds.coerce(world_bounds)
        kind = EntityKind.coerce(kind)
        rng = random.Random(seed) if seed is not None else self.rng
        b = self.bounds[kind]

        def draw(span):
            low, high = span
            return _half_open(low + rng.random() * (high - low), low, high)

        return EntityConfig(
            kind=kind,
            x=_half_open(rng.random() * world.width, 0.0, world.width),
            y=_half_open(rng.random() * world.height, 0.0, world.height),
            intensity=draw(b.intensity),
            radius=draw(b.radius),
            duration=draw(b.duration),
        )

    def generate_many(
        self,
        world_bounds: Any,
        kind: Any = EntityKind.TORNADO,
        count: int = 1,
    ) -> List[EntityConfig]:
        """Generate ``count`` configs from the generator's own stream."""
        if count < 0:
            raise InvalidConfigError(f"count must be non-negative, got {count}")
        return [self.generate_random(world_bounds, kind) for _ in range(count)]
