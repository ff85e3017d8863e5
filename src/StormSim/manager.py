"""
Entity Manager Module

Owns the collection of active weather entities and drives it one tick
at a time.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .entity import WeatherEntity
from .errors import InvalidConfigError, InvalidInputError
from .generator import RandomGenerator
from .spatial import check_collisions, object_coordinates
from .trajectory import TrajectoryModel, default_trajectory
from .types import (
    EntityConfig,
    EntityKind,
    EnvironmentalConditions,
    LifecycleStatus,
    is_number,
)

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """
    Outcome of one tick.

    Attributes:
        time: Manager clock after the tick (seconds)
        affected: Entity id -> world objects inside its radius this tick
        expired: Ids removed at the end of the tick
        spawned: Ids added at the end of the tick
    """
    time: float
    affected: Dict[str, List[Any]] = field(default_factory=dict)
    expired: List[str] = field(default_factory=list)
    spawned: List[str] = field(default_factory=list)


def _check_policy(entity: WeatherEntity, policy: Optional[TrajectoryModel], error: type) -> None:
    """Reject a policy bound to a different entity kind."""
    if policy is not None and policy.kind is not None and policy.kind is not entity.kind:
        raise error(
            f"{type(policy).__name__} cannot drive {entity.kind.value} entity {entity.entity_id}"
        )


class EntityManager:
    """
    Exclusive owner of a set of weather entities.

    Entities move Pending -> Active on spawn and Active -> Expired at the
    end of the tick in which their lifetime runs out. Removal and the
    addition of entities spawned during a tick are deferred to the end of
    that tick.
    """

    def __init__(
        self,
        trajectories: Optional[Mapping[Any, Optional[TrajectoryModel]]] = None,
        generator: Optional[RandomGenerator] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            trajectories: Per-kind policy overrides. A kind mapped to None
                gets no policy; unlisted kinds get the default policy.
            generator: Random generator for spawn_random
            seed: Seeds the default tornado policy and generator
        """
        self._entities: Dict[str, WeatherEntity] = {}
        self._counter = 0
        self.elapsed = 0.0
        self.generator = generator if generator is not None else RandomGenerator(seed=seed)

        rng = random.Random(seed)
        self.trajectories: Dict[EntityKind, Optional[TrajectoryModel]] = {
            kind: default_trajectory(kind, rng=rng) for kind in EntityKind
        }
        if trajectories:
            for kind, model in trajectories.items():
                self.trajectories[EntityKind.coerce(kind)] = model

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def get(self, entity_id: str) -> Optional[WeatherEntity]:
        return self._entities.get(entity_id)

    def active_entities(self) -> Tuple[WeatherEntity, ...]:
        """Snapshot of owned entities in insertion order."""
        return tuple(self._entities.values())

    def clear(self) -> None:
        for entity in self._entities.values():
            entity.status = LifecycleStatus.EXPIRED
        self._entities.clear()

    def _next_id(self, kind: EntityKind) -> str:
        """Next sequential id, skipping any already taken by an explicit id."""
        while True:
            self._counter += 1
            entity_id = f"{kind.value}-{self._counter}"
            if entity_id not in self._entities:
                return entity_id

    def spawn(
        self,
        config: Union[EntityConfig, Mapping[str, Any]],
        trajectory: Optional[TrajectoryModel] = None,
    ) -> str:
        """
        Construct an entity and add it to the collection.

        Args:
            config: EntityConfig or mapping of recognized options
            trajectory: Policy override; defaults to the manager's policy for the kind

        Returns:
            The new entity's id

        Raises:
            InvalidConfigError: If the config is invalid, the id is taken or
                the trajectory drives a different kind.
                The collection is left unchanged.
        """
        if isinstance(config, Mapping):
            config = EntityConfig.from_mapping(config)
        elif not isinstance(config, EntityConfig):
            raise InvalidConfigError(f"Expected EntityConfig or mapping, got {type(config).__name__}")

        if config.entity_id is not None and config.entity_id in self._entities:
            raise InvalidConfigError(f"Entity id already in use: {config.entity_id}")

        entity = WeatherEntity(config)
        policy = trajectory if trajectory is not None else self.trajectories.get(entity.kind)
        _check_policy(entity, policy, InvalidConfigError)
        if config.entity_id is None:
            entity.entity_id = self._next_id(entity.kind)
        entity.trajectory = policy
        entity.status = LifecycleStatus.ACTIVE
        self._entities[entity.entity_id] = entity

        logger.debug(
            f"Spawned {entity.entity_id} at ({entity.x:.1f}, {entity.y:.1f}) "
            f"intensity={entity.intensity:.2f} radius={entity.radius:.1f} duration={entity.duration:.1f}"
        )
        return entity.entity_id

    def spawn_random(self, world_bounds: Any, kind: Any = EntityKind.TORNADO) -> str:
        """Spawn an entity with generator-drawn parameters."""
        return self.spawn(self.generator.generate_random(world_bounds, kind))

    def tick(
        self,
        delta_time: float,
        world_objects: Sequence[Any] = (),
        environment: Any = None,
    ) -> TickReport:
        """
        Advance every owned entity by one step.

        For each entity: update the lifetime clock, evolve it with its
        policy, then check collisions. Entities that expire during the
        tick still get their collision check before removal.

        Args:
            delta_time: Non-negative step in seconds
            world_objects: Objects with x/y coordinates (read only)
            environment: EnvironmentalConditions, plain mapping, or None

        Returns:
            TickReport for the step

        Raises:
            InvalidInputError: On negative delta_time, malformed environment
                world objects without coordinates or an entity whose policy
                drives another kind. Nothing is mutated.
        """
        if not is_number(delta_time) or delta_time < 0:
            raise InvalidInputError(f"delta_time must be a non-negative number, got {delta_time!r}")
        conditions = EnvironmentalConditions.coerce(environment)
        objects = list(world_objects)
        for obj in objects:
            object_coordinates(obj)
        for entity in self._entities.values():
            _check_policy(entity, entity.trajectory, InvalidInputError)

        self.elapsed += delta_time
        report = TickReport(time=self.elapsed)
        spawn_requests: List[EntityConfig] = []

        for entity in self._entities.values():
            entity.update(delta_time)
            if entity.trajectory is not None:
                entity.trajectory.evolve(entity, conditions, delta_time)

            hits = check_collisions(entity, objects)
            if hits:
                report.affected[entity.entity_id] = hits

            if entity.pending_spawns:
                spawn_requests.extend(entity.pending_spawns)
                entity.pending_spawns.clear()

        # End of tick: removals, then deferred spawns
        for entity_id, entity in list(self._entities.items()):
            if not entity.active:
                entity.status = LifecycleStatus.EXPIRED
                del self._entities[entity_id]
                report.expired.append(entity_id)
                logger.debug(f"Expired {entity_id} after {entity.elapsed_time:.1f}s")

        for config in spawn_requests:
            try:
                report.spawned.append(self.spawn(config))
            except InvalidConfigError as e:
                logger.warning(f"Dropped spawn request {config.entity_id}: {e}")

        return report
