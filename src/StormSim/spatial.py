"""
Spatial Query Module

Radius-based collision and impact detection against point-like world
objects. Distances are plain 2D Euclidean; no geodesic correction.
"""

from dataclasses import dataclass, field
from typing import Any, List, Sequence

import numpy as np

from .entity import WeatherEntity
from .types import object_coordinates


def _distances(entity: WeatherEntity, objects: Sequence[Any]) -> np.ndarray:
    coords = np.array([object_coordinates(obj) for obj in objects], dtype=float)
    return np.hypot(coords[:, 0] - entity.x, coords[:, 1] - entity.y)


def check_collisions(entity: WeatherEntity, objects: Sequence[Any]) -> List[Any]:
    """
    Objects within the entity's radius.

    An object exactly at distance == radius is included. Matches keep
    their input order.

    Args:
        entity: Entity whose position and radius define the area
        objects: World objects with x/y coordinates

    Returns:
        Matching objects, in input order
    """
    objects = list(objects)
    if not objects:
        return []
    inside = _distances(entity, objects) <= entity.radius
    return [obj for obj, hit in zip(objects, inside) if hit]


@dataclass
class ImpactedObject:
    """An affected world object with its distance and damage severity."""
    obj: Any
    distance: float
    severity: float


@dataclass
class ImpactAssessment:
    """
    Damage projection for one entity.

    Attributes:
        entity_id: Entity that produced the impact
        impacts: Affected objects, in input order
    """
    entity_id: str
    impacts: List[ImpactedObject] = field(default_factory=list)

    @property
    def affected(self) -> List[Any]:
        return [impact.obj for impact in self.impacts]

    @property
    def max_severity(self) -> float:
        return max((impact.severity for impact in self.impacts), default=0.0)


def assess_impact(entity: WeatherEntity, objects: Sequence[Any]) -> ImpactAssessment:
    """
    Estimate damage to objects inside the entity's radius.

    severity = intensity × (1 - distance / radius)

    Severity is full intensity at the center and zero on the edge. A
    zero-radius entity affects only objects exactly at its position, at
    full intensity.
    """
    assessment = ImpactAssessment(entity_id=entity.entity_id)
    objects = list(objects)
    if not objects:
        return assessment

    distances = _distances(entity, objects)
    for obj, distance in zip(objects, distances):
        if distance > entity.radius:
            continue
        if entity.radius > 0:
            severity = entity.intensity * (1.0 - distance / entity.radius)
        else:
            severity = entity.intensity
        assessment.impacts.append(ImpactedObject(obj=obj, distance=float(distance), severity=float(severity)))
    return assessment
