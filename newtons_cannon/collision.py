"""
Collision detection and resolution against massive bodies.

An entity in flight collides with a body when its distance to the body
center is at most radius + threshold. When several bodies are hit in the
same tick the nearest one wins. On impact the entity is grounded, snapped
onto the contact shell and reparented to the body frame so it follows the
body from then on.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .bodies import CelestialBody
from .entity import Entity
from .physics import Vector3D

logger = logging.getLogger(__name__)


@dataclass
class CollisionCandidate:
    """A body the entity is in contact with."""
    body: CelestialBody
    distance: float  # entity to body center (scaled units)


@dataclass
class CollisionResult:
    """
    Outcome of a collision check.

    Attributes:
        collided: True if an impact was handled this call
        body: Body that was hit
        contact_point: Contact point in world coordinates
    """
    collided: bool
    body: Optional[CelestialBody] = None
    contact_point: Optional[Vector3D] = None

    def __bool__(self) -> bool:
        return self.collided


NO_COLLISION = CollisionResult(collided=False)


def is_own_body(entity: Entity, body: CelestialBody) -> bool:
    """A body never collides with the entity that carries its frame."""
    return body.frame is entity.body or body.entity_name == entity.name


def find_collision(
    entity: Entity,
    bodies: Iterable[CelestialBody],
    threshold: float
) -> Optional[CollisionCandidate]:
    """
    Nearest body the entity touches, or None.

    On an exact distance tie the body listed first is kept.
    """
    position = entity.world_position()
    nearest: Optional[CollisionCandidate] = None

    for body in bodies:
        if is_own_body(entity, body):
            continue
        distance = position.distance_to(body.center())
        if not distance <= body.radius + threshold:
            continue
        if nearest is None or distance < nearest.distance:
            nearest = CollisionCandidate(body, distance)

    return nearest


def surface_projection(position: Vector3D, center: Vector3D, shell_radius: float) -> Vector3D:
    """
    Project a world position onto the sphere of given radius around center.

    A position exactly at the center is projected along +Y.
    """
    direction = (position - center).safe_normalized()
    if direction.is_zero():
        direction = Vector3D.unit_y()
    return center + direction * shell_radius


def check_collision_and_handle(
    entity: Entity,
    bodies: Iterable[CelestialBody],
    threshold: float
) -> CollisionResult:
    """
    Detect and resolve an impact for an entity in flight.

    Steps on impact:
    1. Ground the entity and zero its velocity and drag
    2. Compute the contact point on the radius + threshold shell
    3. Reparent the body to the hit body frame at that point

    Entities that are not free falling are left untouched.

    Returns:
        CollisionResult, truthy when an impact was handled
    """
    if not entity.is_free_falling:
        return NO_COLLISION

    candidate = find_collision(entity, bodies, threshold)
    if candidate is None:
        return NO_COLLISION

    body = candidate.body
    entity.is_free_falling = False
    entity.velocity = Vector3D.zero()
    entity.accelerations.friction = Vector3D.zero()
    entity.accelerations.recompute_total()

    # Contact point computed before changing parent
    contact = surface_projection(entity.world_position(), body.center(), body.radius + threshold)

    if entity.body.parent is not body.frame:
        body.frame.attach(entity.body)
    entity.body.position = body.frame.world_to_local(contact)

    entity.has_impacted = True
    logger.info("%s has impacted %s", entity.name, body.name)

    return CollisionResult(collided=True, body=body, contact_point=contact)
