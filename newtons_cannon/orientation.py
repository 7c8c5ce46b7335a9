"""
Orientation heuristics per entity type.

This is more visual plausibility than attitude dynamics:
- Satellites keep facing along their acceleration (toward the attracting body)
- Spaceships are oriented by the pilot; optionally they drift toward their
  velocity vector when auto alignment is enabled
- Other entities keep their orientation
"""

from typing import Callable, Dict, Optional

from .constants import ALIGN_DEAD_BAND_RAD, MAX_ALIGN_TURN_RATE
from .entity import Entity, EntityType
from .frames import Transform
from .physics import Quaternion, Vector3D


def look_at(transform: Transform, target: Vector3D, up: Optional[Vector3D] = None) -> None:
    """
    Rotate transform so its +Z axis points at a world target.

    The world up hint defaults to +Y; when the view direction is parallel
    to it the direction is nudged so the basis stays orthonormal.
    """
    up = up or Vector3D.unit_y()
    eye = transform.world_position()

    z_axis = target - eye
    if z_axis.magnitude_squared == 0:
        return
    z_axis = z_axis.normalized()

    x_axis = up.cross(z_axis)
    if x_axis.magnitude_squared == 0:
        # Looking straight up or down: perturb the direction slightly
        if abs(up.z) == 1:
            z_axis = Vector3D(z_axis.x + 0.0001, z_axis.y, z_axis.z).normalized()
        else:
            z_axis = Vector3D(z_axis.x, z_axis.y, z_axis.z + 0.0001).normalized()
        x_axis = up.cross(z_axis)
    x_axis = x_axis.normalized()
    y_axis = z_axis.cross(x_axis)

    world_q = Quaternion.from_basis(x_axis, y_axis, z_axis)
    if transform.parent is None:
        transform.quaternion = world_q
    else:
        transform.quaternion = (transform.parent.world_quaternion().inverse() * world_q).normalized()


def align_towards(current: Quaternion, target_direction: Vector3D,
                  max_angle: float) -> Quaternion:
    """
    Rotate an orientation so its forward axis turns toward target_direction
    by at most max_angle radians.
    """
    forward = current.forward()
    target = target_direction.normalized()
    error = forward.angle_to(target)
    if error <= ALIGN_DEAD_BAND_RAD:
        return current

    axis = forward.cross(target)
    if axis.magnitude_squared == 0:
        # Exactly opposite: any perpendicular axis works
        axis = forward.any_perpendicular()

    delta = Quaternion.from_axis_angle(axis, min(error, max_angle))
    return (delta * current).normalized()


# =============================================================================
# PER-TYPE HANDLERS
# =============================================================================

def _orient_satellite(entity: Entity, dt: float, auto_align: bool) -> None:
    accel = entity.accelerations.total
    if accel.magnitude_squared > 0:
        target = entity.world_position() + accel.normalized()
        look_at(entity.body, target)


def _orient_spaceship(entity: Entity, dt: float, auto_align: bool) -> None:
    if not auto_align:
        return
    if entity.velocity.magnitude_squared == 0:
        return
    world_q = entity.body.world_quaternion()
    aligned = align_towards(world_q, entity.velocity, MAX_ALIGN_TURN_RATE * dt)
    if entity.body.parent is None:
        entity.body.quaternion = aligned
    else:
        entity.body.quaternion = (entity.body.parent.world_quaternion().inverse() * aligned).normalized()


def _keep_orientation(entity: Entity, dt: float, auto_align: bool) -> None:
    pass


ORIENTATION_HANDLERS: Dict[EntityType, Callable[[Entity, float, bool], None]] = {
    EntityType.CANNONBALL: _keep_orientation,
    EntityType.SATELLITE: _orient_satellite,
    EntityType.SPACESHIP: _orient_spaceship,
    EntityType.ASTEROID: _keep_orientation,
    EntityType.MOON: _keep_orientation,
}


def update_entity_orientation(entity: Entity, dt: float,
                              auto_align_to_velocity: bool = False) -> None:
    """
    Update the attitude of an entity after its motion has been integrated.

    Args:
        entity: Entity to orient
        dt: Time step in seconds
        auto_align_to_velocity: Enable the spaceship velocity drift
    """
    try:
        handler = ORIENTATION_HANDLERS[entity.entity_type]
    except KeyError:
        raise ValueError(f"No orientation handler for {entity.entity_type!r}") from None
    handler(entity, dt, auto_align_to_velocity)
