"""
Force models: gravity, atmospheric drag and engine thrust.

Every model is a pure function returning an acceleration (scaled units/s^2);
nothing here mutates an entity. compute_accelerations() assembles the
per-tick breakdown for one entity.

Gravity uses the surface-gravity form of Newton's law,
    a = g0 * (R / r)^2
which equals GM / r^2 when GM = g0 * R^2.

Drag is a visual approximation, not a real aerodynamic model:
    a = Cd * rho(h) * v^2
with v in m/s, converted back to scaled units afterwards.
"""

import logging
import math
from typing import Optional

from .bodies import CelestialBody
from .config import AtmosphereConfig, SimulationConfig
from .constants import GLOBAL_SCALE, GRAVITY_EPSILON, MIN_DRAG_SPEED_MS, scale_to_km
from .entity import AccelerationBreakdown, Entity, EntityType
from .physics import Vector3D

logger = logging.getLogger(__name__)


# =============================================================================
# GRAVITY
# =============================================================================

def gravitational_acceleration(
    position: Vector3D,
    center: Vector3D,
    surface_gravity: float,
    radius: float
) -> Vector3D:
    """
    Acceleration toward a spherical body.

    Args:
        position: Entity position (world, scaled units)
        center: Body center (world, scaled units)
        surface_gravity: g0 at the body surface (scaled units/s^2)
        radius: Body radius (scaled units)

    Returns:
        Acceleration vector pointing at the body center, zero when the
        entity is closer than GRAVITY_EPSILON to the center
    """
    offset = center - position
    r = offset.magnitude
    if r < GRAVITY_EPSILON:
        return Vector3D.zero()
    magnitude = surface_gravity * (radius * radius) / (r * r)
    return offset / r * magnitude


def gravitational_acceleration_from_mu(
    position: Vector3D,
    center: Vector3D,
    mu: float
) -> Vector3D:
    """Acceleration toward a point mass with gravitational parameter mu (GM / r^2)."""
    offset = center - position
    r = offset.magnitude
    if r < GRAVITY_EPSILON:
        return Vector3D.zero()
    return offset / r * (mu / (r * r))


def body_gravity(position: Vector3D, body: CelestialBody) -> Vector3D:
    return gravitational_acceleration(position, body.center(), body.surface_gravity, body.radius)


# =============================================================================
# ATMOSPHERIC DRAG
# =============================================================================

def altitude_km(position: Vector3D, center: Vector3D, radius: float) -> float:
    """Altitude above a spherical surface, in km."""
    return scale_to_km((position - center).magnitude - radius)


def air_density(altitude: float, atmosphere: AtmosphereConfig) -> float:
    """
    Air density (kg/m^3) at an altitude in km.

    Sea-level density at or below 0 km, nothing at or above the top of the
    atmosphere, exponential decay in between with a scale height of
    height_km * troposphere_ratio.
    """
    if altitude <= 0:
        return atmosphere.surface_density
    if altitude >= atmosphere.height_km:
        return 0.0
    scale_height = atmosphere.height_km * atmosphere.troposphere_ratio
    return atmosphere.surface_density * math.exp(-altitude / scale_height)


def drag_acceleration(
    position: Vector3D,
    velocity: Vector3D,
    center: Vector3D,
    radius: float,
    atmosphere: AtmosphereConfig,
    drag_coefficient: float
) -> Vector3D:
    """
    Drag opposing the velocity.

    Args:
        position: Entity position (world, scaled units)
        velocity: Entity velocity (scaled units/s)
        center: Center of the body owning the atmosphere
        radius: Radius of that body (scaled units)
        atmosphere: Atmosphere parameters
        drag_coefficient: Lumped drag factor of the entity

    Returns:
        Drag acceleration in scaled units/s^2
    """
    speed_ms = velocity.magnitude * GLOBAL_SCALE * 1000
    if speed_ms < MIN_DRAG_SPEED_MS:
        return Vector3D.zero()

    altitude = altitude_km(position, center, radius)
    density = air_density(altitude, atmosphere)
    if density <= 0:
        return Vector3D.zero()

    drag_ms2 = drag_coefficient * density * speed_ms * speed_ms
    # m/s^2 -> scaled units/s^2
    drag_magnitude = drag_ms2 / (1000 * GLOBAL_SCALE)

    logger.debug(
        "Drag: altitude=%.0f km density=%.3f speed=%.0f m/s magnitude=%.6f",
        altitude, density, speed_ms, drag_magnitude,
    )

    return -velocity.normalized() * drag_magnitude


# =============================================================================
# ENGINE
# =============================================================================

def engine_acceleration(entity: Entity, max_acceleration: float) -> Vector3D:
    """
    Main engine acceleration along the body forward axis.

    Only spaceships with an active thrust command and a positive power get
    a non-zero result.
    """
    if (entity.entity_type is not EntityType.SPACESHIP
            or entity.thrust_direction == 0
            or entity.thrust_power <= 0):
        return Vector3D.zero()
    return entity.forward() * (entity.thrust_power * max_acceleration * entity.thrust_direction)


# =============================================================================
# BREAKDOWN
# =============================================================================

def compute_accelerations(
    entity: Entity,
    dominant_body: Optional[CelestialBody],
    config: SimulationConfig
) -> AccelerationBreakdown:
    """
    Gravity, drag and engine accelerations of an entity for this tick.

    Args:
        entity: Entity in flight
        dominant_body: Body whose field applies, None for deep space
        config: Simulation configuration

    Returns:
        AccelerationBreakdown with total = gravity + friction + engine
    """
    position = entity.world_position()

    gravity = Vector3D.zero()
    friction = Vector3D.zero()
    if dominant_body is not None:
        gravity = body_gravity(position, dominant_body)
        if config.drag_enabled and dominant_body.has_atmosphere and entity.drag_coefficient > 0:
            friction = drag_acceleration(
                position, entity.velocity, dominant_body.center(), dominant_body.radius,
                config.atmosphere, entity.drag_coefficient,
            )

    engine = engine_acceleration(entity, config.engine_acceleration)

    return AccelerationBreakdown.from_components(gravity, friction, engine)
