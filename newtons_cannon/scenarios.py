#!/usr/bin/env python3
"""
Scenario setup: bodies and orbiting entities.

Entities are placed from body-fixed geodetic coordinates on a circular orbit
around a reference body (Earth or Moon):
- position: latitude / longitude / altitude above the reference body
- velocity: sqrt(mu / r) along the local horizon, with an azimuth measured
  clockwise from local north (90 = eastward)
- Moon-relative orbits inherit the Moon velocity

Usage:
    world = create_default_world()
    world.tick(1.0)
"""

from __future__ import annotations

import math
from typing import Optional

from .bodies import CelestialBody, create_earth
from .config import SimulationConfig
from .constants import (
    EARTH_RADIUS_KM,
    G_MOON_SURFACE,
    MOON_DISTANCE_KM,
    MOON_RADIUS,
)
from .entity import Entity, EntityType
from .frames import Transform, direction_from_azimuth_elevation, geodetic_to_cartesian
from .orientation import look_at
from .physics import Quaternion
from .world import World

# Default masses (kg) and drag factors for scenario entities
DEFAULT_ENTITY_MASS = 1000.0
ORBITER_DRAG_COEFF = 0.0002


def circular_orbit_speed(body: CelestialBody, radius: float) -> float:
    """Speed of a circular orbit of given radius (scaled units, scaled units/s)."""
    if radius <= 0:
        raise ValueError("Orbit radius must be positive")
    return math.sqrt(body.mu / radius)


def orbital_period(body: CelestialBody, radius: float) -> float:
    """Period (s) of a circular orbit of given radius around body."""
    return 2 * math.pi * math.sqrt(radius ** 3 / body.mu)


def create_orbiting_entity(
    world: World,
    entity_type: EntityType,
    name: str,
    reference_body: str = "Earth",
    altitude_km: float = 550.0,
    latitude_deg: float = 0.0,
    longitude_deg: float = 0.0,
    azimuth_deg: float = 90.0,
    mass: float = DEFAULT_ENTITY_MASS,
    drag_coefficient: Optional[float] = None,
    description: str = "",
) -> Entity:
    """
    Create, register and launch an entity on a circular orbit.

    Args:
        world: World receiving the entity
        entity_type: Variant of the entity
        name: Unique entity name
        reference_body: Name of the body the orbit is computed around
        altitude_km: Altitude above the reference body surface
        latitude_deg: Body-fixed latitude of the starting point
        longitude_deg: Body-fixed longitude of the starting point
        azimuth_deg: Direction of motion, clockwise from local north
        mass: Entity mass (kg)
        drag_coefficient: Drag factor, defaults to none for the Moon and
                          ORBITER_DRAG_COEFF otherwise
        description: Free text for the UI

    Returns:
        The registered Entity, already free falling
    """
    body = world.get_body(reference_body)

    local_position = geodetic_to_cartesian(latitude_deg, longitude_deg, altitude_km, body.radius)
    position = body.frame.local_to_world(local_position)

    speed = circular_orbit_speed(body, local_position.magnitude)
    direction = body.frame.direction_to_world(
        direction_from_azimuth_elevation(latitude_deg, longitude_deg, azimuth_deg)
    )
    velocity = direction * speed

    # Orbits around a moving body are relative to it
    if body.entity_name is not None:
        velocity = velocity + world.get_entity_by_name(body.entity_name).velocity

    if drag_coefficient is None:
        drag_coefficient = 0.0 if entity_type is EntityType.MOON else ORBITER_DRAG_COEFF

    entity = Entity(
        entity_type=entity_type,
        name=name,
        body=Transform(name, position=position),
        mass=mass,
        drag_coefficient=drag_coefficient,
        velocity=velocity,
        is_free_falling=True,
        description=description,
    )
    world.register_entity(entity)
    return entity


def create_moon(world: World) -> Entity:
    """
    Add the Moon to a world that already contains the Earth.

    The Moon is both an entity (it orbits the Earth) and a body (its frame
    hosts what lands on it).
    """
    moon = create_orbiting_entity(
        world, EntityType.MOON, "Moon",
        reference_body="Earth",
        altitude_km=MOON_DISTANCE_KM - EARTH_RADIUS_KM,
        azimuth_deg=90.0,
        mass=7.342e22,
        description="Earth's natural satellite",
    )
    world.add_body(CelestialBody(
        name="Moon",
        radius=MOON_RADIUS,
        surface_gravity=G_MOON_SURFACE,
        frame=moon.body,
        entity_name=moon.name,
    ))
    return moon


def create_spaceship(
    world: World,
    name: str,
    reference_body: str = "Earth",
    altitude_km: float = 400.0,
    latitude_deg: float = 0.0,
    longitude_deg: float = 0.0,
    azimuth_deg: float = 90.0,
) -> Entity:
    """Create a spaceship on a circular orbit, nose along its velocity."""
    ship = create_orbiting_entity(
        world, EntityType.SPACESHIP, name, reference_body,
        altitude_km, latitude_deg, longitude_deg, azimuth_deg,
    )
    look_at(ship.body, ship.world_position() + ship.velocity.normalized())
    ship.snapshot()
    return ship


def set_spaceship_attitude(entity: Entity, yaw_deg: float, pitch_deg: float,
                           roll_deg: float) -> Quaternion:
    """
    Pilot orientation command: yaw (Y), pitch (X) then roll (Z) in degrees.

    Pitch is limited to +/-89 degrees like the cockpit controls.
    """
    if entity.entity_type is not EntityType.SPACESHIP:
        raise ValueError(f"{entity.name} is not a spaceship")
    pitch_deg = max(-89.0, min(89.0, pitch_deg))
    q = Quaternion.from_euler_yxz(
        math.radians(yaw_deg), math.radians(pitch_deg), math.radians(roll_deg)
    ).normalized()
    entity.body.quaternion = q
    return q


def create_default_world(config: Optional[SimulationConfig] = None) -> World:
    """
    The standard scene: Earth, Moon, low orbit and geostationary
    satellites, and an asteroid orbiting the Moon.
    """
    world = World(config)
    world.add_body(create_earth())
    create_moon(world)

    create_orbiting_entity(world, EntityType.SATELLITE, "Satellite-LEO#1", "Earth", 550, 0, 0, +45)
    create_orbiting_entity(world, EntityType.SATELLITE, "Satellite-LEO#2", "Earth", 550, 0, 0, -45)
    create_orbiting_entity(world, EntityType.SATELLITE, "Satellite-GeoStat#1", "Earth", 35786, 0, 0, +90)
    create_orbiting_entity(world, EntityType.SATELLITE, "Satellite-GeoStat#2", "Earth", 35786, 0, 0, -90)

    create_orbiting_entity(world, EntityType.ASTEROID, "Asteroid-Moon", "Moon", 2000, 0, 0, 30)

    return world


def create_earth_world(config: Optional[SimulationConfig] = None) -> World:
    """A world containing only the Earth."""
    world = World(config)
    world.add_body(create_earth())
    return world
