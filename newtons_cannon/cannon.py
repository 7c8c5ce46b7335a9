#!/usr/bin/env python3
"""
Newton's cannon: a gun standing on the Earth that fires cannonballs.

The cannon is fixed in the Earth frame (it turns with the Earth) and is
aimed with an azimuth (clockwise from local north) and an elevation above
the local horizon. Each shot creates a new Cannonball entity in the world
frame with the muzzle velocity along the barrel.

Example:
    cannon = Cannon(world.get_body("Earth"), CannonParams(lat=0, lon=0, elevation=45, speed_kms=1.5))
    ball = cannon.fire(world)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .bodies import CelestialBody
from .constants import COLLISION_THRESHOLD_KM, scale_from_km, scale_from_meter
from .entity import Entity, EntityType
from .frames import Transform, direction_from_azimuth_elevation, geodetic_to_cartesian, local_tangent_frame
from .physics import Vector3D
from .world import World

logger = logging.getLogger(__name__)


# Barrel length, the ball leaves the cannon at the muzzle (m)
CANNON_TUBE_LENGTH_METERS = 30.0

MAX_CANNON_ALTITUDE_KM = 3000.0
MAX_MUZZLE_SPEED_KMS = 15.0


@dataclass(frozen=True)
class CannonParams:
    """
    Placement and fire control of the cannon.

    Attributes:
        lat: Latitude (degrees, -90..90)
        lon: Longitude (degrees, -180..180)
        altitude_km: Height of the cannon base above the surface (0..3000)
        azimuth: Firing azimuth, clockwise from north (degrees, 0..360)
        elevation: Barrel elevation above the horizon (degrees, 0..90)
        speed_kms: Muzzle speed (km/s, 0..15)
    """
    lat: float = 43.53
    lon: float = 6.89
    altitude_km: float = 100.0
    azimuth: float = 0.0
    elevation: float = 45.0
    speed_kms: float = 4.0

    def __post_init__(self) -> None:
        _check_range("lat", self.lat, -90.0, 90.0)
        _check_range("lon", self.lon, -180.0, 180.0)
        _check_range("altitude_km", self.altitude_km, 0.0, MAX_CANNON_ALTITUDE_KM)
        _check_range("azimuth", self.azimuth, 0.0, 360.0)
        _check_range("elevation", self.elevation, 0.0, 90.0)
        _check_range("speed_kms", self.speed_kms, 0.0, MAX_MUZZLE_SPEED_KMS)

    def __str__(self) -> str:
        return (f"lat={self.lat:.2f} lon={self.lon:.2f} altitude={self.altitude_km:.0f}km "
                f"azimuth={self.azimuth:.0f} elevation={self.elevation:.0f} "
                f"speed={self.speed_kms:.2f}km/s")


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"Cannon {name} must be within [{low:g}, {high:g}], got {value}")


class Cannon:
    """
    A cannon attached to a body (normally the Earth).

    The ball starts at the muzzle, lifted by the collision threshold so that
    a shot from ground level is not taken for an impact.
    """

    def __init__(self, body: CelestialBody, params: Optional[CannonParams] = None,
                 clearance_km: float = COLLISION_THRESHOLD_KM):
        self.body = body
        self.params = params or CannonParams()
        self.clearance_km = clearance_km
        self.fire_counter = 0

    def update_params(self, **changes) -> CannonParams:
        """Change some parameters, the whole set is validated again."""
        self.params = replace(self.params, **changes)
        logger.info("Cannon has been updated with: %s", self.params)
        return self.params

    def base_position_local(self) -> Vector3D:
        """Cannon base in the body frame."""
        p = self.params
        return geodetic_to_cartesian(p.lat, p.lon, p.altitude_km, self.body.radius)

    def muzzle_direction_local(self) -> Vector3D:
        p = self.params
        return direction_from_azimuth_elevation(p.lat, p.lon, p.azimuth, p.elevation)

    def muzzle_direction(self) -> Vector3D:
        """Unit barrel direction in world coordinates."""
        return self.body.frame.direction_to_world(self.muzzle_direction_local())

    def muzzle_position_local(self) -> Vector3D:
        """Ball starting point in the body frame."""
        _, _, up = local_tangent_frame(self.params.lat, self.params.lon)
        return (self.base_position_local()
                + up * scale_from_km(self.clearance_km)
                + self.muzzle_direction_local() * scale_from_meter(CANNON_TUBE_LENGTH_METERS))

    def muzzle_position(self) -> Vector3D:
        """Ball starting point in world coordinates."""
        return self.body.frame.local_to_world(self.muzzle_position_local())

    def muzzle_velocity(self) -> Vector3D:
        """Initial ball velocity in world coordinates (scaled units/s)."""
        return self.muzzle_direction() * scale_from_km(self.params.speed_kms)

    def fire(self, world: World) -> Entity:
        """
        Fire a new cannonball.

        The ball is created at rest in the muzzle, in the body frame, so a
        reset() puts it back in the cannon wherever the body has turned.

        Returns:
            The registered cannonball, in flight
        """
        logger.info("Fire cannon with: %s", self.params)
        self.fire_counter += 1
        name = f"Cannonball #{self.fire_counter}"
        while world.has_entity(name):
            self.fire_counter += 1
            name = f"Cannonball #{self.fire_counter}"

        ball = Entity(
            entity_type=EntityType.CANNONBALL,
            name=name,
            body=Transform(name, position=self.muzzle_position_local(), parent=self.body.frame),
        )
        world.register_entity(ball)
        world.fire(ball, self.muzzle_velocity())
        return ball
