"""
Massive bodies: the spheres entities fall toward and collide with.

A body owns (or shares, for the Moon) a Transform that serves as the local
reference frame of grounded entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import EARTH_ANGULAR_VELOCITY, EARTH_RADIUS, G_EARTH_SURFACE, scale_from_km
from .frames import GeodeticPosition, Transform, cartesian_to_geodetic, geodetic_to_cartesian
from .physics import Vector3D


@dataclass(eq=False)
class CelestialBody:
    """
    Spherical attracting body.

    Attributes:
        name: Body name ("Earth", "Moon")
        radius: Radius in scaled units
        surface_gravity: Gravitational acceleration at the surface (scaled units/s^2)
        frame: Reference frame anchored to the body center
        has_atmosphere: Whether the atmosphere model applies around this body
        angular_velocity: Spin rate around the frame Y axis (rad/s)
        entity_name: Name of the Entity moving this body, if any
    """
    name: str
    radius: float
    surface_gravity: float
    frame: Transform
    has_atmosphere: bool = False
    angular_velocity: float = 0.0
    entity_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Body radius must be positive ({self.name})")
        if self.surface_gravity < 0:
            raise ValueError(f"Surface gravity must be non-negative ({self.name})")

    @classmethod
    def from_mu(cls, name: str, radius: float, mu: float, frame: Transform,
                **kwargs) -> CelestialBody:
        """Build a body from its gravitational parameter (scaled units^3/s^2)."""
        return cls(name=name, radius=radius, surface_gravity=mu / (radius * radius),
                   frame=frame, **kwargs)

    @property
    def mu(self) -> float:
        """Gravitational parameter GM = g0 * R^2 (scaled units^3/s^2)."""
        return self.surface_gravity * self.radius * self.radius

    def center(self) -> Vector3D:
        """Body center in world coordinates."""
        return self.frame.world_position()

    def surface_point(self, latitude_deg: float, longitude_deg: float,
                      altitude_km: float = 0.0) -> Vector3D:
        """World position of a point given in body-fixed geodetic coordinates."""
        local = geodetic_to_cartesian(latitude_deg, longitude_deg, altitude_km, self.radius)
        return self.frame.local_to_world(local)

    def geodetic(self, world_position: Vector3D) -> GeodeticPosition:
        """Body-fixed geodetic coordinates of a world position."""
        return cartesian_to_geodetic(self.frame.world_to_local(world_position), self.radius)

    def spin(self, dt: float) -> None:
        if self.angular_velocity:
            self.frame.rotate_local_y(self.angular_velocity * dt)

    def __str__(self) -> str:
        return f"{self.name} (R={self.radius:g})"


def create_earth() -> CelestialBody:
    """The Earth, at the world origin."""
    return CelestialBody(
        name="Earth",
        radius=EARTH_RADIUS,
        surface_gravity=G_EARTH_SURFACE,
        frame=Transform("Earth"),
        has_atmosphere=True,
        angular_velocity=EARTH_ANGULAR_VELOCITY,
    )


def mu_from_km3_s2(mu_km3_s2: float) -> float:
    """Convert a gravitational parameter from km^3/s^2 to scaled units."""
    return scale_from_km(scale_from_km(scale_from_km(mu_km3_s2)))
