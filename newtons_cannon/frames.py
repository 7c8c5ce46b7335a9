"""
Reference Frames and Coordinate Conversions

Implements the transform tree the simulation mutates and the scene reads:
- Transform: a node with local position/orientation/scale and one parent
- Reparenting that preserves the world pose, with cycle detection
- reproject_to_frame(): pure conversion of a point between two frames
- Geodetic (latitude/longitude/altitude) <-> body-relative Cartesian

Geodetic convention (matches the Earth texture mapping of the scene):
    x =  r cos(lat) cos(lon)
    y =  r sin(lat)
    z = -r cos(lat) sin(lon)
so +Y is the north pole and longitude increases eastward, which is also the
direction of a positive rotation about +Y.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .constants import scale_from_km, scale_to_km
from .physics import Quaternion, Vector3D


# =============================================================================
# TRANSFORM TREE
# =============================================================================

@dataclass(eq=False)
class Transform:
    """
    A node in the reference-frame tree.

    position, quaternion and scale are expressed in the parent frame. A node
    without parent lives directly in the world frame.

    Attributes:
        name: Label used in logs and error messages
        position: Origin of this frame in the parent frame (scaled units)
        quaternion: Orientation relative to the parent frame
        scale: Uniform scale applied to local coordinates
        parent: Parent frame, None for the world root
    """
    name: str
    position: Vector3D = field(default_factory=Vector3D.zero)
    quaternion: Quaternion = field(default_factory=Quaternion.identity)
    scale: float = 1.0
    parent: Optional[Transform] = field(default=None, repr=False)

    def ancestors(self) -> Iterator[Transform]:
        """Parents from the nearest up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_descendant_of(self, other: Transform) -> bool:
        return any(node is other for node in self.ancestors())

    def world_quaternion(self) -> Quaternion:
        if self.parent is None:
            return self.quaternion.copy()
        return self.parent.world_quaternion() * self.quaternion

    def world_position(self) -> Vector3D:
        """Origin of this frame in world coordinates."""
        if self.parent is None:
            return self.position.copy()
        return self.parent.local_to_world(self.position)

    def local_to_world(self, point: Vector3D) -> Vector3D:
        """Convert a point expressed in this frame to world coordinates."""
        in_parent = self.position + self.quaternion.rotate(point * self.scale)
        if self.parent is None:
            return in_parent
        return self.parent.local_to_world(in_parent)

    def world_to_local(self, point: Vector3D) -> Vector3D:
        """Convert a world point to this frame's coordinates."""
        in_parent = point if self.parent is None else self.parent.world_to_local(point)
        if self.scale == 0:
            raise ValueError(f"Frame '{self.name}' has a zero scale")
        return self.quaternion.inverse().rotate(in_parent - self.position) / self.scale

    def direction_to_world(self, direction: Vector3D) -> Vector3D:
        """Rotate a direction expressed in this frame to world axes."""
        return self.world_quaternion().rotate(direction)

    def set_parent(self, new_parent: Optional[Transform]) -> None:
        """
        Move this node under new_parent keeping its world pose.

        Raises:
            ValueError: if the change would make the tree cyclic
        """
        if new_parent is self.parent:
            return
        if new_parent is not None and (new_parent is self or new_parent.is_descendant_of(self)):
            raise ValueError(
                f"Cannot attach '{self.name}' to '{new_parent.name}': cycle in frame tree"
            )

        world_q = self.world_quaternion()
        self.position = reproject_to_frame(self.position, self.parent, new_parent)
        if new_parent is None:
            self.quaternion = world_q
        else:
            self.quaternion = (new_parent.world_quaternion().inverse() * world_q).normalized()
        self.parent = new_parent

    def attach(self, child: Transform) -> None:
        """Make child a child of this frame, preserving its world pose."""
        child.set_parent(self)

    def detach(self) -> None:
        """Move this node to the world root, preserving its world pose."""
        self.set_parent(None)

    def rotate_local_y(self, angle_rad: float) -> None:
        """Spin the frame around its own Y axis."""
        spin = Quaternion.from_axis_angle(Vector3D.unit_y(), angle_rad)
        self.quaternion = (self.quaternion * spin).normalized()


def reproject_to_frame(
    local_position: Vector3D,
    old_frame: Optional[Transform],
    new_frame: Optional[Transform]
) -> Vector3D:
    """
    Express a point given in old_frame in new_frame coordinates.

    None stands for the world frame. The world position of the point is
    unchanged by the conversion.
    """
    world = local_position if old_frame is None else old_frame.local_to_world(local_position)
    if new_frame is None:
        return world.copy()
    return new_frame.world_to_local(world)


# =============================================================================
# GEODETIC CONVERSIONS
# =============================================================================

@dataclass
class GeodeticPosition:
    """Body-relative spherical coordinates."""
    latitude_deg: float
    longitude_deg: float
    altitude_km: float

    def __str__(self) -> str:
        return (f"lat={self.latitude_deg:.2f} lon={self.longitude_deg:.2f} "
                f"alt={self.altitude_km:.1f}km")


def geodetic_to_cartesian(
    latitude_deg: float,
    longitude_deg: float,
    altitude_km: float,
    body_radius: float
) -> Vector3D:
    """
    Position in the body frame of a point at the given latitude, longitude
    and altitude above a spherical body of radius body_radius (scaled units).
    """
    lat = math.radians(latitude_deg)
    lon = math.radians(longitude_deg)
    r = body_radius + scale_from_km(altitude_km)
    return Vector3D(
        r * math.cos(lat) * math.cos(lon),
        r * math.sin(lat),
        -r * math.cos(lat) * math.sin(lon),
    )


def cartesian_to_geodetic(position: Vector3D, body_radius: float) -> GeodeticPosition:
    """Inverse of geodetic_to_cartesian for a position in the body frame."""
    r = position.magnitude
    if r == 0:
        return GeodeticPosition(0.0, 0.0, -scale_to_km(body_radius))
    latitude = math.degrees(math.asin(max(-1.0, min(1.0, position.y / r))))
    longitude = math.degrees(math.atan2(-position.z, position.x))
    return GeodeticPosition(latitude, longitude, scale_to_km(r - body_radius))


def local_tangent_frame(
    latitude_deg: float,
    longitude_deg: float
) -> tuple[Vector3D, Vector3D, Vector3D]:
    """
    Unit (north, east, up) vectors at a surface point, in the body frame.

    At the poles north is undefined; +Y rotated toward the prime meridian is
    returned so the frame stays orthonormal.
    """
    lat = math.radians(latitude_deg)
    lon = math.radians(longitude_deg)
    up = Vector3D(
        math.cos(lat) * math.cos(lon),
        math.sin(lat),
        -math.cos(lat) * math.sin(lon),
    )
    north = Vector3D(
        -math.sin(lat) * math.cos(lon),
        math.cos(lat),
        math.sin(lat) * math.sin(lon),
    ).normalized()
    east = Vector3D(-math.sin(lon), 0.0, -math.cos(lon))
    return north, east, up


def direction_from_azimuth_elevation(
    latitude_deg: float,
    longitude_deg: float,
    azimuth_deg: float,
    elevation_deg: float = 0.0
) -> Vector3D:
    """
    Unit direction in the body frame for an azimuth (clockwise from north)
    and an elevation above the local horizon.
    """
    north, east, up = local_tangent_frame(latitude_deg, longitude_deg)
    az = math.radians(azimuth_deg)
    el = math.radians(elevation_deg)
    horizontal = (north * math.cos(az) + east * math.sin(az)).normalized()
    return (horizontal * math.cos(el) + up * math.sin(el)).normalized()
