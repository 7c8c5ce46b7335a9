#!/usr/bin/env python3
"""
Test Suite for Reference Frames

Tests cover:
1. Transform tree conversions (local <-> world, scale, orientation)
2. Reparenting that preserves the world pose, cycle detection
3. reproject_to_frame() between arbitrary frames
4. Geodetic <-> Cartesian conversions and the local tangent frame
"""

import math
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from newtons_cannon.frames import (
    Transform,
    cartesian_to_geodetic,
    direction_from_azimuth_elevation,
    geodetic_to_cartesian,
    local_tangent_frame,
    reproject_to_frame,
)
from newtons_cannon.physics import Quaternion, Vector3D


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def rotated_parent():
    """A frame translated, turned 90 degrees about Y and scaled by 2."""
    return Transform(
        "parent",
        position=Vector3D(10, 0, 0),
        quaternion=Quaternion.from_axis_angle(Vector3D.unit_y(), math.pi / 2),
        scale=2.0,
    )


# =============================================================================
# TRANSFORM TESTS
# =============================================================================

class TestTransformConversions:
    """Tests for point conversions through the frame tree."""

    def test_root_world_position_is_local_position(self):
        t = Transform("root", position=Vector3D(1, 2, 3))
        assert t.world_position() == Vector3D(1, 2, 3)

    def test_local_to_world_applies_scale_rotation_translation(self, rotated_parent):
        # (1, 0, 0) scaled to (2, 0, 0), turned to (0, 0, -2), moved by (10, 0, 0)
        assert rotated_parent.local_to_world(Vector3D(1, 0, 0)) == Vector3D(10, 0, -2)

    def test_world_to_local_inverts_local_to_world(self, rotated_parent):
        child = Transform("child", position=Vector3D(0, 1, 0), parent=rotated_parent)
        point = Vector3D(-3.5, 7.25, 0.5)
        assert child.world_to_local(child.local_to_world(point)) == point
        assert child.local_to_world(child.world_to_local(point)) == point

    def test_child_world_position(self, rotated_parent):
        child = Transform("child", position=Vector3D(0, 0, 1), parent=rotated_parent)
        # (0, 0, 1) scaled to (0, 0, 2), turned to (2, 0, 0)
        assert child.world_position() == Vector3D(12, 0, 0)

    def test_zero_scale_cannot_be_inverted(self):
        t = Transform("flat", scale=0.0)
        with pytest.raises(ValueError):
            t.world_to_local(Vector3D(1, 0, 0))

    def test_direction_to_world_ignores_translation(self, rotated_parent):
        assert rotated_parent.direction_to_world(Vector3D.unit_z()) == Vector3D(1, 0, 0)

    def test_rotate_local_y_carries_children(self):
        """Children follow the rotation of their parent frame."""
        earth = Transform("earth")
        child = Transform("child", position=Vector3D(1, 0, 0), parent=earth)
        earth.rotate_local_y(math.pi / 2)
        assert child.world_position() == Vector3D(0, 0, -1)


class TestReparenting:
    """Tests for set_parent / attach / detach."""

    def test_attach_preserves_world_position(self, rotated_parent):
        child = Transform("child", position=Vector3D(4, -2, 7))
        before = child.world_position()
        rotated_parent.attach(child)
        assert child.parent is rotated_parent
        assert child.world_position() == before

    def test_attach_preserves_world_orientation(self, rotated_parent):
        q = Quaternion.from_axis_angle(Vector3D(1, 1, 0), 0.8)
        child = Transform("child", quaternion=q)
        rotated_parent.attach(child)
        assert child.world_quaternion().angle_to(q) < 1e-6

    def test_detach_preserves_world_pose(self, rotated_parent):
        child = Transform("child", position=Vector3D(1, 2, 3), parent=rotated_parent)
        position = child.world_position()
        orientation = child.world_quaternion()
        child.detach()
        assert child.parent is None
        assert child.position == position
        assert child.quaternion.angle_to(orientation) < 1e-6

    def test_move_between_frames(self, rotated_parent):
        other = Transform("other", position=Vector3D(0, -5, 0))
        child = Transform("child", position=Vector3D(1, 1, 1), parent=rotated_parent)
        before = child.world_position()
        child.set_parent(other)
        assert child.world_position() == before

    def test_self_parent_is_a_cycle(self):
        t = Transform("t")
        with pytest.raises(ValueError, match="cycle"):
            t.set_parent(t)

    def test_ancestor_under_descendant_is_a_cycle(self):
        a = Transform("a")
        b = Transform("b", parent=a)
        c = Transform("c", parent=b)
        with pytest.raises(ValueError, match="cycle"):
            c.attach(a)
        assert a.parent is None

    def test_ancestors(self):
        a = Transform("a")
        b = Transform("b", parent=a)
        c = Transform("c", parent=b)
        assert [node.name for node in c.ancestors()] == ["b", "a"]
        assert c.is_descendant_of(a)
        assert not a.is_descendant_of(c)


class TestReprojectToFrame:
    """Tests for the pure frame conversion."""

    def test_world_to_world_is_identity(self):
        point = Vector3D(1, 2, 3)
        assert reproject_to_frame(point, None, None) == point

    def test_preserves_world_position(self, rotated_parent):
        other = Transform("other", position=Vector3D(3, 3, 3),
                          quaternion=Quaternion.from_axis_angle(Vector3D.unit_x(), 1.0))
        local = Vector3D(0.5, -1, 2)
        converted = reproject_to_frame(local, rotated_parent, other)
        assert other.local_to_world(converted) == rotated_parent.local_to_world(local)

    def test_into_world(self, rotated_parent):
        assert reproject_to_frame(Vector3D(1, 0, 0), rotated_parent, None) == Vector3D(10, 0, -2)


# =============================================================================
# GEODETIC TESTS
# =============================================================================

class TestGeodetic:
    """Tests for the latitude/longitude/altitude conversions."""

    RADIUS = 637.1

    @pytest.mark.parametrize("lat,lon,expected", [
        (0, 0, (1, 0, 0)),
        (90, 0, (0, 1, 0)),
        (-90, 0, (0, -1, 0)),
        (0, 90, (0, 0, -1)),
        (0, -90, (0, 0, 1)),
        (0, 180, (-1, 0, 0)),
    ])
    def test_axes_convention(self, lat, lon, expected):
        position = geodetic_to_cartesian(lat, lon, 0.0, self.RADIUS)
        assert position == Vector3D(*expected) * self.RADIUS

    def test_altitude_is_converted_to_scaled_units(self):
        position = geodetic_to_cartesian(0, 0, 100.0, self.RADIUS)
        assert abs(position.magnitude - (self.RADIUS + 10.0)) < 1e-9

    @pytest.mark.parametrize("lat,lon,alt", [
        (43.53, 6.89, 100.0),
        (-12.0, -150.0, 0.0),
        (60.0, 120.0, 35786.0),
        (0.0, 0.0, 550.0),
    ])
    def test_round_trip(self, lat, lon, alt):
        geo = cartesian_to_geodetic(geodetic_to_cartesian(lat, lon, alt, self.RADIUS), self.RADIUS)
        assert geo.latitude_deg == pytest.approx(lat, abs=1e-9)
        assert geo.longitude_deg == pytest.approx(lon, abs=1e-9)
        assert geo.altitude_km == pytest.approx(alt, abs=1e-6)

    def test_center_of_body(self):
        geo = cartesian_to_geodetic(Vector3D.zero(), self.RADIUS)
        assert geo.altitude_km == pytest.approx(-6371.0)


class TestLocalTangentFrame:
    """Tests for the north/east/up basis."""

    @pytest.mark.parametrize("lat,lon", [(0, 0), (43.53, 6.89), (-70, 200), (89.9, -45)])
    def test_orthonormal(self, lat, lon):
        north, east, up = local_tangent_frame(lat, lon)
        for v in (north, east, up):
            assert abs(v.magnitude - 1.0) < 1e-10
        assert abs(north.dot(east)) < 1e-10
        assert abs(north.dot(up)) < 1e-10
        assert abs(east.dot(up)) < 1e-10
        assert east.cross(north) == up

    def test_north_points_to_pole(self):
        north, _, _ = local_tangent_frame(10.0, 30.0)
        assert north.y > 0

    def test_east_is_direction_of_growing_longitude(self):
        _, east, _ = local_tangent_frame(20.0, 40.0)
        step = (geodetic_to_cartesian(20.0, 40.001, 0, 1.0)
                - geodetic_to_cartesian(20.0, 40.0, 0, 1.0)).normalized()
        assert east.angle_to(step) < 1e-4

    @pytest.mark.parametrize("azimuth,elevation,axis", [
        (0, 0, 0),
        (90, 0, 1),
        (0, 90, 2),
        (270, 0, 1),
    ])
    def test_azimuth_elevation(self, azimuth, elevation, axis):
        lat, lon = 43.53, 6.89
        frame = local_tangent_frame(lat, lon)
        sign = -1 if azimuth == 270 else 1
        direction = direction_from_azimuth_elevation(lat, lon, azimuth, elevation)
        assert direction == frame[axis] * sign

    def test_elevation_45(self):
        north, _, up = local_tangent_frame(0, 0)
        direction = direction_from_azimuth_elevation(0, 0, 0, 45)
        assert abs(direction.angle_to(up) - math.pi / 4) < 1e-10
        assert abs(direction.angle_to(north) - math.pi / 4) < 1e-10
