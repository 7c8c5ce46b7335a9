#!/usr/bin/env python3
"""
Physics Primitives for the Newton's Cannon simulator

Implements the building blocks shared by every physics model:
- 3D vector operations
- Unit quaternions for body orientation
- Semi-implicit (symplectic) Euler integration

Coordinate system (same as the scene graph that renders the simulation):
- Y: Earth rotation axis (north pole at +Y)
- X/Z: equatorial plane
- Body forward axis is +Z
"""

from __future__ import annotations
import math
from dataclasses import dataclass


# Component tolerance of Vector3D equality
VECTOR_EQ_TOLERANCE = 1e-10

# Magnitude under which a vector is considered null by safe_normalized()
NORMALIZE_EPSILON = 1e-12


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass
class Vector3D:
    """
    3D vector for positions, velocities, accelerations and directions.

    Uses the scene's right-handed coordinate system. Lengths are in scaled
    units (see constants.GLOBAL_SCALE) unless otherwise specified.
    Comparison with == is component-wise within VECTOR_EQ_TOLERANCE.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3D:
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return self * (1.0 / scalar)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3D):
            return False
        return all(abs(a - b) < VECTOR_EQ_TOLERANCE
                   for a, b in zip(self.to_tuple(), other.to_tuple()))

    def dot(self, other: Vector3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Right-handed cross product (X x Y = Z)."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared)

    @property
    def magnitude_squared(self) -> float:
        return self.dot(self)

    def normalized(self) -> Vector3D:
        """Unit vector with the same direction; the zero vector stays zero."""
        return self.safe_normalized(0.0)

    def safe_normalized(self, epsilon: float = NORMALIZE_EPSILON) -> Vector3D:
        """
        Unit vector with the same direction.

        Returns the zero vector when the magnitude is not above epsilon, so
        callers never divide by a vanishing length.
        """
        mag = self.magnitude
        if mag <= epsilon:
            return Vector3D.zero()
        return self / mag

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0 and self.z == 0

    def distance_to(self, other: Vector3D) -> float:
        return (self - other).magnitude

    def angle_to(self, other: Vector3D) -> float:
        """Unsigned angle between two vectors (radians), 0 if either is null."""
        lengths = self.magnitude * other.magnitude
        if lengths == 0:
            return 0.0
        cos_angle = self.dot(other) / lengths
        return math.acos(max(-1.0, min(1.0, cos_angle)))

    def rotate_around_axis(self, axis: Vector3D, angle_rad: float) -> Vector3D:
        """
        Rodrigues rotation of this vector by angle_rad around axis
        (right-hand rule, axis need not be normalized).
        """
        k = axis.normalized()
        c = math.cos(angle_rad)
        s = math.sin(angle_rad)
        return self * c + k.cross(self) * s + k * (k.dot(self) * (1 - c))

    def apply_quaternion(self, q: Quaternion) -> Vector3D:
        """Rotate this vector by a unit quaternion."""
        return q.rotate(self)

    def any_perpendicular(self) -> Vector3D:
        """Some unit vector perpendicular to this one."""
        helper = Vector3D.unit_x() if abs(self.x) < 0.9 else Vector3D.unit_y()
        return self.cross(helper).normalized()

    def copy(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, values: tuple[float, float, float]) -> Vector3D:
        x, y, z = values
        return cls(x, y, z)

    @classmethod
    def zero(cls) -> Vector3D:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_x(cls) -> Vector3D:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3D:
        """Earth rotation axis, north pole."""
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls) -> Vector3D:
        """Body forward axis."""
        return cls(0.0, 0.0, 1.0)

    def __repr__(self) -> str:
        return f"Vector3D({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


# =============================================================================
# QUATERNION CLASS
# =============================================================================

@dataclass
class Quaternion:
    """
    Rotation quaternion (x, y, z vector part, w scalar part).

    Products follow the Hamilton convention: (a * b).rotate(v) rotates v by
    b first, then by a.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3D, angle_rad: float) -> Quaternion:
        """Rotation of angle_rad around axis (axis need not be normalized)."""
        k = axis.normalized()
        half = angle_rad / 2
        s = math.sin(half)
        return cls(k.x * s, k.y * s, k.z * s, math.cos(half))

    @classmethod
    def from_euler_yxz(cls, yaw_rad: float, pitch_rad: float,
                       roll_rad: float) -> Quaternion:
        """
        Build an orientation from yaw (Y), pitch (X) and roll (Z) angles,
        applied in Y, X, Z order.
        """
        c1 = math.cos(pitch_rad / 2)
        c2 = math.cos(yaw_rad / 2)
        c3 = math.cos(roll_rad / 2)
        s1 = math.sin(pitch_rad / 2)
        s2 = math.sin(yaw_rad / 2)
        s3 = math.sin(roll_rad / 2)
        return cls(
            s1 * c2 * c3 + c1 * s2 * s3,
            c1 * s2 * c3 - s1 * c2 * s3,
            c1 * c2 * s3 - s1 * s2 * c3,
            c1 * c2 * c3 + s1 * s2 * s3,
        )

    @classmethod
    def from_basis(cls, x_axis: Vector3D, y_axis: Vector3D,
                   z_axis: Vector3D) -> Quaternion:
        """
        Quaternion of the rotation matrix whose columns are the given
        orthonormal axes.
        """
        m11, m12, m13 = x_axis.x, y_axis.x, z_axis.x
        m21, m22, m23 = x_axis.y, y_axis.y, z_axis.y
        m31, m32, m33 = x_axis.z, y_axis.z, z_axis.z
        trace = m11 + m22 + m33

        if trace > 0:
            s = 0.5 / math.sqrt(trace + 1.0)
            return cls((m32 - m23) * s, (m13 - m31) * s,
                       (m21 - m12) * s, 0.25 / s)
        if m11 > m22 and m11 > m33:
            s = 2.0 * math.sqrt(1.0 + m11 - m22 - m33)
            return cls(0.25 * s, (m12 + m21) / s,
                       (m13 + m31) / s, (m32 - m23) / s)
        if m22 > m33:
            s = 2.0 * math.sqrt(1.0 + m22 - m11 - m33)
            return cls((m12 + m21) / s, 0.25 * s,
                       (m23 + m32) / s, (m13 - m31) / s)
        s = 2.0 * math.sqrt(1.0 + m33 - m11 - m22)
        return cls((m13 + m31) / s, (m23 + m32) / s,
                   0.25 * s, (m21 - m12) / s)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product."""
        ax, ay, az, aw = self.x, self.y, self.z, self.w
        bx, by, bz, bw = other.x, other.y, other.z, other.w
        return Quaternion(
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    @property
    def norm(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2)

    def normalized(self) -> Quaternion:
        n = self.norm
        if n == 0:
            return Quaternion.identity()
        return Quaternion(self.x / n, self.y / n, self.z / n, self.w / n)

    def conjugate(self) -> Quaternion:
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def inverse(self) -> Quaternion:
        """Inverse rotation (the quaternion is normalized first)."""
        return self.normalized().conjugate()

    def rotate(self, v: Vector3D) -> Vector3D:
        """Rotate a vector by this quaternion."""
        qx, qy, qz, qw = self.x, self.y, self.z, self.w

        ix = qw * v.x + qy * v.z - qz * v.y
        iy = qw * v.y + qz * v.x - qx * v.z
        iz = qw * v.z + qx * v.y - qy * v.x
        iw = -qx * v.x - qy * v.y - qz * v.z

        return Vector3D(
            ix * qw + iw * -qx + iy * -qz - iz * -qy,
            iy * qw + iw * -qy + iz * -qx - ix * -qz,
            iz * qw + iw * -qz + ix * -qy - iy * -qx,
        )

    def forward(self) -> Vector3D:
        """Body forward axis (+Z) expressed in the parent frame."""
        return self.rotate(Vector3D.unit_z())

    def angle_to(self, other: Quaternion) -> float:
        """Smallest rotation angle between two orientations (radians)."""
        dot = abs(self.x * other.x + self.y * other.y +
                  self.z * other.z + self.w * other.w)
        return 2 * math.acos(min(1.0, dot))

    def copy(self) -> Quaternion:
        return Quaternion(self.x, self.y, self.z, self.w)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)

    def __repr__(self) -> str:
        return (f"Quaternion({self.x:.6g}, {self.y:.6g}, "
                f"{self.z:.6g}, {self.w:.6g})")


# =============================================================================
# INTEGRATION
# =============================================================================

def integrate_semi_implicit_euler(
    position: Vector3D,
    velocity: Vector3D,
    acceleration: Vector3D,
    dt: float
) -> tuple[Vector3D, Vector3D]:
    """
    Advance one body by one step of semi-implicit (symplectic) Euler.

    v_new = v + a * dt
    x_new = x + v_new * dt

    The velocity is updated before the position. dt is used as given, the
    caller is responsible for bounding it.

    Args:
        position: Current position
        velocity: Current velocity
        acceleration: Total acceleration for this step
        dt: Time step in seconds

    Returns:
        Tuple of (new_position, new_velocity)
    """
    new_velocity = velocity + acceleration * dt
    new_position = position + new_velocity * dt
    return new_position, new_velocity
