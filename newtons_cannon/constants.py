"""
Physical Constants and Unit Helpers for the Newton's Cannon simulator.

All lengths inside the simulation are expressed in "scaled" units: kilometres
divided by GLOBAL_SCALE. Velocities are scaled units per second and
accelerations scaled units per second squared.
"""

import math


# =============================================================================
# UNIT SCALE
# =============================================================================

# One scaled unit is GLOBAL_SCALE kilometres
GLOBAL_SCALE = 10


def scale_from_km(value: float) -> float:
    """Convert a real length in km to scaled units."""
    return value / GLOBAL_SCALE


def scale_to_km(value: float) -> float:
    """Convert a length in scaled units to km."""
    return value * GLOBAL_SCALE


def scale_from_meter(value: float) -> float:
    """Convert a real length in metres to scaled units."""
    return value / 1000 / GLOBAL_SCALE


# =============================================================================
# CELESTIAL BODIES
# =============================================================================

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS = scale_from_km(EARTH_RADIUS_KM)

MOON_RADIUS_KM = 1737.0
MOON_RADIUS = scale_from_km(MOON_RADIUS_KM)
MOON_DISTANCE_KM = 384_400.0

# Surface gravity (m/s^2 and scaled units/s^2)
G_EARTH_SURFACE_MS2 = 9.81
G_MOON_SURFACE_MS2 = 1.625
G_EARTH_SURFACE = scale_from_meter(G_EARTH_SURFACE_MS2)
G_MOON_SURFACE = scale_from_meter(G_MOON_SURFACE_MS2)

# Standard gravitational parameters (km^3/s^2)
GM_EARTH_KM3_S2 = 398_600.4418
GM_MOON_KM3_S2 = 4_902.8

# Sidereal rotation (rad/s), period ~23h56m4s
EARTH_ANGULAR_VELOCITY = 2 * math.pi / 86164


# =============================================================================
# PHYSICS TUNING
# =============================================================================

# Below this radial distance gravity is not computed (scaled units)
GRAVITY_EPSILON = 0.01

# Clearance above a body surface that counts as contact
COLLISION_THRESHOLD_KM = 1.0

# Atmosphere
ATMOSPHERE_REGULAR_HEIGHT_KM = 200.0
ATMOSPHERE_REGULAR_DENSITY_SURFACE = 1.225  # kg/m^3
TROPOSPHERE_HEIGHT_RATIO = 0.07  # troposphere height / atmosphere height
DEFAULT_DRAG_COEFF = 0.0004

# Speed under which drag is ignored (m/s)
MIN_DRAG_SPEED_MS = 0.001

# Spaceship main engine, acceleration at full power (scaled units/s^2)
ENGINE_ACCELERATION = 0.0008

# Spaceship velocity alignment drift
MAX_ALIGN_TURN_RATE = 0.5  # rad/s
ALIGN_DEAD_BAND_RAD = 0.0005

# Time acceleration limits (x real time)
MIN_TIME_ACCELERATION = 1.0
MAX_TIME_ACCELERATION = 1000.0
DEFAULT_TIME_ACCELERATION = 100.0
