"""Newton's Cannon orbital mechanics simulation package."""

from .bodies import (
    CelestialBody,
    create_earth,
)

from .cannon import (
    Cannon,
    CannonParams,
)

from .collision import (
    CollisionResult,
    check_collision_and_handle,
    find_collision,
)

from .config import (
    AtmosphereConfig,
    SimulationConfig,
    TimeControl,
)

from .entity import (
    AccelerationBreakdown,
    Entity,
    EntityType,
)

from .forces import (
    air_density,
    compute_accelerations,
    drag_acceleration,
    engine_acceleration,
    gravitational_acceleration,
    gravitational_acceleration_from_mu,
)

from .frames import (
    GeodeticPosition,
    Transform,
    cartesian_to_geodetic,
    geodetic_to_cartesian,
    reproject_to_frame,
)

from .orientation import (
    look_at,
    update_entity_orientation,
)

from .physics import (
    Quaternion,
    Vector3D,
    integrate_semi_implicit_euler,
)

from .scenarios import (
    create_default_world,
    create_earth_world,
    create_moon,
    create_orbiting_entity,
    create_spaceship,
    set_spaceship_attitude,
)

from .simulation import Simulation

from .world import (
    EntityNameConflictError,
    EntityNotFoundError,
    InvalidEntityError,
    SimulationEvent,
    SimulationEventType,
    World,
)

__all__ = [
    # Bodies
    "CelestialBody",
    "create_earth",
    # Cannon
    "Cannon",
    "CannonParams",
    # Collision
    "CollisionResult",
    "check_collision_and_handle",
    "find_collision",
    # Configuration
    "AtmosphereConfig",
    "SimulationConfig",
    "TimeControl",
    # Entities
    "AccelerationBreakdown",
    "Entity",
    "EntityType",
    # Force models
    "air_density",
    "compute_accelerations",
    "drag_acceleration",
    "engine_acceleration",
    "gravitational_acceleration",
    "gravitational_acceleration_from_mu",
    # Frames
    "GeodeticPosition",
    "Transform",
    "cartesian_to_geodetic",
    "geodetic_to_cartesian",
    "reproject_to_frame",
    # Orientation
    "look_at",
    "update_entity_orientation",
    # Physics primitives
    "Quaternion",
    "Vector3D",
    "integrate_semi_implicit_euler",
    # Scenarios
    "create_default_world",
    "create_earth_world",
    "create_moon",
    "create_orbiting_entity",
    "create_spaceship",
    "set_spaceship_attitude",
    # Simulation
    "Simulation",
    # World
    "EntityNameConflictError",
    "EntityNotFoundError",
    "InvalidEntityError",
    "SimulationEvent",
    "SimulationEventType",
    "World",
]
