"""
Simulated entities.

An Entity is one physical object of the scene (cannonball, satellite,
spaceship, asteroid or the Moon). The simulation core owns its kinematic
state; the renderer only reads body position and orientation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import DEFAULT_DRAG_COEFF
from .frames import Transform
from .physics import Quaternion, Vector3D


# =============================================================================
# ENTITY TYPES
# =============================================================================

class EntityType(Enum):
    """Closed set of entity variants; force and orientation models dispatch on it."""
    CANNONBALL = "cannonball"
    SATELLITE = "satellite"
    SPACESHIP = "spaceship"
    ASTEROID = "asteroid"
    MOON = "moon"


VALID_THRUST_DIRECTIONS = (-1, 0, 1)


# =============================================================================
# ACCELERATION BREAKDOWN
# =============================================================================

@dataclass
class AccelerationBreakdown:
    """
    Per-tick acceleration components of an entity (scaled units/s^2).

    total is always gravity + friction + engine once a tick has run.
    """
    gravity: Vector3D = field(default_factory=Vector3D.zero)
    friction: Vector3D = field(default_factory=Vector3D.zero)
    engine: Vector3D = field(default_factory=Vector3D.zero)
    total: Vector3D = field(default_factory=Vector3D.zero)

    @classmethod
    def from_components(cls, gravity: Vector3D, friction: Vector3D,
                        engine: Vector3D) -> AccelerationBreakdown:
        return cls(gravity, friction, engine, gravity + friction + engine)

    def recompute_total(self) -> None:
        self.total = self.gravity + self.friction + self.engine

    def copy(self) -> AccelerationBreakdown:
        return AccelerationBreakdown(
            self.gravity.copy(), self.friction.copy(),
            self.engine.copy(), self.total.copy()
        )


# =============================================================================
# ENTITY
# =============================================================================

@dataclass(eq=False)
class Entity:
    """
    One simulated physical object.

    Attributes:
        entity_type: Variant tag selecting force/orientation behaviour
        name: Unique name within a World
        body: Transform of the object (position, orientation, scale, frame)
        mass: Mass (kg), informational for now
        drag_coefficient: Lumped drag factor used by the drag model
        velocity: Velocity in the world frame, meaningful while free falling
        is_free_falling: True while forces are integrated each tick
        thrust_power: Main engine power in [0, 1] (spaceships)
        thrust_direction: -1 reverse, 0 off, 1 forward (spaceships)
        description: Free text shown by the UI
        accelerations: Breakdown computed at the last tick
        has_impacted: Set once the entity hit a body surface
    """
    entity_type: EntityType
    name: str
    body: Transform
    mass: float = 1.0
    drag_coefficient: float = DEFAULT_DRAG_COEFF
    velocity: Vector3D = field(default_factory=Vector3D.zero)
    is_free_falling: bool = False
    thrust_power: float = 0.0
    thrust_direction: int = 0
    description: str = ""
    accelerations: AccelerationBreakdown = field(default_factory=AccelerationBreakdown)
    has_impacted: bool = False

    # Snapshot restored by reset()
    _initial_position: Vector3D = field(init=False, repr=False)
    _initial_quaternion: Quaternion = field(init=False, repr=False)
    _initial_velocity: Vector3D = field(init=False, repr=False)
    _initial_parent: Optional[Transform] = field(init=False, repr=False)
    _initial_free_falling: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.entity_type, EntityType):
            raise ValueError(f"Unknown entity type: {self.entity_type!r}")
        if not self.name:
            raise ValueError("Entity name must not be empty")
        if self.mass <= 0:
            raise ValueError("Entity mass must be positive")
        if self.drag_coefficient < 0:
            raise ValueError("Drag coefficient must be non-negative")
        self._check_thrust(self.thrust_power, self.thrust_direction)
        self.snapshot()

    @staticmethod
    def _check_thrust(power: float, direction: int) -> None:
        if not 0.0 <= power <= 1.0:
            raise ValueError(f"Thrust power must be within [0, 1], got {power}")
        if direction not in VALID_THRUST_DIRECTIONS:
            raise ValueError(f"Thrust direction must be -1, 0 or 1, got {direction}")

    @property
    def is_grounded(self) -> bool:
        return not self.is_free_falling

    def world_position(self) -> Vector3D:
        return self.body.world_position()

    def forward(self) -> Vector3D:
        """Forward (+Z) axis of the body in world coordinates."""
        return self.body.world_quaternion().forward()

    def set_thrust(self, power: float, direction: int = 1) -> None:
        """Engine command from the pilot."""
        self._check_thrust(power, direction)
        self.thrust_power = power
        self.thrust_direction = direction

    def cut_thrust(self) -> None:
        self.thrust_direction = 0

    def fire(self, initial_velocity: Vector3D) -> None:
        """
        Launch the entity: Grounded -> Flying.

        The body is moved to the world frame (keeping its world position)
        since flight is integrated in world coordinates.
        """
        self.body.detach()
        self.velocity = initial_velocity.copy()
        self.is_free_falling = True
        self.has_impacted = False

    def snapshot(self) -> None:
        """Record the current state as the one restored by reset()."""
        self._initial_position = self.body.position.copy()
        self._initial_quaternion = self.body.quaternion.copy()
        self._initial_velocity = self.velocity.copy()
        self._initial_parent = self.body.parent
        self._initial_free_falling = self.is_free_falling

    def reset(self) -> None:
        """Restore the state recorded at creation (or at the last snapshot)."""
        self.body.parent = self._initial_parent
        self.body.position = self._initial_position.copy()
        self.body.quaternion = self._initial_quaternion.copy()
        self.velocity = self._initial_velocity.copy()
        self.is_free_falling = self._initial_free_falling
        self.has_impacted = False
        self.accelerations = AccelerationBreakdown()

    def __str__(self) -> str:
        state = "flying" if self.is_free_falling else "grounded"
        return f"{self.name} [{self.entity_type.value}, {state}]"
