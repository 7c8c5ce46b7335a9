#!/usr/bin/env python3
"""
World registry and simulation tick.

The World owns the authoritative set of simulated entities and the massive
bodies they fall toward. One call to tick(dt) advances every entity in
flight by one step:

1. Spinning bodies rotate their frames (Earth rotation)
2. For each entity in flight, in registration order:
   forces -> semi-implicit Euler -> collision -> orientation

A failure while updating one entity is logged and recorded as an event; the
other entities are still updated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Iterator, List, Optional

from .bodies import CelestialBody
from .collision import check_collision_and_handle, is_own_body
from .config import SimulationConfig
from .constants import scale_to_km
from .entity import Entity, EntityType
from .forces import compute_accelerations
from .orientation import update_entity_orientation
from .physics import Vector3D, integrate_semi_implicit_euler

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS
# =============================================================================

class EntityNameConflictError(ValueError):
    """An entity with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(f"Entity name conflict: {name} already exists")
        self.name = name


class InvalidEntityError(TypeError):
    """Something that is not an Entity was given to the registry."""


class EntityNotFoundError(KeyError):
    """No entity (or body) with the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No entity named '{self.name}'"


# =============================================================================
# EVENTS
# =============================================================================

class SimulationEventType(Enum):
    """What happened to an entity."""
    ENTITY_REGISTERED = auto()
    ENTITY_FIRED = auto()
    IMPACT = auto()
    ENTITY_UPDATE_FAILED = auto()


@dataclass
class SimulationEvent:
    """
    One entry of the world event log.

    Attributes:
        event_type: Kind of event
        timestamp: World time of the tick that produced it (seconds)
        entity_name: Entity concerned, if any
        data: Event payload (impacted body, contact point, error message...)
    """
    event_type: SimulationEventType
    timestamp: float
    entity_name: Optional[str] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        entity_str = f"[{self.entity_name}] " if self.entity_name else ""
        return f"T+{self.timestamp:.1f}s {entity_str}{self.event_type.name}"


# =============================================================================
# WORLD
# =============================================================================

class World:
    """
    Registry of simulated entities and massive bodies.

    Entities are kept in insertion order so that identical inputs always
    produce identical trajectories.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.entities_by_name: Dict[str, Entity] = {}
        self.bodies: List[CelestialBody] = []
        self.current_time: float = 0.0
        self.events: List[SimulationEvent] = []
        self._event_callbacks: List[Callable[[SimulationEvent], None]] = []

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def register_entity(self, entity: Entity) -> Entity:
        """
        Add an entity to the world.

        Raises:
            InvalidEntityError: if entity is not an Entity
            EntityNameConflictError: if the name is already taken
        """
        if not isinstance(entity, Entity):
            raise InvalidEntityError(
                f"Unable to add entity, expected Entity, got {type(entity).__name__}"
            )
        if entity.name in self.entities_by_name:
            raise EntityNameConflictError(entity.name)

        self.entities_by_name[entity.name] = entity
        logger.info("Registered %s", entity)
        self._log_event(SimulationEventType.ENTITY_REGISTERED, entity.name,
                        {"type": entity.entity_type.value})
        return entity

    def get_entity_by_name(self, name: str) -> Entity:
        """
        Raises:
            EntityNotFoundError: if no entity has this name
        """
        try:
            return self.entities_by_name[name]
        except KeyError:
            raise EntityNotFoundError(name) from None

    def find_entity(self, name: str) -> Optional[Entity]:
        return self.entities_by_name.get(name)

    def has_entity(self, name: str) -> bool:
        return name in self.entities_by_name

    def get_entities_by_type(self, entity_type: EntityType) -> List[Entity]:
        return [e for e in self.entities_by_name.values() if e.entity_type is entity_type]

    def get_physical_entities(self) -> List[Entity]:
        """All simulated entities, in registration order."""
        return list(self.entities_by_name.values())

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.get_physical_entities())

    def __len__(self) -> int:
        return len(self.entities_by_name)

    def reset_all_physical_entities(self) -> None:
        for entity in self.entities_by_name.values():
            entity.reset()

    # -------------------------------------------------------------------------
    # Bodies
    # -------------------------------------------------------------------------

    def add_body(self, body: CelestialBody) -> CelestialBody:
        if any(b.name == body.name for b in self.bodies):
            raise ValueError(f"Body name conflict: {body.name} already exists")
        self.bodies.append(body)
        return body

    def get_body(self, name: str) -> CelestialBody:
        for body in self.bodies:
            if body.name == name:
                return body
        raise EntityNotFoundError(name)

    def dominant_body(self, entity: Entity) -> Optional[CelestialBody]:
        """
        The body whose gravity applies to the entity: the one with the
        strongest pull at its position, never the entity's own body.
        """
        position = entity.world_position()
        best: Optional[CelestialBody] = None
        best_pull = -1.0
        for body in self.bodies:
            if is_own_body(entity, body):
                continue
            r_squared = (body.center() - position).magnitude_squared
            if r_squared == 0:
                continue
            pull = body.surface_gravity * body.radius * body.radius / r_squared
            if pull > best_pull:
                best, best_pull = body, pull
        return best

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def fire(self, entity: Entity, initial_velocity: Vector3D) -> None:
        """
        Launch a registered entity with the given world velocity (scaled units/s).

        Raises:
            EntityNotFoundError: if the entity is not the one registered under its name
        """
        if self.entities_by_name.get(entity.name) is not entity:
            raise EntityNotFoundError(entity.name)
        entity.fire(initial_velocity)
        logger.info("%s fired at %.3f km/s", entity.name, scale_to_km(initial_velocity.magnitude))
        self._log_event(SimulationEventType.ENTITY_FIRED, entity.name,
                        {"velocity": initial_velocity.to_tuple()})

    def tick(self, delta_time: float) -> None:
        """
        Advance all entities in flight by delta_time seconds.

        A zero step leaves every entity untouched.

        Raises:
            ValueError: if delta_time is negative, NaN or infinite
        """
        if not math.isfinite(delta_time) or delta_time < 0:
            raise ValueError(f"Time step must be finite and non-negative, got {delta_time}")
        if delta_time == 0:
            return

        if self.config.earth_rotation_enabled:
            for body in self.bodies:
                body.spin(delta_time)

        for entity in list(self.entities_by_name.values()):
            if not entity.is_free_falling:
                continue
            try:
                self._update_entity(entity, delta_time)
            except Exception as e:
                logger.exception("Failed to update %s", entity.name)
                self._log_event(SimulationEventType.ENTITY_UPDATE_FAILED, entity.name,
                                {"error": str(e)})

        self.current_time += delta_time

    def _update_entity(self, entity: Entity, dt: float) -> None:
        """Update a single entity in flight for one time step."""
        # Flight is integrated in world coordinates
        if entity.body.parent is not None:
            entity.body.detach()

        entity.accelerations = compute_accelerations(
            entity, self.dominant_body(entity), self.config
        )

        position, velocity = integrate_semi_implicit_euler(
            entity.body.position, entity.velocity, entity.accelerations.total, dt
        )
        entity.body.position = position
        entity.velocity = velocity

        result = check_collision_and_handle(entity, self.bodies, self.config.collision_threshold)
        if result.collided:
            self._log_event(SimulationEventType.IMPACT, entity.name, {
                "body": result.body.name,
                "contact_point": result.contact_point.to_tuple(),
            })

        update_entity_orientation(entity, dt, self.config.auto_align_to_velocity)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """Register a listener (e.g. the renderer changing an impacted body's color)."""
        self._event_callbacks.append(callback)

    def events_of_type(self, event_type: SimulationEventType) -> List[SimulationEvent]:
        return [e for e in self.events if e.event_type is event_type]

    def _log_event(
        self,
        event_type: SimulationEventType,
        entity_name: Optional[str] = None,
        data: Optional[dict] = None
    ) -> SimulationEvent:
        """Append an event to the log and hand it to every listener."""
        event = SimulationEvent(
            event_type=event_type,
            timestamp=self.current_time,
            entity_name=entity_name,
            data=data or {}
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback error for %s", event)

        return event
