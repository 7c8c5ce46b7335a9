#!/usr/bin/env python3
"""
Test Suite for the World Registry and Simulation Tick

Tests cover:
1. Registration, name conflicts, lookups and iteration order
2. Bodies and lookups by name
3. tick(): zero and negative steps, Earth rotation, grounded entities
4. Determinism of identical runs
5. Failure isolation between entities
6. Event log and callbacks
"""

import math
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import newtons_cannon.world as world_module
from newtons_cannon.bodies import create_earth
from newtons_cannon.config import SimulationConfig
from newtons_cannon.constants import EARTH_ANGULAR_VELOCITY, EARTH_RADIUS, scale_from_km
from newtons_cannon.entity import Entity, EntityType
from newtons_cannon.frames import Transform
from newtons_cannon.physics import Quaternion, Vector3D
from newtons_cannon.scenarios import create_default_world
from newtons_cannon.world import (
    EntityNameConflictError,
    EntityNotFoundError,
    InvalidEntityError,
    SimulationEventType,
    World,
)


# =============================================================================
# FIXTURES
# =============================================================================

def make_entity(name, entity_type=EntityType.SATELLITE, position=None, velocity=None,
                is_free_falling=True):
    return Entity(
        entity_type=entity_type,
        name=name,
        body=Transform(name, position=position or Vector3D(EARTH_RADIUS + 55, 0, 0)),
        velocity=velocity or Vector3D(0, 0, -0.76),
        is_free_falling=is_free_falling,
    )


@pytest.fixture
def still_config():
    """No Earth rotation, no drag: plain gravity."""
    return SimulationConfig(drag_enabled=False, earth_rotation_enabled=False)


@pytest.fixture
def world():
    w = World()
    w.add_body(create_earth())
    return w


def state_of(world):
    return [
        (e.name, e.world_position().to_tuple(), e.velocity.to_tuple(),
         e.body.quaternion.to_tuple(), e.is_free_falling)
        for e in world
    ]


# =============================================================================
# REGISTRY TESTS
# =============================================================================

class TestRegistry:
    """Tests for entity registration and lookup."""

    def test_register_returns_entity(self, world):
        sat = make_entity("Sat-1")
        assert world.register_entity(sat) is sat
        assert world.get_entity_by_name("Sat-1") is sat
        assert world.has_entity("Sat-1")
        assert len(world) == 1

    def test_name_conflict_leaves_registry_unchanged(self, world):
        first = world.register_entity(make_entity("Sat-1"))
        with pytest.raises(EntityNameConflictError) as exc_info:
            world.register_entity(make_entity("Sat-1"))
        assert exc_info.value.name == "Sat-1"
        assert isinstance(exc_info.value, ValueError)
        assert len(world) == 1
        assert world.get_entity_by_name("Sat-1") is first

    @pytest.mark.parametrize("not_an_entity", ["Sat-1", None, 42, Transform("t")])
    def test_invalid_entity(self, world, not_an_entity):
        with pytest.raises(InvalidEntityError):
            world.register_entity(not_an_entity)
        assert len(world) == 0

    def test_invalid_entity_is_a_type_error(self, world):
        with pytest.raises(TypeError):
            world.register_entity({"name": "fake"})

    def test_unknown_name(self, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            world.get_entity_by_name("Ghost")
        assert isinstance(exc_info.value, KeyError)
        assert str(exc_info.value) == "No entity named 'Ghost'"
        assert world.find_entity("Ghost") is None

    def test_iteration_in_insertion_order(self, world):
        names = ["Zulu", "Alpha", "Mike", "Bravo"]
        for name in names:
            world.register_entity(make_entity(name))
        assert [e.name for e in world] == names
        assert [e.name for e in world.get_physical_entities()] == names

    def test_entities_by_type(self, world):
        world.register_entity(make_entity("Sat-1"))
        world.register_entity(make_entity("Rock", EntityType.ASTEROID))
        world.register_entity(make_entity("Sat-2"))
        sats = world.get_entities_by_type(EntityType.SATELLITE)
        assert [e.name for e in sats] == ["Sat-1", "Sat-2"]
        assert world.get_entities_by_type(EntityType.SPACESHIP) == []


class TestBodies:
    """Tests for massive body management."""

    def test_get_body(self, world):
        assert world.get_body("Earth").name == "Earth"

    def test_unknown_body(self, world):
        with pytest.raises(EntityNotFoundError):
            world.get_body("Mars")

    def test_duplicate_body(self, world):
        with pytest.raises(ValueError):
            world.add_body(create_earth())


# =============================================================================
# TICK TESTS
# =============================================================================

class TestTick:
    """Tests for one simulation step."""

    def test_zero_step_changes_nothing(self):
        world = create_default_world()
        world.tick(1.0)
        before = state_of(world)
        earth_q = world.get_body("Earth").frame.quaternion.to_tuple()
        time = world.current_time

        world.tick(0.0)

        assert state_of(world) == before
        assert world.get_body("Earth").frame.quaternion.to_tuple() == earth_q
        assert world.current_time == time

    def test_negative_step_raises(self, world):
        with pytest.raises(ValueError):
            world.tick(-0.1)

    @pytest.mark.parametrize("dt", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_step_raises(self, dt):
        world = create_default_world()
        world.tick(1.0)
        before = state_of(world)
        earth_q = world.get_body("Earth").frame.quaternion.to_tuple()

        with pytest.raises(ValueError):
            world.tick(dt)

        assert state_of(world) == before
        assert world.get_body("Earth").frame.quaternion.to_tuple() == earth_q
        assert world.events_of_type(SimulationEventType.IMPACT) == []
        assert world.current_time == pytest.approx(1.0)

    def test_time_advances(self, world):
        world.tick(0.5)
        world.tick(1.5)
        assert world.current_time == pytest.approx(2.0)

    def test_earth_rotation(self, world):
        world.tick(100.0)
        q = world.get_body("Earth").frame.quaternion
        expected = Quaternion.from_axis_angle(Vector3D.unit_y(), EARTH_ANGULAR_VELOCITY * 100.0)
        assert q.angle_to(expected) < 1e-6

    def test_earth_rotation_disabled(self, still_config):
        world = World(still_config)
        world.add_body(create_earth())
        world.tick(100.0)
        assert world.get_body("Earth").frame.quaternion.to_tuple() == (0.0, 0.0, 0.0, 1.0)

    def test_grounded_entity_is_not_integrated(self, world, still_config):
        world.config = still_config
        parked = world.register_entity(make_entity("Parked", is_free_falling=False))
        position = parked.world_position()
        world.tick(10.0)
        assert parked.world_position() == position
        assert parked.accelerations.total.is_zero()

    def test_free_fall_accelerates_downward(self, world, still_config):
        world.config = still_config
        ball = world.register_entity(make_entity(
            "Ball", EntityType.CANNONBALL, position=Vector3D(0, EARTH_RADIUS + 5, 0),
            velocity=Vector3D.zero(),
        ))
        world.tick(1.0)
        assert ball.velocity.y < 0
        assert ball.accelerations.gravity.normalized() == Vector3D(0, -1, 0)

    def test_drop_impacts_and_rides_earth(self, world):
        """A dropped ball lands, is reparented and then turns with the Earth."""
        world.config.drag_enabled = False
        ball = world.register_entity(make_entity(
            "Ball", EntityType.CANNONBALL, position=Vector3D(EARTH_RADIUS + scale_from_km(10), 0, 0),
            velocity=Vector3D.zero(),
        ))
        for _ in range(60):
            world.tick(1.0)

        assert ball.has_impacted
        assert not ball.is_free_falling
        assert ball.body.parent is world.get_body("Earth").frame

        impacts = world.events_of_type(SimulationEventType.IMPACT)
        assert len(impacts) == 1
        assert impacts[0].entity_name == "Ball"
        assert impacts[0].data["body"] == "Earth"

        distance = ball.world_position().magnitude
        assert distance == pytest.approx(EARTH_RADIUS + world.config.collision_threshold)

        local = ball.body.position.copy()
        world.tick(3600.0)
        assert ball.body.position == local
        assert ball.world_position().magnitude == pytest.approx(distance)

    def test_fire_from_surface_detaches(self, world):
        earth = world.get_body("Earth")
        earth.frame.rotate_local_y(0.7)
        ball = make_entity("Ball", EntityType.CANNONBALL, is_free_falling=False,
                           position=Vector3D(EARTH_RADIUS + 1, 0, 0))
        earth.frame.attach(ball.body)
        world.register_entity(ball)
        start = ball.world_position()

        world.fire(ball, Vector3D(0, 0.2, 0))

        assert ball.body.parent is None
        assert ball.world_position() == start
        assert ball.is_free_falling
        assert world.events_of_type(SimulationEventType.ENTITY_FIRED)[0].entity_name == "Ball"

    def test_fire_unregistered_raises(self, world):
        ghost = make_entity("Ghost", EntityType.CANNONBALL, is_free_falling=False)
        with pytest.raises(EntityNotFoundError):
            world.fire(ghost, Vector3D(0, 0.2, 0))

        assert not ghost.is_free_falling
        assert not world.has_entity("Ghost")
        assert world.events_of_type(SimulationEventType.ENTITY_FIRED) == []

    def test_fire_requires_the_registered_instance(self, world):
        world.register_entity(make_entity("Ball", EntityType.CANNONBALL, is_free_falling=False))
        impostor = make_entity("Ball", EntityType.CANNONBALL, is_free_falling=False)
        with pytest.raises(EntityNotFoundError):
            world.fire(impostor, Vector3D(0, 0.2, 0))
        assert not impostor.is_free_falling

    def test_reset_all(self, world):
        sat = world.register_entity(make_entity("Sat-1"))
        start = sat.world_position()
        for _ in range(10):
            world.tick(10.0)
        assert sat.world_position() != start
        world.reset_all_physical_entities()
        assert sat.world_position() == start
        assert sat.is_free_falling


class TestDeterminism:
    """Identical inputs give identical trajectories."""

    def test_identical_runs(self):
        worlds = [create_default_world(), create_default_world()]
        for w in worlds:
            for _ in range(200):
                w.tick(5.0)
        assert state_of(worlds[0]) == state_of(worlds[1])


class TestFailureIsolation:
    """An error in one entity does not stop the others."""

    def test_failing_entity_is_reported(self, world, monkeypatch):
        original = world_module.compute_accelerations

        def failing(entity, body, config):
            if entity.name == "Broken":
                raise RuntimeError("boom")
            return original(entity, body, config)

        monkeypatch.setattr(world_module, "compute_accelerations", failing)

        broken = world.register_entity(make_entity("Broken"))
        healthy = world.register_entity(make_entity("Healthy"))
        broken_start = broken.world_position()
        healthy_start = healthy.world_position()

        world.tick(1.0)

        assert broken.world_position() == broken_start
        assert healthy.world_position() != healthy_start
        failures = world.events_of_type(SimulationEventType.ENTITY_UPDATE_FAILED)
        assert [e.entity_name for e in failures] == ["Broken"]
        assert failures[0].data["error"] == "boom"
        assert world.current_time == pytest.approx(1.0)


# =============================================================================
# EVENT TESTS
# =============================================================================

class TestEvents:
    """Tests for the event log and callbacks."""

    def test_registration_event(self, world):
        world.register_entity(make_entity("Sat-1"))
        events = world.events_of_type(SimulationEventType.ENTITY_REGISTERED)
        assert events[0].entity_name == "Sat-1"
        assert events[0].data["type"] == "satellite"
        assert "ENTITY_REGISTERED" in str(events[0])

    def test_callbacks_receive_events(self, world):
        received = []
        world.add_event_callback(received.append)
        world.register_entity(make_entity("Sat-1"))
        assert [e.event_type for e in received] == [SimulationEventType.ENTITY_REGISTERED]

    def test_failing_callback_does_not_propagate(self, world):
        def bad_callback(event):
            raise RuntimeError("listener failure")

        received = []
        world.add_event_callback(bad_callback)
        world.add_event_callback(received.append)
        world.register_entity(make_entity("Sat-1"))
        assert len(received) == 1
        assert world.has_entity("Sat-1")
