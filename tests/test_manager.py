"""
Tests for the entity manager tick loop.

Spawning, lifecycle transitions, deferred removal, collision reporting
and supercell tornado spawning.
"""

import numpy as np
import pytest

from StormSim.errors import InvalidConfigError, InvalidInputError
from StormSim.manager import EntityManager
from StormSim.trajectory import HurricaneTrajectory
from StormSim.types import EntityConfig, EntityKind, LifecycleStatus, WorldObject


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def manager():
    return EntityManager(seed=7)


@pytest.fixture
def static_manager():
    """Manager with no trajectory policies, so entities never move."""
    return EntityManager(trajectories={kind: None for kind in EntityKind})


@pytest.fixture
def mixed_manager(manager):
    manager.spawn({"kind": "tornado", "x": 0, "y": 0})
    manager.spawn({"kind": "hurricane", "x": 500, "y": 500})
    manager.spawn({"kind": "supercell", "x": -200, "y": 100})
    return manager


# ============================================================================
# Spawning
# ============================================================================

class TestSpawn:

    def test_spawn_returns_id_and_activates(self, manager):
        entity_id = manager.spawn({"kind": "tornado", "x": 1, "y": 2})
        entity = manager.get(entity_id)
        assert entity is not None
        assert entity.status == LifecycleStatus.ACTIVE
        assert entity_id in manager
        assert len(manager) == 1

    def test_sequential_ids(self, manager):
        first = manager.spawn({"kind": "tornado", "x": 0, "y": 0})
        second = manager.spawn(EntityConfig(kind=EntityKind.HURRICANE, x=0, y=0))
        assert first == "tornado-1"
        assert second == "hurricane-2"

    def test_explicit_id(self, manager):
        assert manager.spawn({"x": 0, "y": 0, "entity_id": "twister"}) == "twister"

    def test_auto_id_skips_explicit_id(self, manager):
        manager.spawn({"x": 0, "y": 0, "entity_id": "tornado-2"})
        first = manager.spawn({"x": 1, "y": 1})
        second = manager.spawn({"x": 2, "y": 2})
        assert len(manager) == 3
        assert first == "tornado-1"
        assert second == "tornado-3"
        assert manager.get("tornado-2").position == (0.0, 0.0)

    def test_mismatched_trajectory_rejected(self, manager):
        with pytest.raises(InvalidConfigError):
            manager.spawn({"kind": "tornado", "x": 0, "y": 0}, trajectory=HurricaneTrajectory())
        assert len(manager) == 0

    def test_duplicate_id_rejected(self, manager):
        manager.spawn({"x": 0, "y": 0, "entity_id": "twister"})
        with pytest.raises(InvalidConfigError):
            manager.spawn({"x": 5, "y": 5, "entity_id": "twister"})
        assert len(manager) == 1

    @pytest.mark.parametrize("duration", [0, -10])
    def test_invalid_duration_leaves_collection_unchanged(self, manager, duration):
        manager.spawn({"x": 0, "y": 0})
        before = manager.active_entities()
        with pytest.raises(InvalidConfigError):
            manager.spawn({"kind": "tornado", "x": 0, "y": 0, "duration": duration})
        assert manager.active_entities() == before

    def test_missing_position_rejected(self, manager):
        with pytest.raises(InvalidConfigError):
            manager.spawn({"kind": "tornado", "x": 0})
        assert len(manager) == 0

    def test_non_config_rejected(self, manager):
        with pytest.raises(InvalidConfigError):
            manager.spawn(("tornado", 0, 0))

    def test_default_trajectory_attached(self, manager):
        entity = manager.get(manager.spawn({"kind": "hurricane", "x": 0, "y": 0}))
        assert isinstance(entity.trajectory, HurricaneTrajectory)

    def test_trajectory_override(self, manager):
        model = HurricaneTrajectory()
        entity = manager.get(manager.spawn({"kind": "hurricane", "x": 0, "y": 0}, trajectory=model))
        assert entity.trajectory is model

    def test_no_trajectory_when_disabled(self, static_manager):
        entity = static_manager.get(static_manager.spawn({"x": 0, "y": 0}))
        assert entity.trajectory is None

    def test_spawn_random_within_world(self, manager):
        entity = manager.get(manager.spawn_random({"width": 100, "height": 50}))
        assert 0 <= entity.x < 100
        assert 0 <= entity.y < 50
        assert 50 <= entity.radius < 150


# ============================================================================
# Tick loop
# ============================================================================

class TestTick:

    def test_tornado_expires_after_three_ticks(self, manager):
        entity_id = manager.spawn({"kind": "tornado", "x": 0, "y": 0, "radius": 50, "duration": 30})
        entity = manager.get(entity_id)

        manager.tick(10)
        manager.tick(10)
        assert entity_id in manager
        report = manager.tick(10)

        assert entity.elapsed_time == 30
        assert entity.active is False
        assert entity.status == LifecycleStatus.EXPIRED
        assert entity not in manager.active_entities()
        assert report.expired == [entity_id]
        assert manager.get(entity_id) is None

    def test_zero_tick_changes_nothing(self, mixed_manager):
        before = [entity.to_dict() for entity in mixed_manager.active_entities()]
        report = mixed_manager.tick(0, [WorldObject(0, 0)], {"steering_u": 10.0, "landfall": True})
        after = [entity.to_dict() for entity in mixed_manager.active_entities()]
        assert after == before
        assert report.expired == []
        assert report.spawned == []

    def test_clock_advances(self, manager):
        manager.tick(2.5)
        report = manager.tick(1.5)
        assert report.time == pytest.approx(4.0)
        assert manager.elapsed == pytest.approx(4.0)

    def test_negative_delta_rejected_without_mutation(self, mixed_manager):
        before = [entity.to_dict() for entity in mixed_manager.active_entities()]
        with pytest.raises(InvalidInputError):
            mixed_manager.tick(-1)
        assert [entity.to_dict() for entity in mixed_manager.active_entities()] == before
        assert mixed_manager.elapsed == 0.0

    def test_malformed_environment_rejected_without_mutation(self, mixed_manager):
        before = [entity.to_dict() for entity in mixed_manager.active_entities()]
        with pytest.raises(InvalidInputError):
            mixed_manager.tick(1, environment={"temperature": "hot"})
        with pytest.raises(InvalidInputError):
            mixed_manager.tick(1, environment=42)
        assert [entity.to_dict() for entity in mixed_manager.active_entities()] == before

    def test_bad_world_object_rejected_without_mutation(self, mixed_manager):
        with pytest.raises(InvalidInputError):
            mixed_manager.tick(1, world_objects=[{"name": "nowhere"}])
        assert all(entity.elapsed_time == 0.0 for entity in mixed_manager.active_entities())

    def test_reassigned_mismatched_policy_rejected_without_mutation(self, static_manager):
        static_manager.spawn({"kind": "hurricane", "x": 0, "y": 0})
        tornado = static_manager.get(static_manager.spawn({"kind": "tornado", "x": 5, "y": 5}))
        tornado.trajectory = HurricaneTrajectory()
        before = [entity.to_dict() for entity in static_manager.active_entities()]
        with pytest.raises(InvalidInputError):
            static_manager.tick(5)
        assert static_manager.elapsed == 0.0
        assert [entity.to_dict() for entity in static_manager.active_entities()] == before

    def test_numpy_scalars_accepted(self, static_manager):
        entity_id = static_manager.spawn({"x": 0, "y": 0, "radius": 10})
        obj = WorldObject(np.int64(3), np.float32(4.0))
        report = static_manager.tick(np.int64(2), [obj])
        assert report.affected == {entity_id: [obj]}
        assert static_manager.elapsed == pytest.approx(2.0)

    def test_manager_keeps_working_after_rejected_call(self, manager):
        entity_id = manager.spawn({"x": 0, "y": 0, "duration": 5})
        with pytest.raises(InvalidInputError):
            manager.tick(-3)
        manager.tick(5)
        assert entity_id not in manager

    def test_reports_affected_objects(self, static_manager):
        entity_id = static_manager.spawn({"kind": "tornado", "x": 0, "y": 0, "radius": 10})
        near = WorldObject(5, 0)
        far = WorldObject(20, 0)
        report = static_manager.tick(1, [near, far])
        assert report.affected == {entity_id: [near]}

    def test_expiring_entity_still_gets_collision_check(self, static_manager):
        entity_id = static_manager.spawn({"x": 0, "y": 0, "radius": 10, "duration": 1})
        obj = WorldObject(5, 0)
        report = static_manager.tick(1, [obj])
        assert report.affected == {entity_id: [obj]}
        assert report.expired == [entity_id]

    def test_entities_without_hits_not_reported(self, static_manager):
        static_manager.spawn({"x": 0, "y": 0, "radius": 1})
        report = static_manager.tick(1, [WorldObject(100, 100)])
        assert report.affected == {}

    def test_active_entities_is_insertion_ordered_snapshot(self, mixed_manager):
        snapshot = mixed_manager.active_entities()
        assert isinstance(snapshot, tuple)
        assert [e.kind for e in snapshot] == [EntityKind.TORNADO, EntityKind.HURRICANE, EntityKind.SUPERCELL]
        mixed_manager.spawn({"x": 0, "y": 0})
        assert len(snapshot) == 3

    def test_removal_keeps_order_of_survivors(self, static_manager):
        a = static_manager.spawn({"x": 0, "y": 0, "duration": 10})
        b = static_manager.spawn({"x": 0, "y": 0, "duration": 2})
        c = static_manager.spawn({"x": 0, "y": 0, "duration": 10})
        report = static_manager.tick(3)
        assert report.expired == [b]
        assert [e.entity_id for e in static_manager.active_entities()] == [a, c]

    def test_hurricane_moves_with_environment(self, manager):
        entity = manager.get(manager.spawn({"kind": "hurricane", "x": 0, "y": 0}))
        manager.tick(10, environment={"steering_u": 1.0, "steering_v": 0.5})
        assert entity.position == pytest.approx((10.0, 5.0))
        assert len(entity.path) == 4

    def test_clear_expires_everything(self, mixed_manager):
        entities = mixed_manager.active_entities()
        mixed_manager.clear()
        assert len(mixed_manager) == 0
        assert all(e.status == LifecycleStatus.EXPIRED for e in entities)

    def test_same_seed_same_run(self):
        def run():
            mgr = EntityManager(seed=99)
            mgr.spawn_random({"width": 1000, "height": 1000})
            mgr.spawn_random({"width": 1000, "height": 1000}, kind="tornado")
            for _ in range(5):
                mgr.tick(1.0, environment={"steering_u": 2.0})
            return [e.to_dict() for e in mgr.active_entities()]

        assert run() == run()


# ============================================================================
# Supercell tornado spawning
# ============================================================================

class TestTornadoSpawning:

    def _tick_until_spawn(self, manager, limit=50):
        for _ in range(limit):
            report = manager.tick(1.0)
            if report.spawned:
                return report
        pytest.fail("supercell never spawned a tornado")

    def test_supercell_spawns_tornado(self, manager):
        supercell_id = manager.spawn({"kind": "supercell", "x": 10, "y": 20})
        report = self._tick_until_spawn(manager)

        assert report.spawned == [f"{supercell_id}-tornado-1"]
        tornado = manager.get(report.spawned[0])
        supercell = manager.get(supercell_id)
        assert tornado.kind == EntityKind.TORNADO
        assert tornado.position == supercell.position
        assert tornado.status == LifecycleStatus.ACTIVE

    def test_spawned_tornado_not_advanced_in_creating_tick(self, manager):
        manager.spawn({"kind": "supercell", "x": 0, "y": 0})
        report = self._tick_until_spawn(manager)
        tornado = manager.get(report.spawned[0])
        assert tornado.elapsed_time == 0.0
        manager.tick(1.0)
        assert tornado.elapsed_time == 1.0

    def test_spawned_tornado_appended_after_existing(self, manager):
        manager.spawn({"kind": "supercell", "x": 0, "y": 0})
        report = self._tick_until_spawn(manager)
        assert manager.active_entities()[-1].entity_id == report.spawned[0]

    def test_cooldown_limits_spawn_rate(self, manager):
        manager.spawn({"kind": "supercell", "x": 0, "y": 0, "duration": 100})
        spawned = []
        for _ in range(60):
            spawned.extend(manager.tick(1.0).spawned)
        # One at tornadogenesis, then at most one per 30 s cooldown
        assert 1 <= len(spawned) <= 3
