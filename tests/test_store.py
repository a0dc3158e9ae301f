"""
Tests for the in-memory stores.
"""

import threading
from datetime import datetime, timedelta

import pytest

from src.learning.store import ArmStore, DecisionLog, InterventionCatalog, UserProfileStore
from src.models.bandit import BanditArm
from src.models.context import ContextualFeatures
from src.models.decision import DecisionPoint, PendingOutcome
from src.models.enums import InterventionCategory
from src.models.profile import UserInterventionProfile


NOW = datetime(2026, 3, 2, 12, 0, 0)


def _decision_point(
    user_id: str = "user-1",
    category: InterventionCategory = InterventionCategory.MINDFULNESS,
    timestamp: datetime = NOW,
    delivered: bool = True,
) -> DecisionPoint:
    return DecisionPoint(
        user_id=user_id,
        timestamp=timestamp,
        context=ContextualFeatures(),
        intervention_delivered=delivered,
        selected_intervention="breathing_exercise",
        selected_category=category,
    )


# ==============================================================================
# Keyed Stores
# ==============================================================================

class TestArmStore:
    """Tests for ArmStore."""

    def test_get_or_create_creates_once(self):
        store = ArmStore()
        created = []

        def factory(key):
            created.append(key)
            return BanditArm(intervention_id=key)

        first = store.get_or_create("a", factory)
        second = store.get_or_create("a", factory)

        assert first is second
        assert created == ["a"]
        assert "a" in store
        assert len(store) == 1

    def test_totals(self):
        store = ArmStore()
        store.upsert(BanditArm(intervention_id="a", pull_count=3, total_reward=2.4))
        store.upsert(BanditArm(intervention_id="b", pull_count=1, total_reward=0.2))

        assert store.total_pulls() == 4
        assert store.average_reward() == pytest.approx(0.65)

    def test_average_reward_without_pulls(self):
        assert ArmStore().average_reward() == 0.5

    def test_replace_all(self):
        store = ArmStore()
        store.upsert(BanditArm(intervention_id="old"))
        store.replace_all({"new": BanditArm(intervention_id="new")})

        assert store.get("old") is None
        assert store.get("new") is not None

    def test_locked_serializes_updates(self):
        """Test that concurrent updates under the per-key lock are not lost."""
        store = ArmStore()
        store.upsert(BanditArm(intervention_id="a"))

        def pull():
            for _ in range(200):
                with store.locked("a"):
                    arm = store.get("a")
                    arm.pull_count += 1

        threads = [threading.Thread(target=pull) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.get("a").pull_count == 800

    def test_totals_while_arms_are_created(self):
        """Test that aggregates can be read while other threads add arms."""
        store = ArmStore()
        errors = []

        def create(prefix):
            try:
                for i in range(3000):
                    store.get_or_create(f"{prefix}-{i}", lambda key: BanditArm(intervention_id=key))
            except Exception as e:
                errors.append(e)

        def read():
            try:
                for _ in range(3000):
                    store.total_pulls()
                    store.average_reward()
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=create, args=(p,)) for p in ("x", "y")]
        threads += [threading.Thread(target=read) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(store) == 6000

    def test_one_lock_per_key(self):
        store = ArmStore()
        for key in ("a", "b", "a"):
            store.get_or_create(key, lambda k: BanditArm(intervention_id=k))
            with store.locked(key):
                pass

        assert len(store._locks) == 2


class TestUserProfileStore:
    """Tests for UserProfileStore."""

    def test_keyed_by_user_id(self):
        store = UserProfileStore()
        store.upsert(UserInterventionProfile(user_id="user-1"))

        assert store.get("user-1").user_id == "user-1"
        assert [p.user_id for p in store.all()] == ["user-1"]


# ==============================================================================
# Decision Log
# ==============================================================================

class TestDecisionLog:
    """Tests for the bounded decision-point log."""

    def test_eviction_drops_index_and_pending(self):
        log = DecisionLog(capacity=2)
        first = _decision_point()
        log.append(first)
        log.mark_pending(PendingOutcome(decision_point_id=first.id, expected_outcome_time=NOW))

        log.append(_decision_point())
        log.append(_decision_point())

        assert len(log) == 2
        assert log.get(first.id) is None
        assert log.pending() == []

    def test_recent_is_oldest_first(self):
        log = DecisionLog()
        points = [_decision_point() for _ in range(3)]
        for point in points:
            log.append(point)

        assert [p.id for p in log.recent()] == [p.id for p in points]
        assert [p.id for p in log.recent(2)] == [p.id for p in points[1:]]
        assert log.recent(0) == []

    def test_count_delivered_since(self):
        log = DecisionLog()
        log.append(_decision_point())
        log.append(_decision_point(category=InterventionCategory.GRATITUDE))
        log.append(_decision_point(delivered=False))
        log.append(_decision_point(user_id="user-2"))
        log.append(_decision_point(timestamp=NOW - timedelta(days=1)))

        since = NOW.replace(hour=0)
        assert log.count_delivered_since("user-1", since) == 2
        assert log.count_delivered_since("user-1", since, InterventionCategory.GRATITUDE) == 1

    def test_pending_markers(self):
        log = DecisionLog()
        point = _decision_point()
        log.append(point)
        log.mark_pending(PendingOutcome(decision_point_id=point.id, expected_outcome_time=NOW))

        assert [m.decision_point_id for m in log.pending()] == [point.id]
        assert log.resolve_pending(point.id)
        assert not log.resolve_pending(point.id)

    def test_pending_for_unknown_point_ignored(self):
        log = DecisionLog()
        log.mark_pending(PendingOutcome(decision_point_id="dp_missing", expected_outcome_time=NOW))

        assert log.pending() == []

    def test_replace_all_respects_capacity(self):
        log = DecisionLog(capacity=10)
        points = [_decision_point() for _ in range(5)]
        pending = [
            PendingOutcome(decision_point_id=p.id, expected_outcome_time=NOW) for p in points
        ]

        log.replace_all(points, pending, capacity=3)

        assert log.capacity == 3
        assert [p.id for p in log.recent()] == [p.id for p in points[2:]]
        assert {m.decision_point_id for m in log.pending()} == {p.id for p in points[2:]}


# ==============================================================================
# Catalog
# ==============================================================================

class TestInterventionCatalog:
    """Tests for InterventionCatalog."""

    def test_first_crisis_intervention_is_designated(self, make_intervention):
        catalog = InterventionCatalog()
        first = make_intervention("crisis_a", InterventionCategory.CRISIS_INTERVENTION)
        second = make_intervention("crisis_b", InterventionCategory.CRISIS_INTERVENTION)

        catalog.register(make_intervention("breathing_exercise"))
        catalog.register(first)
        catalog.register(second)

        assert catalog.crisis_intervention.id == "crisis_a"
        assert len(catalog) == 3

    def test_reregistering_crisis_intervention_refreshes_it(self, make_intervention):
        catalog = InterventionCatalog()
        crisis = make_intervention("crisis_a", InterventionCategory.CRISIS_INTERVENTION)
        catalog.register(crisis)
        catalog.register(crisis.patched({"is_active": False}))

        assert not catalog.crisis_intervention.is_active
