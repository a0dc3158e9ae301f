"""
In-memory state stores for the optimizer.

Provides keyed stores for arms and user profiles (with per-key locks so
updates to one arm or one user are serialized), a bounded decision-point
log, and the intervention catalog.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Generic, Iterator, Optional, TypeVar

from src.models.bandit import BanditArm
from src.models.decision import DecisionPoint, PendingOutcome
from src.models.enums import InterventionCategory
from src.models.intervention import Intervention
from src.models.profile import UserInterventionProfile


logger = logging.getLogger(__name__)


T = TypeVar("T")


class KeyedLocks:
    """
    One lock per key, created on first use.

    Locks are kept for the life of the store. Callers lock the keys they
    store, so the count tracks the number of arms or profiles held.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


class KeyedStore(ABC, Generic[T]):
    """
    Base class for keyed in-memory stores.

    Subclasses must implement:
    - get_item_id(): How to extract the key from an item
    """

    def __init__(self):
        self._items: dict[str, T] = {}
        self._locks = KeyedLocks()
        # Guards the dict itself; per-key locks only serialize item mutations
        self._guard = threading.Lock()

    @abstractmethod
    def get_item_id(self, item: T) -> str:
        """Extract the unique key from an item."""
        pass

    def get(self, key: str) -> Optional[T]:
        return self._items.get(key)

    def get_or_create(self, key: str, factory: Callable[[str], T]) -> T:
        """
        Get an item, creating it lazily.

        Args:
            key: Item key
            factory: Builds a fresh item from the key

        Returns:
            The stored item
        """
        with self._locks.hold(key):
            item = self._items.get(key)
            if item is None:
                item = factory(key)
                with self._guard:
                    self._items[key] = item
            return item

    def upsert(self, item: T) -> None:
        with self._guard:
            self._items[self.get_item_id(item)] = item

    def all(self) -> list[T]:
        """Snapshot of the stored items, safe against concurrent inserts."""
        with self._guard:
            return list(self._items.values())

    def replace_all(self, items: dict[str, T]) -> None:
        """Swap the whole content (used when restoring a snapshot)."""
        with self._guard:
            self._items = dict(items)

    def locked(self, key: str):
        """Context manager serializing mutations of one key."""
        return self._locks.hold(key)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class ArmStore(KeyedStore[BanditArm]):
    """Bandit arms keyed by intervention id."""

    def get_item_id(self, item: BanditArm) -> str:
        return item.intervention_id

    def total_pulls(self) -> int:
        return sum(arm.pull_count for arm in self.all())

    def average_reward(self) -> float:
        """Pull-weighted average reward across all arms (0.5 with no data)."""
        total_pulls = 0
        total_reward = 0.0
        for arm in self.all():
            total_pulls += arm.pull_count
            total_reward += arm.total_reward
        return total_reward / total_pulls if total_pulls > 0 else 0.5


class UserProfileStore(KeyedStore[UserInterventionProfile]):
    """User intervention profiles keyed by user id."""

    def get_item_id(self, item: UserInterventionProfile) -> str:
        return item.user_id


class DecisionLog:
    """
    Bounded log of recent decision points.

    A ring buffer: once ``capacity`` entries are held, appending evicts the
    oldest entry together with its id-index entry and any pending-outcome
    marker, so memory and scan cost stay bounded.
    """

    def __init__(self, capacity: int = 1000):
        self.capacity = max(1, capacity)
        self._entries: deque[DecisionPoint] = deque()
        self._index: dict[str, DecisionPoint] = {}
        self._pending: dict[str, PendingOutcome] = {}
        self._lock = threading.Lock()

    def append(self, decision_point: DecisionPoint) -> None:
        with self._lock:
            if len(self._entries) >= self.capacity:
                evicted = self._entries.popleft()
                self._index.pop(evicted.id, None)
                self._pending.pop(evicted.id, None)
            self._entries.append(decision_point)
            self._index[decision_point.id] = decision_point

    def get(self, decision_point_id: str) -> Optional[DecisionPoint]:
        return self._index.get(decision_point_id)

    def recent(self, limit: Optional[int] = None) -> list[DecisionPoint]:
        """Most recent entries, oldest first."""
        with self._lock:
            entries = list(self._entries)
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return entries

    def count_delivered_since(
        self,
        user_id: str,
        since: datetime,
        category: Optional[InterventionCategory] = None,
    ) -> int:
        """
        Count delivered decision points for a user since a timestamp.

        Args:
            user_id: User to count for
            since: Inclusive lower bound
            category: Only count deliveries of this category

        Returns:
            Number of matching deliveries
        """
        with self._lock:
            entries = list(self._entries)
        return sum(
            1
            for dp in entries
            if dp.user_id == user_id
            and dp.intervention_delivered
            and dp.timestamp >= since
            and (category is None or dp.selected_category == category)
        )

    # ------------------------------------------------------------------
    # Pending outcomes
    # ------------------------------------------------------------------

    def mark_pending(self, marker: PendingOutcome) -> None:
        with self._lock:
            if marker.decision_point_id in self._index:
                self._pending[marker.decision_point_id] = marker

    def resolve_pending(self, decision_point_id: str) -> bool:
        with self._lock:
            return self._pending.pop(decision_point_id, None) is not None

    def pending(self) -> list[PendingOutcome]:
        with self._lock:
            return list(self._pending.values())

    def replace_all(
        self,
        entries: list[DecisionPoint],
        pending: list[PendingOutcome],
        capacity: Optional[int] = None,
    ) -> None:
        """Swap the whole log (used when restoring a snapshot)."""
        with self._lock:
            if capacity is not None:
                self.capacity = max(1, capacity)
            kept = entries[-self.capacity:]
            self._entries = deque(kept)
            self._index = {dp.id: dp for dp in kept}
            self._pending = {
                marker.decision_point_id: marker
                for marker in pending
                if marker.decision_point_id in self._index
            }
        dropped = len(entries) - len(kept)
        if dropped:
            logger.info(f"Decision log restore dropped {dropped} entries over capacity")

    def __len__(self) -> int:
        return len(self._entries)


class InterventionCatalog:
    """Registered interventions plus the designated crisis intervention."""

    def __init__(self):
        self._interventions: dict[str, Intervention] = {}
        self.crisis_intervention: Optional[Intervention] = None
        self._lock = threading.Lock()

    def register(self, intervention: Intervention) -> None:
        with self._lock:
            self._interventions[intervention.id] = intervention
            if (
                intervention.category == InterventionCategory.CRISIS_INTERVENTION
                and self.crisis_intervention is None
            ):
                self.crisis_intervention = intervention
            elif (
                self.crisis_intervention is not None
                and self.crisis_intervention.id == intervention.id
            ):
                self.crisis_intervention = intervention

    def get(self, intervention_id: str) -> Optional[Intervention]:
        return self._interventions.get(intervention_id)

    def all(self) -> list[Intervention]:
        with self._lock:
            return list(self._interventions.values())

    def __contains__(self, intervention_id: str) -> bool:
        return intervention_id in self._interventions

    def __len__(self) -> int:
        return len(self._interventions)
