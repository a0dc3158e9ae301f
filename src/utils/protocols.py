"""
Shared Protocol definitions for the optimizer's state stores.

The optimizer only relies on these contracts, so the in-memory stores in
``src.learning.store`` can be swapped for an external backend (database,
actor per key) without touching the selection or update paths.
"""

from contextlib import AbstractContextManager
from typing import Callable, Optional, Protocol

from src.models.bandit import BanditArm
from src.models.profile import UserInterventionProfile


class ArmRepositoryProtocol(Protocol):
    """Keyed store of bandit arms, one per intervention id."""

    def get(self, intervention_id: str) -> Optional[BanditArm]:
        """Return the arm for an intervention, or None if it was never created."""
        ...

    def get_or_create(
        self, intervention_id: str, factory: Callable[[str], BanditArm]
    ) -> BanditArm:
        """Return the arm, creating it with ``factory`` exactly once."""
        ...

    def upsert(self, arm: BanditArm) -> None:
        """Insert or replace an arm."""
        ...

    def all(self) -> list[BanditArm]:
        """Return every arm."""
        ...

    def replace_all(self, items: dict[str, BanditArm]) -> None:
        """Swap the whole contents, used when loading a snapshot."""
        ...

    def total_pulls(self) -> int:
        ...

    def average_reward(self) -> float:
        ...

    def locked(self, intervention_id: str) -> AbstractContextManager:
        """
        Serialize mutations of a single arm.

        Args:
            intervention_id: Arm key to lock

        Returns:
            Context manager holding the per-arm lock
        """
        ...


class ProfileRepositoryProtocol(Protocol):
    """Keyed store of user intervention profiles."""

    def get(self, user_id: str) -> Optional[UserInterventionProfile]:
        """Return the user's profile, or None if it was never created."""
        ...

    def get_or_create(
        self, user_id: str, factory: Callable[[str], UserInterventionProfile]
    ) -> UserInterventionProfile:
        ...

    def upsert(self, profile: UserInterventionProfile) -> None:
        """Insert or replace a profile."""
        ...

    def all(self) -> list[UserInterventionProfile]:
        """Return every profile."""
        ...

    def replace_all(self, items: dict[str, UserInterventionProfile]) -> None:
        ...

    def locked(self, user_id: str) -> AbstractContextManager:
        """Serialize mutations of a single user's profile."""
        ...
