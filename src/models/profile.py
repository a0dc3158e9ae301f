"""
User intervention profile models.

Aggregated per-user history: category rolling statistics, per-intervention
delivery statistics and learned preferences. Used by the eligibility filter
and reported to monitoring collaborators.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.models.enums import (
    InterventionCategory,
    InterventionIntensity,
    TimeOfDay,
    UserFeedback,
)


class CategoryStats(BaseModel):
    """Rolling statistics for one category."""

    count: int = 0
    average_reward: float = 0.0
    reward_variance: float = 0.0
    engagement_rate: float = 0.0
    completion_rate: float = 0.0
    last_used: Optional[datetime] = None


class InterventionStats(BaseModel):
    """Delivery statistics for one intervention."""

    delivery_count: int = 0
    engagement_count: int = 0
    completion_count: int = 0
    total_reward: float = 0.0
    average_reward: float = 0.0
    best_outcome: float = 0.0
    last_delivered: Optional[datetime] = None
    user_feedback: Optional[UserFeedback] = None


def _empty_category_history() -> dict[InterventionCategory, CategoryStats]:
    return {category: CategoryStats() for category in InterventionCategory}


class UserInterventionProfile(BaseModel):
    """A user's intervention history and learned preferences."""

    user_id: str
    total_interventions: int = 0
    category_history: dict[InterventionCategory, CategoryStats] = Field(
        default_factory=_empty_category_history
    )
    intervention_stats: dict[str, InterventionStats] = Field(default_factory=dict)

    # Learned from category history
    preferred_categories: list[InterventionCategory] = Field(default_factory=list)
    avoided_categories: list[InterventionCategory] = Field(default_factory=list)

    # Set explicitly by the user or an operator; never recomputed
    declined_categories: list[InterventionCategory] = Field(default_factory=list)

    preferred_intensity: InterventionIntensity = InterventionIntensity.BRIEF
    preferred_time_of_day: list[TimeOfDay] = Field(
        default_factory=lambda: [TimeOfDay.MORNING, TimeOfDay.EVENING]
    )

    # Priors until the first outcome arrives
    engagement_rate: float = 0.5
    completion_rate: float = 0.5
    average_outcome_improvement: float = 0.0

    last_intervention_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def is_category_excluded(self, category: InterventionCategory) -> bool:
        return category in self.avoided_categories or category in self.declined_categories

    def stats_for(self, category: InterventionCategory) -> CategoryStats:
        if category not in self.category_history:
            self.category_history[category] = CategoryStats()
        return self.category_history[category]
