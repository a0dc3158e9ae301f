"""
Global statistics and the persistence snapshot.

``OptimizerState`` is the contract with the storage collaborator: it is
produced by ``InterventionOptimizer.get_state`` and accepted back by
``load_state``. The storage engine itself lives outside this package.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.bandit import Arm
from src.models.config import OptimizerConfig
from src.models.decision import DecisionPoint, PendingOutcome
from src.models.enums import InterventionCategory, TimeOfDay
from src.models.profile import UserInterventionProfile


STATE_VERSION = "1.0.0"

# 7 days of hourly points
REWARD_TREND_CAPACITY = 168


class GlobalStats(BaseModel):
    """Aggregate counters across all users."""

    total_decision_points: int = 0
    total_interventions_delivered: int = 0
    engagement_observations: int = 0
    overall_engagement_rate: float = 0.0
    overall_outcome_improvement: float = 0.0
    exploration_ratio: float = 0.0
    category_distribution: dict[InterventionCategory, int] = Field(
        default_factory=lambda: {category: 0 for category in InterventionCategory}
    )
    time_of_day_distribution: dict[TimeOfDay, int] = Field(
        default_factory=lambda: {time_of_day: 0 for time_of_day in TimeOfDay}
    )
    reward_trend: list[float] = Field(default_factory=list)


class OptimizerState(BaseModel):
    """Complete learned state of the optimizer."""

    config: OptimizerConfig = Field(default_factory=OptimizerConfig)
    arms: dict[str, Arm] = Field(default_factory=dict)
    user_profiles: dict[str, UserInterventionProfile] = Field(default_factory=dict)
    recent_decision_points: list[DecisionPoint] = Field(default_factory=list)
    pending_outcomes: list[PendingOutcome] = Field(default_factory=list)
    global_stats: GlobalStats = Field(default_factory=GlobalStats)
    last_updated: datetime = Field(default_factory=datetime.now)
    version: str = STATE_VERSION
