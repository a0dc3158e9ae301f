"""
Data models for decision points, outcomes and rewards.

A DecisionPoint is logged every time the optimizer picks (or recommends)
an intervention. Outcomes arrive later and refer back to it by id; the
reward computer turns them into a RewardSignal for the arm updater.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.context import ContextualFeatures
from src.models.enums import DecisionPointType, InterventionCategory, OutcomeType


class DecisionPoint(BaseModel):
    """Append-only record of one selection."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"dp_{uuid.uuid4().hex[:12]}")
    user_id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    type: DecisionPointType = DecisionPointType.EVENT_TRIGGERED
    context: ContextualFeatures

    intervention_delivered: bool = True
    selected_intervention: Optional[str] = None
    selected_category: Optional[InterventionCategory] = None
    selection_probability: Optional[float] = None
    selection_reason: str = ""
    was_exploration: bool = False


class PendingOutcome(BaseModel):
    """Marker for a delivered decision point still awaiting an outcome."""

    decision_point_id: str
    expected_outcome_time: datetime


class InterventionOutcome(BaseModel):
    """A single measurement after an intervention was delivered."""

    decision_point_id: str
    user_id: str
    intervention_id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    latency_seconds: float = Field(default=0.0, description="Time since delivery")
    outcome_type: OutcomeType
    value: float = Field(..., description="Normalized value, -1 to 1")
    raw_value: float = 0.0
    confidence: float = 1.0
    outcome_context: Optional[dict] = None

    @field_validator("value", mode="before")
    @classmethod
    def _clamp_value(cls, v):
        return max(-1.0, min(1.0, float(v)))

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        return max(0.0, min(1.0, float(v)))

    @field_validator("latency_seconds", mode="before")
    @classmethod
    def _non_negative_latency(cls, v):
        return max(0.0, float(v))

    @property
    def is_positive(self) -> bool:
        return self.value > 0


class RewardShapingComponents(BaseModel):
    """Auxiliary reward terms (potential-based shaping)."""

    engagement_bonus: float = 0.0
    completion_bonus: float = 0.0
    progress_potential: float = 0.0
    exploration_bonus: float = 0.0
    novelty_bonus: float = 0.0
    diversity_bonus: float = 0.0
    timing_bonus: float = 0.0
    context_match_bonus: float = 0.0


class RewardSignal(BaseModel):
    """Scalar reward derived from one or more outcomes."""

    reward: float = Field(..., description="Final reward mapped onto [0, 1]")
    immediate_reward: float = 0.0
    delayed_reward: float = 0.0
    shaped_reward: float = 0.0
    discount_factor: float = 1.0
    outcomes: list[InterventionOutcome] = Field(default_factory=list)
    shaping_components: RewardShapingComponents = Field(
        default_factory=RewardShapingComponents
    )

    @field_validator("reward", mode="before")
    @classmethod
    def _clamp_reward(cls, v):
        return max(0.0, min(1.0, float(v)))

    @classmethod
    def direct(cls, reward: float) -> "RewardSignal":
        """Signal for a reward that did not come from outcomes (e.g. explicit feedback)."""
        return cls(
            reward=reward,
            immediate_reward=reward,
            delayed_reward=0.0,
            shaped_reward=reward,
            discount_factor=1.0,
        )
