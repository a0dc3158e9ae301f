"""Optimizer API schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.context import ContextualFeatures
from src.models.decision import InterventionOutcome, RewardSignal
from src.models.enums import (
    DecisionPointType,
    InterventionCategory,
    InterventionIntensity,
    TimeOfDay,
    UserFeedback,
)


class SelectRequest(BaseModel):
    """Request to select an intervention for delivery."""
    user_id: str
    context: ContextualFeatures = Field(default_factory=ContextualFeatures)
    intervention_ids: Optional[list[str]] = Field(
        default=None,
        description="Candidate pool; all active registered interventions when omitted",
    )
    decision_point_type: DecisionPointType = DecisionPointType.EVENT_TRIGGERED


class RecommendationsRequest(BaseModel):
    """Request for a ranked list of interventions."""
    user_id: str
    context: ContextualFeatures = Field(default_factory=ContextualFeatures)
    k: int = Field(default=3, ge=0)
    intervention_ids: Optional[list[str]] = None


class ShouldDeliverRequest(BaseModel):
    """Request to decide whether to deliver at a decision point."""
    user_id: str
    context: ContextualFeatures = Field(default_factory=ContextualFeatures)
    decision_point_type: DecisionPointType = DecisionPointType.SCHEDULED


class ShouldDeliverResponse(BaseModel):
    deliver: bool


class OutcomeResponse(BaseModel):
    """Result of recording one outcome."""
    recorded: bool
    reward: Optional[RewardSignal] = None


class BatchOutcomeRequest(BaseModel):
    outcomes: list[InterventionOutcome] = Field(..., min_length=1)


class BatchOutcomeResponse(BaseModel):
    applied: int
    rewards: list[float]


class FeedbackRequest(BaseModel):
    """Explicit user feedback on a delivered intervention."""
    user_id: str
    intervention_id: str
    feedback: UserFeedback


class PreferencesUpdate(BaseModel):
    """
    Partial update of a user's preferences. Omitted fields are unchanged.

    Learned preferred/avoided categories are not settable here.
    """
    model_config = ConfigDict(extra="forbid")

    declined_categories: Optional[list[InterventionCategory]] = None
    preferred_intensity: Optional[InterventionIntensity] = None
    preferred_time_of_day: Optional[list[TimeOfDay]] = None


class DecayRequest(BaseModel):
    factor: float = Field(..., gt=0.0, le=1.0, description="Multiplier applied to epsilon")


class ExplorationResponse(BaseModel):
    epsilon: float
