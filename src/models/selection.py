"""
Selection result models.

Consumed by the explanation-generation collaborator: besides the chosen
intervention they carry the alternatives that were considered and a
structured reasoning object.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from src.models.decision import DecisionPoint
from src.models.intervention import Intervention


class AlternativeIntervention(BaseModel):
    """An eligible intervention that was not selected."""

    intervention_id: str
    expected_reward: float
    probability: float = 0.0
    reason_not_selected: str


class InfluentialFeature(BaseModel):
    """A context feature that shaped the decision."""

    feature: str
    value: float
    influence: Literal["positive", "negative", "neutral"]


class SelectionReasoning(BaseModel):
    """Why the optimizer picked what it picked."""

    primary_factor: str
    influential_features: list[InfluentialFeature] = Field(default_factory=list)
    rejection_reasons: dict[str, str] = Field(default_factory=dict)
    exploitation_explanation: str = ""
    clinical_notes: Optional[str] = None


class InterventionSelection(BaseModel):
    """Result of a selection or recommendation."""

    intervention: Intervention
    confidence: float
    expected_reward: float
    probability: float
    is_exploration: bool = False
    exploration_strategy: str
    alternatives: list[AlternativeIntervention] = Field(default_factory=list)
    reasoning: SelectionReasoning
    decision_point: DecisionPoint
