"""API schema modules."""

from api.schemas.optimizer import (
    BatchOutcomeRequest,
    BatchOutcomeResponse,
    DecayRequest,
    ExplorationResponse,
    FeedbackRequest,
    OutcomeResponse,
    PreferencesUpdate,
    RecommendationsRequest,
    SelectRequest,
    ShouldDeliverRequest,
    ShouldDeliverResponse,
)

__all__ = [
    "BatchOutcomeRequest",
    "BatchOutcomeResponse",
    "DecayRequest",
    "ExplorationResponse",
    "FeedbackRequest",
    "OutcomeResponse",
    "PreferencesUpdate",
    "RecommendationsRequest",
    "SelectRequest",
    "ShouldDeliverRequest",
    "ShouldDeliverResponse",
]
