"""Optimizer API routes: selection, outcomes, profiles, stats and state."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from api.dependencies import get_optimizer
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
from src.learning.errors import NoEligibleInterventionsError
from src.learning.optimizer import InterventionOptimizer
from src.models.bandit import Arm
from src.models.config import OptimizerConfig
from src.models.decision import InterventionOutcome
from src.models.intervention import Intervention
from src.models.profile import UserInterventionProfile
from src.models.selection import InterventionSelection
from src.models.state import GlobalStats, OptimizerState

router = APIRouter()


def _candidate_pool(
    optimizer: InterventionOptimizer,
    intervention_ids: Optional[list[str]],
) -> list[Intervention]:
    """Resolve requested ids against the catalog (all registered when omitted)."""
    if intervention_ids is None:
        return optimizer.catalog.all()

    pool = []
    for intervention_id in intervention_ids:
        intervention = optimizer.get_intervention(intervention_id)
        if intervention is None:
            raise HTTPException(status_code=404, detail=f"Intervention not found: {intervention_id}")
        pool.append(intervention)
    return pool


# ============================================================================
# SELECTION
# ============================================================================

@router.post("/select", response_model=InterventionSelection)
async def select_intervention(
    request: SelectRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> InterventionSelection:
    """
    Select the intervention to deliver now.

    Returns 409 when no candidate is eligible in the given context.
    """
    pool = _candidate_pool(optimizer, request.intervention_ids)
    try:
        return optimizer.select_intervention(
            request.user_id,
            request.context,
            pool,
            decision_point_type=request.decision_point_type,
        )
    except NoEligibleInterventionsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/recommendations", response_model=list[InterventionSelection])
async def get_recommendations(
    request: RecommendationsRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> list[InterventionSelection]:
    pool = _candidate_pool(optimizer, request.intervention_ids)
    return optimizer.get_top_k_recommendations(request.user_id, request.context, request.k, pool)


@router.post("/should-deliver", response_model=ShouldDeliverResponse)
async def should_deliver(
    request: ShouldDeliverRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> ShouldDeliverResponse:
    deliver = optimizer.should_deliver(request.user_id, request.context, request.decision_point_type)
    return ShouldDeliverResponse(deliver=deliver)


# ============================================================================
# OUTCOMES & FEEDBACK
# ============================================================================

@router.post("/outcomes", response_model=OutcomeResponse)
async def record_outcome(
    outcome: InterventionOutcome,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> OutcomeResponse:
    """Record one outcome. Outcomes for unknown decision points are ignored."""
    reward = optimizer.record_outcome(outcome)
    return OutcomeResponse(recorded=reward is not None, reward=reward)


@router.post("/outcomes/batch", response_model=BatchOutcomeResponse)
async def record_outcomes_batch(
    request: BatchOutcomeRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> BatchOutcomeResponse:
    rewards = optimizer.batch_update(request.outcomes)
    return BatchOutcomeResponse(applied=len(rewards), rewards=[r.reward for r in rewards])


@router.post("/feedback", response_model=Arm)
async def record_feedback(
    request: FeedbackRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
):
    """Record explicit feedback; returns the updated arm."""
    return optimizer.record_user_feedback(request.user_id, request.intervention_id, request.feedback)


# ============================================================================
# PROFILES & STATS
# ============================================================================

@router.get("/users/{user_id}/profile", response_model=UserInterventionProfile)
async def get_user_profile(
    user_id: str,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> UserInterventionProfile:
    return optimizer.get_user_profile(user_id)


@router.patch("/users/{user_id}/preferences", response_model=UserInterventionProfile)
async def update_user_preferences(
    user_id: str,
    preferences: PreferencesUpdate,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> UserInterventionProfile:
    return optimizer.update_user_preferences(user_id, **preferences.model_dump(exclude_none=True))


@router.get("/arms/{intervention_id}", response_model=Arm)
async def get_arm_stats(
    intervention_id: str,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
):
    arm = optimizer.get_arm_stats(intervention_id)
    if arm is None:
        raise HTTPException(status_code=404, detail=f"Arm not found: {intervention_id}")
    return arm


@router.get("/stats", response_model=GlobalStats)
async def get_global_stats(
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> GlobalStats:
    return optimizer.get_global_stats()


# ============================================================================
# STATE & CONFIG
# ============================================================================

@router.get("/state", response_model=OptimizerState)
async def get_state(
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> OptimizerState:
    return optimizer.get_state()


@router.put("/state")
async def load_state(
    state: OptimizerState,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> dict:
    """Replace all learned state with a snapshot."""
    optimizer.load_state(state)
    return {
        "status": "loaded",
        "version": state.version,
        "arms": len(state.arms),
        "user_profiles": len(state.user_profiles),
    }


@router.get("/config", response_model=OptimizerConfig)
async def get_config(
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> OptimizerConfig:
    return optimizer.get_config()


@router.patch("/config", response_model=OptimizerConfig)
async def update_config(
    changes: dict[str, Any] = Body(...),
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> OptimizerConfig:
    """Merge partial changes into the live config."""
    try:
        return optimizer.update_config(**changes)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/exploration/decay", response_model=ExplorationResponse)
async def decay_exploration(
    request: DecayRequest,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> ExplorationResponse:
    return ExplorationResponse(epsilon=optimizer.decay_exploration(request.factor))
