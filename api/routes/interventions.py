"""Intervention catalog API routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from api.dependencies import get_optimizer
from src.learning.optimizer import InterventionOptimizer
from src.models.intervention import Intervention

router = APIRouter()


@router.post("/interventions", response_model=Intervention, status_code=201)
async def register_intervention(
    intervention: Intervention,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> Intervention:
    """Register (or replace) an intervention in the catalog."""
    optimizer.register_intervention(intervention)
    return intervention


@router.get("/interventions", response_model=list[Intervention])
async def list_interventions(
    active_only: bool = False,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> list[Intervention]:
    interventions = optimizer.catalog.all()
    if active_only:
        interventions = [i for i in interventions if i.is_active]
    return interventions


@router.get("/interventions/{intervention_id}", response_model=Intervention)
async def get_intervention(
    intervention_id: str,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> Intervention:
    intervention = optimizer.get_intervention(intervention_id)
    if intervention is None:
        raise HTTPException(status_code=404, detail=f"Intervention not found: {intervention_id}")
    return intervention


@router.patch("/interventions/{intervention_id}", response_model=Intervention)
async def update_intervention(
    intervention_id: str,
    updates: dict[str, Any] = Body(...),
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> Intervention:
    """Apply a partial update to an intervention. The id cannot change."""
    if optimizer.get_intervention(intervention_id) is None:
        raise HTTPException(status_code=404, detail=f"Intervention not found: {intervention_id}")
    try:
        return optimizer.update_intervention(intervention_id, updates)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/interventions/{intervention_id}", response_model=Intervention)
async def deactivate_intervention(
    intervention_id: str,
    optimizer: InterventionOptimizer = Depends(get_optimizer),
) -> Intervention:
    """Deactivate an intervention. Its learned arm is kept."""
    intervention = optimizer.deactivate_intervention(intervention_id)
    if intervention is None:
        raise HTTPException(status_code=404, detail=f"Intervention not found: {intervention_id}")
    return intervention
