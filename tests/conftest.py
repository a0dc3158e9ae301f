"""
Pytest configuration and shared fixtures for the test suite.
"""

import pytest
from datetime import datetime, timedelta

from src.learning.optimizer import InterventionOptimizer
from src.learning.sampling import PosteriorSampler
from src.models.config import OptimizerConfig, merge_config
from src.models.context import ContextualFeatures
from src.models.decision import InterventionOutcome
from src.models.enums import InterventionCategory, OutcomeType
from src.models.intervention import Intervention


# ============================================================================
# Clock
# ============================================================================

class FakeClock:
    """Controllable stand-in for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """A Monday at noon."""
    return FakeClock(datetime(2026, 3, 2, 12, 0, 0))


# ============================================================================
# Model Factories
# ============================================================================

@pytest.fixture
def make_intervention():
    """Factory for catalog entries."""
    def _create(
        intervention_id: str,
        category: InterventionCategory = InterventionCategory.MINDFULNESS,
        **kwargs,
    ) -> Intervention:
        return Intervention(
            id=intervention_id,
            name=intervention_id.replace("_", " ").title(),
            category=category,
            **kwargs,
        )
    return _create


@pytest.fixture
def make_context():
    """Factory for contexts; unspecified features keep their defaults."""
    def _create(**overrides) -> ContextualFeatures:
        return ContextualFeatures(**overrides)
    return _create


@pytest.fixture
def make_outcome():
    """Factory for outcomes tied to a decision point."""
    def _create(
        decision_point_id: str,
        intervention_id: str,
        value: float = 1.0,
        outcome_type: OutcomeType = OutcomeType.ENGAGEMENT,
        user_id: str = "user-1",
        latency_seconds: float = 0.0,
    ) -> InterventionOutcome:
        return InterventionOutcome(
            decision_point_id=decision_point_id,
            user_id=user_id,
            intervention_id=intervention_id,
            outcome_type=outcome_type,
            value=value,
            latency_seconds=latency_seconds,
        )
    return _create


@pytest.fixture
def intervention_pool(make_intervention):
    """Five active interventions in distinct categories."""
    return [
        make_intervention("breathing_exercise", InterventionCategory.MINDFULNESS),
        make_intervention("thought_record", InterventionCategory.COGNITIVE_RESTRUCTURING),
        make_intervention("activity_plan", InterventionCategory.BEHAVIORAL_ACTIVATION),
        make_intervention("gratitude_list", InterventionCategory.GRATITUDE),
        make_intervention("self_kindness", InterventionCategory.SELF_COMPASSION),
    ]


@pytest.fixture
def crisis_intervention(make_intervention):
    return make_intervention("crisis_hotline", InterventionCategory.CRISIS_INTERVENTION)


# ============================================================================
# Optimizer Fixtures
# ============================================================================

@pytest.fixture
def sampler():
    """Seeded sampler so draws are reproducible."""
    return PosteriorSampler(seed=1234)


@pytest.fixture
def config():
    return OptimizerConfig()


@pytest.fixture
def make_optimizer(clock):
    """Factory for seeded optimizers with config overrides."""
    def _create(seed: int = 42, **overrides) -> InterventionOptimizer:
        return InterventionOptimizer(
            config=merge_config(overrides=overrides),
            seed=seed,
            clock=clock,
        )
    return _create


@pytest.fixture
def optimizer(make_optimizer, intervention_pool):
    """Seeded optimizer with the pool registered."""
    opt = make_optimizer()
    for intervention in intervention_pool:
        opt.register_intervention(intervention)
    return opt
