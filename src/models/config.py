"""
Optimizer configuration.

Every knob has a default, so an OptimizerConfig is always fully populated.
Partial overrides (from code, a YAML file or an old snapshot) are merged
over the defaults with ``merge_config``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from src.models.enums import ExplorationStrategy


# Beta parameters must stay positive for the Gamma draws
MIN_PRIOR_STRENGTH = 1e-3


def _unit(v) -> float:
    return max(0.0, min(1.0, float(v)))


class RewardShapingWeights(BaseModel):
    """Weights applied to each shaping component."""

    engagement_bonus: float = 0.2
    completion_bonus: float = 0.3
    progress_potential: float = 0.15
    exploration_bonus: float = 0.1
    novelty_bonus: float = 0.05
    diversity_bonus: float = 0.1
    timing_bonus: float = 0.05
    context_match_bonus: float = 0.05


# Weights calibrated on the DIAMANTE trial
DIAMANTE_REWARD_WEIGHTS = RewardShapingWeights(
    engagement_bonus=0.25,
    completion_bonus=0.35,
    progress_potential=0.15,
    exploration_bonus=0.05,
    novelty_bonus=0.05,
    diversity_bonus=0.05,
    timing_bonus=0.05,
    context_match_bonus=0.05,
)


class RewardCalibration(BaseModel):
    """Hand-tuned constants of the reward computer.

    These come from clinical calibration, not derivation. Change them only
    with domain input.
    """

    immediate_window_seconds: float = 300.0
    discount_time_unit_seconds: float = 3600.0

    engagement_bonus: float = 0.5
    completion_bonus: float = 0.8

    # Timing bonus windows, [start_hour, end_hour)
    late_night_hours: tuple[int, int] = (0, 6)
    late_night_penalty: float = -0.2
    morning_hours: tuple[int, int] = (7, 10)
    morning_bonus: float = 0.1
    evening_hours: tuple[int, int] = (18, 21)
    evening_bonus: float = 0.1

    high_engagement_threshold: float = 0.7
    high_engagement_bonus: float = 0.1
    fatigue_threshold: float = 0.5
    fatigue_penalty: float = -0.1


class OptimizerConfig(BaseModel):
    """Tunable knobs of the intervention optimizer."""

    # Strategy. Kept as a plain string: unknown names fall back to mean reward.
    exploration_strategy: str = ExplorationStrategy.THOMPSON_SAMPLING.value
    epsilon: float = 0.1
    exploration_floor: float = 0.01
    temperature: float = 1.0
    ucb_constant: float = 2.0
    thompson_prior_strength: float = 1.0
    min_pulls_per_arm: int = 5

    # Reward
    reward_discount_factor: float = 0.95
    delayed_reward_weight: float = 0.6
    immediate_reward_weight: float = 0.4
    enable_reward_shaping: bool = True
    reward_shaping_weights: RewardShapingWeights = Field(
        default_factory=RewardShapingWeights
    )
    reward_calibration: RewardCalibration = Field(default_factory=RewardCalibration)

    # Delivery limits
    max_interventions_per_day: int = 10
    min_intervention_interval_seconds: float = 3600.0

    # Contextual bandit
    enable_contextual_bandit: bool = True
    contextual_regularization: float = 1.0
    learning_rate: float = 0.01
    batch_size: int = 32

    # Micro-randomized trial
    enable_mrt_randomization: bool = False
    mrt_randomization_probability: float = 0.5

    # Safety
    enable_crisis_override: bool = True
    crisis_risk_threshold: float = 0.8
    crisis_proximity_threshold: float = 0.7

    # Bookkeeping
    decision_log_capacity: int = 1000
    expected_outcome_delay_seconds: float = 3600.0

    @field_validator(
        "epsilon",
        "exploration_floor",
        "mrt_randomization_probability",
        "reward_discount_factor",
        mode="before",
    )
    @classmethod
    def _clamp_probability(cls, v):
        return _unit(v)

    @field_validator("temperature", mode="before")
    @classmethod
    def _positive_temperature(cls, v):
        return max(1e-6, float(v))

    @field_validator("thompson_prior_strength", mode="before")
    @classmethod
    def _positive_prior(cls, v):
        return max(MIN_PRIOR_STRENGTH, float(v))

    @field_validator("exploration_strategy", mode="before")
    @classmethod
    def _strategy_value(cls, v):
        return v.value if isinstance(v, ExplorationStrategy) else str(v)

    @property
    def strategy(self) -> Optional[ExplorationStrategy]:
        """The configured strategy, or None when the name is not recognised."""
        try:
            return ExplorationStrategy(self.exploration_strategy)
        except ValueError:
            return None


DEFAULT_OPTIMIZER_CONFIG = OptimizerConfig()


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(
    base: Optional[OptimizerConfig] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> OptimizerConfig:
    """
    Merge partial overrides over a fully populated config.

    Args:
        base: Config to start from (defaults when omitted)
        overrides: Partial mapping; nested blocks may themselves be partial

    Returns:
        A new, fully populated OptimizerConfig
    """
    base = base or DEFAULT_OPTIMIZER_CONFIG
    if not overrides:
        return base.model_copy(deep=True)
    return OptimizerConfig.model_validate(_deep_merge(base.model_dump(), overrides))
