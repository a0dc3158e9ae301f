"""
Reward computer.

Turns raw outcome observations into a bounded scalar reward. Outcomes are
split into an immediate bucket (inside the immediate window) and a delayed
bucket, each discounted by elapsed time, then blended and optionally
boosted by shaping bonuses for sparse health outcomes.
"""

from src.models.config import OptimizerConfig, RewardShapingWeights
from src.models.context import ContextualFeatures
from src.models.decision import (
    InterventionOutcome,
    RewardShapingComponents,
    RewardSignal,
)
from src.models.enums import OutcomeType


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _in_window(hour: int, window: tuple[int, int]) -> bool:
    start, end = window
    return start <= hour < end


class RewardComputer:
    """Computes RewardSignals from outcomes."""

    def __init__(self, config: OptimizerConfig):
        self.config = config

    def compute(
        self,
        outcomes: list[InterventionOutcome],
        context: ContextualFeatures,
    ) -> RewardSignal:
        """
        Compute the reward for outcomes tied to one decision context.

        Args:
            outcomes: Outcomes of the same decision point
            context: Context captured at the decision point

        Returns:
            RewardSignal whose ``reward`` lies in [0, 1]
        """
        calibration = self.config.reward_calibration
        discount = self.config.reward_discount_factor

        immediate = 0.0
        delayed = 0.0
        for outcome in outcomes:
            elapsed_units = outcome.latency_seconds / calibration.discount_time_unit_seconds
            discounted = outcome.value * discount ** elapsed_units
            if outcome.latency_seconds < calibration.immediate_window_seconds:
                immediate += discounted
            else:
                delayed += discounted

        count = max(1, len(outcomes))
        immediate = clamp(immediate / count, -1.0, 1.0)
        delayed = clamp(delayed / count, -1.0, 1.0)

        components = self.shaping_components(outcomes, context)

        base_reward = (
            self.config.immediate_reward_weight * immediate
            + self.config.delayed_reward_weight * delayed
        )
        shaped = base_reward
        if self.config.enable_reward_shaping:
            shaped = base_reward + self.shaping_bonus(components)
        shaped = clamp(shaped, -1.0, 1.0)

        return RewardSignal(
            reward=(shaped + 1) / 2,
            immediate_reward=immediate,
            delayed_reward=delayed,
            shaped_reward=shaped,
            discount_factor=discount,
            outcomes=list(outcomes),
            shaping_components=components,
        )

    def shaping_components(
        self,
        outcomes: list[InterventionOutcome],
        context: ContextualFeatures,
    ) -> RewardShapingComponents:
        """Shaping terms. Exploration, novelty and diversity stay at 0 here."""
        calibration = self.config.reward_calibration

        has_engagement = any(
            o.outcome_type == OutcomeType.ENGAGEMENT and o.is_positive for o in outcomes
        )
        has_completion = any(
            o.outcome_type == OutcomeType.COMPLETION and o.is_positive for o in outcomes
        )
        average_value = sum(o.value for o in outcomes) / len(outcomes) if outcomes else 0.0

        return RewardShapingComponents(
            engagement_bonus=calibration.engagement_bonus if has_engagement else 0.0,
            completion_bonus=calibration.completion_bonus if has_completion else 0.0,
            progress_potential=max(0.0, average_value),
            timing_bonus=self.timing_bonus(context),
            context_match_bonus=self.context_match_bonus(context),
        )

    def timing_bonus(self, context: ContextualFeatures) -> float:
        calibration = self.config.reward_calibration
        hour = context.hour_of_day
        if _in_window(hour, calibration.late_night_hours):
            return calibration.late_night_penalty
        if _in_window(hour, calibration.morning_hours):
            return calibration.morning_bonus
        if _in_window(hour, calibration.evening_hours):
            return calibration.evening_bonus
        return 0.0

    def context_match_bonus(self, context: ContextualFeatures) -> float:
        calibration = self.config.reward_calibration
        if context.engagement_score > calibration.high_engagement_threshold:
            return calibration.high_engagement_bonus
        if context.intervention_fatigue > calibration.fatigue_threshold:
            return calibration.fatigue_penalty
        return 0.0

    def shaping_bonus(self, components: RewardShapingComponents) -> float:
        """Weighted sum of the shaping components."""
        weights: RewardShapingWeights = self.config.reward_shaping_weights
        return sum(
            getattr(weights, name) * getattr(components, name)
            for name in RewardShapingComponents.model_fields
        )
