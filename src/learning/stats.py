"""
User profile and global statistics trackers.

Profiles aggregate one user's history for eligibility decisions; global
stats aggregate all users for monitoring.
"""

import threading
from datetime import datetime
from typing import Callable, Optional

from src.models.context import ContextualFeatures
from src.models.decision import InterventionOutcome, RewardSignal
from src.models.enums import InterventionCategory, OutcomeType
from src.models.intervention import time_of_day_for_hour
from src.models.profile import InterventionStats, UserInterventionProfile
from src.models.state import REWARD_TREND_CAPACITY, GlobalStats


# Categories need this many observations before they count as learned preferences
MIN_CATEGORY_OBSERVATIONS = 3
LEARNED_CATEGORY_COUNT = 3

# Smoothing of the outcome-improvement EMA
OUTCOME_EMA_DECAY = 0.95


def _running_average(previous: float, count: int, value: float) -> float:
    """Average after adding ``value`` as the ``count``-th observation."""
    return (previous * (count - 1) + value) / count


class ProfileTracker:
    """Updates a user profile after outcomes and feedback."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def new_profile(self, user_id: str) -> UserInterventionProfile:
        now = self.clock()
        return UserInterventionProfile(user_id=user_id, created_at=now, updated_at=now)

    def record_outcome(
        self,
        profile: UserInterventionProfile,
        outcome: InterventionOutcome,
        category: Optional[InterventionCategory],
    ) -> None:
        """
        Fold one outcome into a profile.

        Args:
            profile: Profile to mutate
            outcome: The observed outcome
            category: Category of the delivered intervention, if known
        """
        now = self.clock()
        profile.total_interventions += 1
        profile.last_intervention_at = now

        stats = profile.intervention_stats.setdefault(
            outcome.intervention_id, InterventionStats()
        )
        stats.delivery_count += 1
        if outcome.outcome_type == OutcomeType.ENGAGEMENT and outcome.is_positive:
            stats.engagement_count += 1
        if outcome.outcome_type == OutcomeType.COMPLETION and outcome.is_positive:
            stats.completion_count += 1
        stats.total_reward += outcome.value
        stats.average_reward = stats.total_reward / stats.delivery_count
        stats.best_outcome = max(stats.best_outcome, outcome.value)
        stats.last_delivered = now

        if category is not None:
            category_stats = profile.stats_for(category)
            category_stats.count += 1
            n = category_stats.count
            previous_average = category_stats.average_reward
            category_stats.average_reward = _running_average(previous_average, n, outcome.value)
            # Running population variance of the outcome values
            category_stats.reward_variance = _running_average(
                category_stats.reward_variance,
                n,
                (outcome.value - previous_average) * (outcome.value - category_stats.average_reward),
            )
            category_stats.last_used = now
            if outcome.outcome_type == OutcomeType.ENGAGEMENT:
                category_stats.engagement_rate = _running_average(
                    category_stats.engagement_rate, n, 1.0 if outcome.is_positive else 0.0
                )
            if outcome.outcome_type == OutcomeType.COMPLETION:
                category_stats.completion_rate = _running_average(
                    category_stats.completion_rate, n, 1.0 if outcome.is_positive else 0.0
                )

        profile.engagement_rate = self.overall_rate(profile, "engagement_rate")
        profile.completion_rate = self.overall_rate(profile, "completion_rate")
        profile.average_outcome_improvement = _running_average(
            profile.average_outcome_improvement, profile.total_interventions, outcome.value
        )
        self.refresh_learned_categories(profile)
        profile.updated_at = now

    @staticmethod
    def overall_rate(profile: UserInterventionProfile, rate: str) -> float:
        """Count-weighted average of a per-category rate (0.5 with no data)."""
        total_count = 0
        weighted_sum = 0.0
        for stats in profile.category_history.values():
            if stats.count > 0:
                weighted_sum += getattr(stats, rate) * stats.count
                total_count += stats.count
        return weighted_sum / total_count if total_count > 0 else 0.5

    @staticmethod
    def refresh_learned_categories(profile: UserInterventionProfile) -> None:
        """Top-3 categories become preferred; the bottom-3 of the rest become avoided."""
        qualified = sorted(
            (
                (category, stats)
                for category, stats in profile.category_history.items()
                if stats.count >= MIN_CATEGORY_OBSERVATIONS
            ),
            key=lambda item: item[1].average_reward,
            reverse=True,
        )
        preferred = [category for category, _ in qualified[:LEARNED_CATEGORY_COUNT]]
        remaining = [category for category, _ in qualified[LEARNED_CATEGORY_COUNT:]]
        profile.preferred_categories = preferred
        profile.avoided_categories = list(reversed(remaining))[:LEARNED_CATEGORY_COUNT]

    def record_feedback(self, profile: UserInterventionProfile, intervention_id: str, feedback) -> None:
        stats = profile.intervention_stats.setdefault(intervention_id, InterventionStats())
        stats.user_feedback = feedback
        profile.updated_at = self.clock()


class GlobalStatsTracker:
    """Maintains aggregate counters. Thread-safe."""

    def __init__(self, stats: Optional[GlobalStats] = None):
        self.stats = stats or GlobalStats()
        self._lock = threading.Lock()

    def record_selection(
        self,
        category: InterventionCategory,
        context: ContextualFeatures,
        was_exploration: bool,
    ) -> None:
        with self._lock:
            stats = self.stats
            stats.total_decision_points += 1
            stats.total_interventions_delivered += 1
            stats.category_distribution[category] = stats.category_distribution.get(category, 0) + 1
            time_of_day = time_of_day_for_hour(context.hour_of_day)
            stats.time_of_day_distribution[time_of_day] = (
                stats.time_of_day_distribution.get(time_of_day, 0) + 1
            )
            stats.exploration_ratio = _running_average(
                stats.exploration_ratio,
                stats.total_decision_points,
                1.0 if was_exploration else 0.0,
            )

    def record_outcome(self, outcome: InterventionOutcome, reward: RewardSignal) -> None:
        with self._lock:
            stats = self.stats
            if outcome.outcome_type == OutcomeType.ENGAGEMENT:
                stats.engagement_observations += 1
                stats.overall_engagement_rate = _running_average(
                    stats.overall_engagement_rate,
                    stats.engagement_observations,
                    1.0 if outcome.is_positive else 0.0,
                )
            stats.overall_outcome_improvement = (
                OUTCOME_EMA_DECAY * stats.overall_outcome_improvement
                + (1 - OUTCOME_EMA_DECAY) * outcome.value
            )
            stats.reward_trend.append(reward.reward)
            if len(stats.reward_trend) > REWARD_TREND_CAPACITY:
                del stats.reward_trend[: len(stats.reward_trend) - REWARD_TREND_CAPACITY]

    def snapshot(self) -> GlobalStats:
        with self._lock:
            return self.stats.model_copy(deep=True)

    def replace(self, stats: GlobalStats) -> None:
        with self._lock:
            self.stats = stats.model_copy(deep=True)
            if len(self.stats.reward_trend) > REWARD_TREND_CAPACITY:
                self.stats.reward_trend = self.stats.reward_trend[-REWARD_TREND_CAPACITY:]
