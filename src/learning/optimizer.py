"""
Intervention Optimizer.

Selects the next intervention for a user with a multi-armed bandit,
learns from delayed outcomes and lets a crisis override bypass the
statistics entirely. Combines Thompson Sampling, UCB, epsilon-greedy,
Boltzmann and gradient-bandit scoring with a per-arm contextual linear
model and shaped rewards.
"""

import logging
import random
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

from src.learning.crisis import CrisisOverride, is_crisis_context
from src.learning.eligibility import EligibilityFilter, start_of_day
from src.learning.reward import RewardComputer
from src.learning.sampling import PosteriorSampler
from src.learning.stats import GlobalStatsTracker, ProfileTracker
from src.learning.store import (
    ArmStore,
    DecisionLog,
    InterventionCatalog,
    UserProfileStore,
)
from src.learning.strategies import (
    MeanRewardScorer,
    ScoringContext,
    SelectionStrategy,
    ThompsonSamplingScorer,
    calculate_ucb,
    thompson_sample,
)
from src.learning.updater import ArmUpdater
from src.models.bandit import BanditArm
from src.models.config import DEFAULT_OPTIMIZER_CONFIG, OptimizerConfig, merge_config
from src.models.context import ContextualFeatures
from src.models.decision import (
    DecisionPoint,
    InterventionOutcome,
    PendingOutcome,
    RewardSignal,
)
from src.models.enums import (
    DecisionPointType,
    ExplorationStrategy,
    InterventionCategory,
    UserFeedback,
)
from src.models.intervention import Intervention
from src.models.profile import UserInterventionProfile
from src.models.selection import (
    AlternativeIntervention,
    InfluentialFeature,
    InterventionSelection,
    SelectionReasoning,
)
from src.models.state import GlobalStats, OptimizerState, STATE_VERSION
from src.utils.protocols import ArmRepositoryProtocol, ProfileRepositoryProtocol


logger = logging.getLogger(__name__)


# Rewards for explicit feedback
FEEDBACK_REWARDS = {
    UserFeedback.POSITIVE: 0.9,
    UserFeedback.NEUTRAL: 0.5,
    UserFeedback.NEGATIVE: 0.1,
}

# Delivery heuristics for should_deliver
HIGH_RISK_DELIVERY_PROBABILITY = 0.3
LOW_ENERGY_THRESHOLD = 0.2
LOW_ENERGY_DELIVERY_PROBABILITY = 0.5
BASE_DELIVERY_PROBABILITY = 0.5
ENGAGEMENT_DELIVERY_WEIGHT = 0.3

# Preference fields callers may set. Preferred and avoided categories are
# recomputed from outcomes, so explicit exclusions go in declined_categories.
USER_PROFILE_FIELDS = {
    "declined_categories",
    "preferred_intensity",
    "preferred_time_of_day",
}


class InterventionOptimizer:
    """
    Online decision engine for intervention selection.

    Usage::

        optimizer = InterventionOptimizer({"exploration_strategy": "ucb"}, seed=7)
        optimizer.register_intervention(intervention)

        selection = optimizer.select_intervention("user-1", context, [intervention])
        optimizer.record_outcome(InterventionOutcome(
            decision_point_id=selection.decision_point.id,
            user_id="user-1",
            intervention_id=intervention.id,
            outcome_type="engagement",
            value=1.0,
        ))
    """

    def __init__(
        self,
        config: Optional[Union[OptimizerConfig, dict[str, Any]]] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
        arm_store: Optional[ArmRepositoryProtocol] = None,
        profile_store: Optional[ProfileRepositoryProtocol] = None,
    ):
        """
        Initialize the optimizer.

        Args:
            config: Full config or partial overrides of the defaults
            rng: Random generator for every stochastic step
            seed: Seed for a private generator when ``rng`` is not given
            clock: Source of "now" (local time)
            arm_store: Arm repository (in-memory by default)
            profile_store: Profile repository (in-memory by default)
        """
        if isinstance(config, OptimizerConfig):
            config = config.model_copy(deep=True)
        else:
            config = merge_config(DEFAULT_OPTIMIZER_CONFIG, config)

        self.clock = clock
        self.sampler = PosteriorSampler(rng=rng, seed=seed)

        self.catalog = InterventionCatalog()
        self.arms = arm_store if arm_store is not None else ArmStore()
        self.profiles = profile_store if profile_store is not None else UserProfileStore()
        self.decision_log = DecisionLog(capacity=config.decision_log_capacity)
        self.global_stats = GlobalStatsTracker()
        self.profile_tracker = ProfileTracker(clock=clock)

        self._apply_config(config)

    def _apply_config(self, config: OptimizerConfig) -> None:
        """Install a config and rebuild the components that read it."""
        self.config = config
        self.crisis = CrisisOverride(config)
        self.eligibility = EligibilityFilter(self.decision_log, config, clock=self.clock)
        self.strategy = SelectionStrategy(config, self.sampler)
        self.reward_computer = RewardComputer(config)
        self.updater = ArmUpdater(self.arms, config, clock=self.clock)

        if config.decision_log_capacity != self.decision_log.capacity:
            self.decision_log.replace_all(
                self.decision_log.recent(),
                self.decision_log.pending(),
                capacity=config.decision_log_capacity,
            )

    # ==========================================================================
    # CORE SELECTION
    # ==========================================================================

    def select_intervention(
        self,
        user_id: str,
        context: ContextualFeatures,
        available_interventions: list[Intervention],
        decision_point_type: DecisionPointType = DecisionPointType.EVENT_TRIGGERED,
    ) -> InterventionSelection:
        """
        Select the intervention to deliver now.

        Args:
            user_id: User identifier
            context: Contextual features
            available_interventions: Candidate pool
            decision_point_type: What triggered this decision

        Returns:
            Selected intervention with probability, alternatives and reasoning

        Raises:
            NoEligibleInterventionsError: Nothing in the pool is eligible
        """
        # Crisis check comes first: no arm lookups, no filtering
        if self.crisis.applies(context):
            return self._crisis_selection(user_id, context)

        profile = self.get_user_profile(user_id)
        eligible = self.eligibility.filter(available_interventions, context, profile)

        candidates = [(i, self.updater.ensure_arm(i.id)) for i in eligible]
        explore = self._should_explore()
        choice = self.strategy.choose(candidates, context, self._scoring_context(), explore=explore)

        selected = choice.selected.intervention
        decision_point = self._log_decision(
            user_id=user_id,
            context=context,
            intervention=selected,
            probability=choice.probability,
            was_exploration=explore,
            decision_point_type=decision_point_type,
        )
        self.global_stats.record_selection(selected.category, context, explore)

        logger.debug(
            f"Selected {selected.id} for {user_id} "
            f"(strategy={self.config.exploration_strategy}, p={choice.probability:.3f}, "
            f"explore={explore})"
        )

        return InterventionSelection(
            intervention=selected,
            confidence=self._selection_confidence(choice.selected.arm),
            expected_reward=choice.selected.expected_reward,
            probability=choice.probability,
            is_exploration=explore,
            exploration_strategy=self.config.exploration_strategy,
            alternatives=choice.alternatives,
            reasoning=self._reasoning(selected, context, explore, choice.alternatives),
            decision_point=decision_point,
        )

    def should_deliver(
        self,
        user_id: str,
        context: ContextualFeatures,
        decision_point_type: DecisionPointType,
    ) -> bool:
        """
        Decide whether to deliver anything at this decision point.

        Crisis-triggered points always deliver. Otherwise the daily cap and
        minimum interval are enforced, then delivery is randomized.
        """
        if decision_point_type == DecisionPointType.CRISIS_TRIGGERED:
            return True

        profile = self.get_user_profile(user_id)
        now = self.clock()

        delivered_today = self.decision_log.count_delivered_since(user_id, start_of_day(now))
        if delivered_today >= self.config.max_interventions_per_day:
            return False

        if profile.last_intervention_at:
            elapsed = (now - profile.last_intervention_at).total_seconds()
            if elapsed < self.config.min_intervention_interval_seconds:
                return False

        if self.config.enable_mrt_randomization:
            return self.sampler.bernoulli(self.config.mrt_randomization_probability)

        if (
            context.risk_level > self.config.crisis_risk_threshold
            and decision_point_type != DecisionPointType.USER_INITIATED
        ):
            return self.sampler.bernoulli(HIGH_RISK_DELIVERY_PROBABILITY)

        if context.energy_level < LOW_ENERGY_THRESHOLD:
            return self.sampler.bernoulli(LOW_ENERGY_DELIVERY_PROBABILITY)

        return self.sampler.bernoulli(
            BASE_DELIVERY_PROBABILITY + profile.engagement_rate * ENGAGEMENT_DELIVERY_WEIGHT
        )

    def get_top_k_recommendations(
        self,
        user_id: str,
        context: ContextualFeatures,
        k: int,
        available_interventions: list[Intervention],
    ) -> list[InterventionSelection]:
        """
        Rank eligible interventions without delivering any.

        Returns:
            min(k, eligible) selections sorted by descending score. Under a
            crisis context, the single crisis selection.
        """
        if self.crisis.applies(context):
            return [self._crisis_selection(user_id, context)]

        profile = self.get_user_profile(user_id)
        eligible = self.eligibility.filter(available_interventions, context, profile, strict=False)
        candidates = [(i, self.updater.ensure_arm(i.id)) for i in eligible]

        scorer = (
            ThompsonSamplingScorer()
            if self.config.strategy == ExplorationStrategy.THOMPSON_SAMPLING
            else MeanRewardScorer()
        )
        ranked = self.strategy.score_all(candidates, context, self._scoring_context(), scorer=scorer)

        selections = []
        for index, scored in enumerate(ranked[: max(0, k)]):
            probability = 1.0 / (index + 1)
            decision_point = self._log_decision(
                user_id=user_id,
                context=context,
                intervention=scored.intervention,
                probability=probability,
                was_exploration=False,
                decision_point_type=DecisionPointType.USER_INITIATED,
                delivered=False,
                reason=f"Recommendation rank {index + 1}",
            )
            selections.append(
                InterventionSelection(
                    intervention=scored.intervention,
                    confidence=self._selection_confidence(scored.arm),
                    expected_reward=scored.expected_reward,
                    probability=probability,
                    is_exploration=False,
                    exploration_strategy=self.config.exploration_strategy,
                    alternatives=[],
                    reasoning=self._reasoning(scored.intervention, context, False, []),
                    decision_point=decision_point,
                )
            )
        return selections

    # ==========================================================================
    # REWARD & LEARNING
    # ==========================================================================

    def record_outcome(self, outcome: InterventionOutcome) -> Optional[RewardSignal]:
        """
        Record an outcome and update the arm and the user's profile.

        Outcomes for unknown decision points are logged and dropped.

        Returns:
            The reward applied, or None when the outcome was dropped
        """
        decision_point = self.decision_log.get(outcome.decision_point_id)
        if decision_point is None:
            logger.warning(f"Decision point not found: {outcome.decision_point_id}")
            return None

        reward = self.compute_reward([outcome], decision_point.context)
        self.update_arm(outcome.intervention_id, reward, decision_point.context)
        self._apply_outcomes_to_profile([outcome], decision_point, reward)
        return reward

    def compute_reward(
        self,
        outcomes: list[InterventionOutcome],
        context: ContextualFeatures,
    ) -> RewardSignal:
        """Reward signal for outcomes of one decision context."""
        return self.reward_computer.compute(outcomes, context)

    def update_arm(
        self,
        intervention_id: str,
        reward: RewardSignal,
        context: Optional[ContextualFeatures] = None,
    ) -> BanditArm:
        """Apply a reward to an arm; unknown arms are created on demand."""
        return self.updater.update(intervention_id, reward, context)

    def batch_update(self, outcomes: list[InterventionOutcome]) -> list[RewardSignal]:
        """
        Apply many outcomes at once.

        Outcomes are grouped per decision point so each group yields one
        reward computed against that decision's context.

        Returns:
            Rewards applied, one per known decision point
        """
        grouped: "OrderedDict[str, list[InterventionOutcome]]" = OrderedDict()
        for outcome in outcomes:
            grouped.setdefault(outcome.decision_point_id, []).append(outcome)

        rewards = []
        for decision_point_id, group in grouped.items():
            decision_point = self.decision_log.get(decision_point_id)
            if decision_point is None:
                logger.warning(
                    f"Decision point not found: {decision_point_id} "
                    f"({len(group)} outcomes dropped)"
                )
                continue

            reward = self.compute_reward(group, decision_point.context)
            self.update_arm(group[0].intervention_id, reward, decision_point.context)
            self._apply_outcomes_to_profile(group, decision_point, reward)
            rewards.append(reward)

        logger.info(f"Batch update applied {len(rewards)} rewards from {len(outcomes)} outcomes")
        return rewards

    def _apply_outcomes_to_profile(
        self,
        outcomes: list[InterventionOutcome],
        decision_point: DecisionPoint,
        reward: RewardSignal,
    ) -> None:
        for outcome in outcomes:
            category = self._category_of(outcome.intervention_id, decision_point)
            with self.profiles.locked(outcome.user_id):
                profile = self.get_user_profile(outcome.user_id)
                self.profile_tracker.record_outcome(profile, outcome, category)
            self.global_stats.record_outcome(outcome, reward)
        self.decision_log.resolve_pending(decision_point.id)

    def _category_of(
        self,
        intervention_id: str,
        decision_point: DecisionPoint,
    ) -> Optional[InterventionCategory]:
        intervention = self.catalog.get(intervention_id)
        if intervention is not None:
            return intervention.category
        if decision_point.selected_intervention == intervention_id:
            return decision_point.selected_category
        return None

    # ==========================================================================
    # USER PROFILE
    # ==========================================================================

    def get_user_profile(self, user_id: str) -> UserInterventionProfile:
        """Get or lazily create a user's profile."""
        return self.profiles.get_or_create(user_id, self.profile_tracker.new_profile)

    def update_user_preferences(self, user_id: str, **preferences) -> UserInterventionProfile:
        """
        Update a user's preference fields.

        Args:
            user_id: User identifier
            **preferences: Any of declined categories, preferred intensity,
                preferred time of day

        Returns:
            The updated profile
        """
        unknown = set(preferences) - USER_PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown preference fields: {sorted(unknown)}")

        with self.profiles.locked(user_id):
            profile = self.get_user_profile(user_id)
            data = profile.model_dump()
            data.update(preferences)
            data["updated_at"] = self.clock()
            updated = UserInterventionProfile.model_validate(data)
            self.profiles.upsert(updated)
        return updated

    def record_user_feedback(
        self,
        user_id: str,
        intervention_id: str,
        feedback: Union[UserFeedback, str],
    ) -> BanditArm:
        """Store explicit feedback and feed it to the arm as a reward."""
        feedback = UserFeedback(feedback)
        with self.profiles.locked(user_id):
            profile = self.get_user_profile(user_id)
            self.profile_tracker.record_feedback(profile, intervention_id, feedback)
        return self.update_arm(intervention_id, RewardSignal.direct(FEEDBACK_REWARDS[feedback]))

    # ==========================================================================
    # INTERVENTION MANAGEMENT
    # ==========================================================================

    def register_intervention(self, intervention: Intervention) -> None:
        """Add an intervention to the catalog and create its arm."""
        self.catalog.register(intervention)
        self.updater.ensure_arm(intervention.id)
        logger.info(f"Registered intervention {intervention.id} ({intervention.category.value})")

    def update_intervention(
        self,
        intervention_id: str,
        updates: dict[str, Any],
    ) -> Optional[Intervention]:
        """Apply a partial patch. Unknown ids are logged and ignored."""
        intervention = self.catalog.get(intervention_id)
        if intervention is None:
            logger.warning(f"Cannot update unknown intervention: {intervention_id}")
            return None
        updated = intervention.patched(updates, updated_at=self.clock())
        self.catalog.register(updated)
        return updated

    def deactivate_intervention(self, intervention_id: str) -> Optional[Intervention]:
        """Mark an intervention inactive. Its arm is kept."""
        updated = self.update_intervention(intervention_id, {"is_active": False})
        if updated is not None:
            logger.info(f"Deactivated intervention {intervention_id}")
        return updated

    def get_intervention(self, intervention_id: str) -> Optional[Intervention]:
        return self.catalog.get(intervention_id)

    def filter_eligible_interventions(
        self,
        interventions: list[Intervention],
        context: ContextualFeatures,
        user_profile: UserInterventionProfile,
        strict: bool = True,
    ) -> list[Intervention]:
        """Eligible interventions; raises NoEligibleInterventionsError when strict and empty."""
        return self.eligibility.filter(interventions, context, user_profile, strict=strict)

    # ==========================================================================
    # STATISTICS & PERSISTENCE
    # ==========================================================================

    def get_arm_stats(self, intervention_id: str) -> Optional[BanditArm]:
        arm = self.arms.get(intervention_id)
        return arm.model_copy(deep=True) if arm is not None else None

    def get_global_stats(self) -> GlobalStats:
        return self.global_stats.snapshot()

    def get_state(self) -> OptimizerState:
        """Snapshot of everything learned so far."""
        return OptimizerState(
            config=self.config.model_copy(deep=True),
            arms={arm.intervention_id: arm.model_copy(deep=True) for arm in self.arms.all()},
            user_profiles={
                profile.user_id: profile.model_copy(deep=True) for profile in self.profiles.all()
            },
            recent_decision_points=self.decision_log.recent(self.config.decision_log_capacity),
            pending_outcomes=self.decision_log.pending(),
            global_stats=self.global_stats.snapshot(),
            last_updated=self.clock(),
            version=STATE_VERSION,
        )

    def load_state(self, state: Union[OptimizerState, dict[str, Any]]) -> None:
        """
        Replace all learned state with a snapshot.

        The snapshot's config is merged over the defaults, so fields added
        since the snapshot was taken get their default values. The
        intervention catalog is not part of the snapshot and is kept.
        """
        if not isinstance(state, OptimizerState):
            state = OptimizerState.model_validate(state)

        config = merge_config(
            DEFAULT_OPTIMIZER_CONFIG, state.config.model_dump(exclude_unset=True)
        )
        self.arms.replace_all(dict(state.arms))
        self.profiles.replace_all(dict(state.user_profiles))
        self.decision_log.replace_all(
            list(state.recent_decision_points),
            list(state.pending_outcomes),
            capacity=config.decision_log_capacity,
        )
        self.global_stats.replace(state.global_stats)
        self._apply_config(config)

        logger.info(
            f"Loaded optimizer state v{state.version}: {len(state.arms)} arms, "
            f"{len(state.user_profiles)} profiles, "
            f"{len(state.recent_decision_points)} decision points"
        )

    # ==========================================================================
    # EXPLORATION CONTROL
    # ==========================================================================

    def thompson_sample(self, arm: BanditArm) -> float:
        return thompson_sample(arm, self.config, self.sampler)

    def calculate_ucb(self, arm: BanditArm, total_pulls: int) -> float:
        return calculate_ucb(arm, total_pulls, self.config.ucb_constant)

    def get_exploration_probability(self) -> float:
        return self.config.epsilon

    def decay_exploration(self, decay_factor: float) -> float:
        """Multiply epsilon by ``decay_factor``, never going below the floor."""
        epsilon = max(self.config.exploration_floor, self.config.epsilon * decay_factor)
        self.update_config(epsilon=epsilon)
        return self.config.epsilon

    def _should_explore(self) -> bool:
        # Thompson and UCB explore through their scores
        if self.config.strategy in (ExplorationStrategy.THOMPSON_SAMPLING, ExplorationStrategy.UCB):
            return False
        return self.sampler.bernoulli(self.config.epsilon)

    def _scoring_context(self) -> ScoringContext:
        return ScoringContext(
            config=self.config,
            sampler=self.sampler,
            total_pulls=self.arms.total_pulls(),
            average_reward=self.arms.average_reward(),
        )

    # ==========================================================================
    # CRISIS HANDLING
    # ==========================================================================

    def get_crisis_intervention(self, context: ContextualFeatures) -> Intervention:
        return self.crisis.intervention(self.catalog.crisis_intervention)

    def is_crisis_context(self, context: ContextualFeatures) -> bool:
        return is_crisis_context(context, self.config)

    def _crisis_selection(self, user_id: str, context: ContextualFeatures) -> InterventionSelection:
        intervention = self.get_crisis_intervention(context)
        decision_point = self._log_decision(
            user_id=user_id,
            context=context,
            intervention=intervention,
            probability=1.0,
            was_exploration=False,
            decision_point_type=DecisionPointType.CRISIS_TRIGGERED,
            reason="Crisis override - immediate safety response",
        )
        self.global_stats.record_selection(intervention.category, context, False)
        logger.warning(
            f"Crisis override for user {user_id} "
            f"(risk={context.risk_level:.2f}, proximity={context.crisis_proximity:.2f})"
        )

        return InterventionSelection(
            intervention=intervention,
            confidence=1.0,
            expected_reward=1.0,
            probability=1.0,
            is_exploration=False,
            exploration_strategy=self.config.exploration_strategy,
            alternatives=[],
            reasoning=SelectionReasoning(
                primary_factor="Crisis detection triggered immediate safety response",
                influential_features=[
                    InfluentialFeature(feature="risk_level", value=context.risk_level, influence="positive"),
                    InfluentialFeature(
                        feature="crisis_proximity", value=context.crisis_proximity, influence="positive"
                    ),
                ],
                exploitation_explanation="Crisis intervention bypasses normal selection",
                clinical_notes="User safety is the priority. Normal bandit selection overridden.",
            ),
            decision_point=decision_point,
        )

    # ==========================================================================
    # CONFIGURATION
    # ==========================================================================

    def update_config(self, **changes) -> OptimizerConfig:
        """Merge changes over the current config."""
        self._apply_config(merge_config(self.config, changes))
        return self.get_config()

    def get_config(self) -> OptimizerConfig:
        return self.config.model_copy(deep=True)

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    def _log_decision(
        self,
        user_id: str,
        context: ContextualFeatures,
        intervention: Intervention,
        probability: float,
        was_exploration: bool,
        decision_point_type: DecisionPointType,
        delivered: bool = True,
        reason: Optional[str] = None,
    ) -> DecisionPoint:
        now = self.clock()
        decision_point = DecisionPoint(
            user_id=user_id,
            timestamp=now,
            type=decision_point_type,
            context=context,
            intervention_delivered=delivered,
            selected_intervention=intervention.id,
            selected_category=intervention.category,
            selection_probability=probability,
            selection_reason=reason or ("Exploration" if was_exploration else "Exploitation"),
            was_exploration=was_exploration,
        )
        self.decision_log.append(decision_point)
        if delivered:
            self.decision_log.mark_pending(
                PendingOutcome(
                    decision_point_id=decision_point.id,
                    expected_outcome_time=now
                    + timedelta(seconds=self.config.expected_outcome_delay_seconds),
                )
            )
        return decision_point

    @staticmethod
    def _selection_confidence(arm: BanditArm) -> float:
        """Grows with pulls, shrinks with variance. 0.5 for unpulled arms."""
        if arm.pull_count == 0:
            return 0.5
        pull_confidence = 1 - pow(2.718281828459045, -arm.pull_count / 10)
        variance_confidence = 1 / (1 + arm.reward_variance)
        return 0.5 * pull_confidence + 0.5 * variance_confidence

    def _reasoning(
        self,
        intervention: Intervention,
        context: ContextualFeatures,
        was_exploration: bool,
        alternatives: list[AlternativeIntervention],
    ) -> SelectionReasoning:
        influential = []
        if context.valence < 0:
            influential.append(InfluentialFeature(feature="valence", value=context.valence, influence="negative"))
        if context.energy_level < 0.3:
            influential.append(
                InfluentialFeature(feature="energy_level", value=context.energy_level, influence="negative")
            )
        if context.engagement_score > 0.7:
            influential.append(
                InfluentialFeature(feature="engagement_score", value=context.engagement_score, influence="positive")
            )

        strategy = self.config.exploration_strategy
        return SelectionReasoning(
            primary_factor=(
                "Random exploration to discover new interventions"
                if was_exploration
                else f"{strategy} selected highest expected reward"
            ),
            influential_features=influential,
            rejection_reasons={
                alt.intervention_id: alt.reason_not_selected for alt in alternatives[:3]
            },
            exploitation_explanation=(
                "Exploration phase - trying less-used intervention"
                if was_exploration
                else f"Selected {intervention.category.value} based on past success"
            ),
            clinical_notes=(
                "Crisis intervention selected - prioritize safety"
                if intervention.category == InterventionCategory.CRISIS_INTERVENTION
                else None
            ),
        )


def create_intervention_optimizer(
    config: Optional[Union[OptimizerConfig, dict[str, Any]]] = None,
    rng: Optional[random.Random] = None,
) -> InterventionOptimizer:
    """Factory for an InterventionOptimizer."""
    return InterventionOptimizer(config=config, rng=rng)
