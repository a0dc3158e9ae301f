"""
Selection strategies.

Each eligible arm gets a score from the configured strategy (Thompson
Sampling, UCB, epsilon-greedy, Boltzmann or gradient bandit), optionally
plus a contextual bonus from the arm's linear model. The selector then
picks the top score, or draws from the softmax distribution under
Boltzmann.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from src.learning.sampling import PosteriorSampler, softmax
from src.models.bandit import BanditArm
from src.models.config import MIN_PRIOR_STRENGTH, OptimizerConfig
from src.models.context import ContextualFeatures
from src.models.enums import ExplorationStrategy
from src.models.intervention import Intervention
from src.models.selection import AlternativeIntervention


logger = logging.getLogger(__name__)


MAX_ALTERNATIVES = 5


def thompson_sample(arm: BanditArm, config: OptimizerConfig, sampler: PosteriorSampler) -> float:
    """
    Draw from the arm's posterior.

    Cold arms (fewer than ``min_pulls_per_arm`` pulls) draw from the
    prior-weighted Beta posterior; warm arms draw from the Normal posterior.
    The draw is clamped to [0, 1].
    """
    if arm.pull_count < config.min_pulls_per_arm:
        prior = config.thompson_prior_strength
        return sampler.beta(
            max(MIN_PRIOR_STRENGTH, arm.alpha_success + prior),
            max(MIN_PRIOR_STRENGTH, arm.beta_failure + prior),
        )

    stddev = 1.0 / math.sqrt(max(arm.normal_precision, 1e-12))
    return max(0.0, min(1.0, sampler.normal(arm.normal_mean, stddev)))


def calculate_ucb(arm: BanditArm, total_pulls: int, ucb_constant: float) -> float:
    """Mean reward plus exploration bonus. Unpulled arms score +inf."""
    if arm.pull_count == 0:
        return math.inf
    exploration = ucb_constant * math.sqrt(math.log(total_pulls + 1) / arm.pull_count)
    return arm.mean_reward + exploration


@dataclass
class ScoringContext:
    """Shared inputs for scoring one batch of arms."""

    config: OptimizerConfig
    sampler: PosteriorSampler
    total_pulls: int = 0
    average_reward: float = 0.5


class ArmScorer(ABC):
    """Computes a score for one arm."""

    @abstractmethod
    def score(self, arm: BanditArm, ctx: ScoringContext) -> float:
        pass


class ThompsonSamplingScorer(ArmScorer):
    def score(self, arm: BanditArm, ctx: ScoringContext) -> float:
        return thompson_sample(arm, ctx.config, ctx.sampler)


class UCBScorer(ArmScorer):
    def score(self, arm: BanditArm, ctx: ScoringContext) -> float:
        return calculate_ucb(arm, ctx.total_pulls, ctx.config.ucb_constant)


class MeanRewardScorer(ArmScorer):
    def score(self, arm: BanditArm, ctx: ScoringContext) -> float:
        return arm.mean_reward


class GradientBanditScorer(ArmScorer):
    """Preference = arm mean reward minus the average reward across arms."""

    def score(self, arm: BanditArm, ctx: ScoringContext) -> float:
        return arm.mean_reward - ctx.average_reward


SCORERS: dict[ExplorationStrategy, ArmScorer] = {
    ExplorationStrategy.THOMPSON_SAMPLING: ThompsonSamplingScorer(),
    ExplorationStrategy.UCB: UCBScorer(),
    ExplorationStrategy.EPSILON_GREEDY: MeanRewardScorer(),
    ExplorationStrategy.BOLTZMANN: MeanRewardScorer(),
    ExplorationStrategy.GRADIENT_BANDIT: GradientBanditScorer(),
}


def scorer_for(config: OptimizerConfig) -> ArmScorer:
    """Scorer for the configured strategy; mean reward for unknown names."""
    strategy = config.strategy
    if strategy is None:
        logger.warning(
            f"Unknown exploration strategy '{config.exploration_strategy}', "
            "falling back to mean reward"
        )
        return MeanRewardScorer()
    return SCORERS[strategy]


def contextual_bonus(arm: BanditArm, context: ContextualFeatures, config: OptimizerConfig) -> float:
    """Linear-model bonus for contextual arms, 0 otherwise."""
    if not config.enable_contextual_bandit or not arm.is_contextual:
        return 0.0
    return arm.predict(context.to_feature_vector())


@dataclass
class ScoredArm:
    intervention: Intervention
    arm: BanditArm
    score: float

    @property
    def expected_reward(self) -> float:
        """Score as a reportable number (mean reward stands in for +inf)."""
        return self.score if math.isfinite(self.score) else self.arm.mean_reward


@dataclass
class StrategyChoice:
    """Outcome of one strategy run."""

    selected: ScoredArm
    probability: float
    alternatives: list[AlternativeIntervention] = field(default_factory=list)
    ranked: list[ScoredArm] = field(default_factory=list)


class SelectionStrategy:
    """
    Scores eligible arms and chooses one.

    Args:
        config: Optimizer configuration
        sampler: Randomness source
    """

    def __init__(self, config: OptimizerConfig, sampler: PosteriorSampler):
        self.config = config
        self.sampler = sampler

    def score_all(
        self,
        candidates: list[tuple[Intervention, BanditArm]],
        context: ContextualFeatures,
        ctx: ScoringContext,
        scorer: Optional[ArmScorer] = None,
    ) -> list[ScoredArm]:
        """Score every candidate and rank them, highest first (stable on ties)."""
        scorer = scorer or scorer_for(self.config)
        scored = []
        for intervention, arm in candidates:
            score = scorer.score(arm, ctx) + contextual_bonus(arm, context, self.config)
            scored.append(ScoredArm(intervention=intervention, arm=arm, score=score))
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)
        logger.debug(
            "Scores: " + ", ".join(f"{s.intervention.id}={s.score:.3f}" for s in ranked)
        )
        return ranked

    def choose(
        self,
        candidates: list[tuple[Intervention, BanditArm]],
        context: ContextualFeatures,
        ctx: ScoringContext,
        explore: bool = False,
    ) -> StrategyChoice:
        """
        Pick one arm.

        Args:
            candidates: Eligible (intervention, arm) pairs, non-empty
            context: Current context
            ctx: Shared scoring inputs
            explore: Whether this decision is an exploration step

        Returns:
            The chosen arm with its probability and alternatives
        """
        if explore and self.config.strategy == ExplorationStrategy.EPSILON_GREEDY:
            return self._explore_uniformly(candidates)

        ranked = self.score_all(candidates, context, ctx)

        if self.config.strategy == ExplorationStrategy.BOLTZMANN:
            probabilities = softmax([s.score for s in ranked], self.config.temperature)
            index = self.sampler.weighted_choice(ranked, probabilities)
            selected = ranked[index]
            return StrategyChoice(
                selected=selected,
                probability=probabilities[index],
                alternatives=self._alternatives(ranked, selected),
                ranked=ranked,
            )

        selected = ranked[0]
        return StrategyChoice(
            selected=selected,
            probability=self._probability(ranked, selected),
            alternatives=self._alternatives(ranked, selected),
            ranked=ranked,
        )

    def _explore_uniformly(self, candidates: list[tuple[Intervention, BanditArm]]) -> StrategyChoice:
        intervention, arm = self.sampler.choice(candidates)
        selected = ScoredArm(intervention=intervention, arm=arm, score=arm.mean_reward)
        alternatives = [
            AlternativeIntervention(
                intervention_id=other.id,
                expected_reward=other_arm.mean_reward,
                probability=0.0,
                reason_not_selected="Lower expected reward",
            )
            for other, other_arm in candidates
            if other.id != intervention.id
        ][:MAX_ALTERNATIVES]
        return StrategyChoice(
            selected=selected,
            probability=1.0 / len(candidates),
            alternatives=alternatives,
        )

    @staticmethod
    def _probability(ranked: list[ScoredArm], selected: ScoredArm) -> float:
        """max(0, score) / sum(max(0, scores)); 1 when the sum is zero."""
        if math.isinf(selected.score):
            tied = sum(1 for s in ranked if math.isinf(s.score) and s.score > 0)
            return 1.0 / max(1, tied)
        total = sum(max(0.0, s.score) for s in ranked)
        if total <= 0:
            return 1.0
        return min(1.0, max(0.0, selected.score) / total)

    @staticmethod
    def _alternatives(ranked: list[ScoredArm], selected: ScoredArm) -> list[AlternativeIntervention]:
        top_score = ranked[0].score
        return [
            AlternativeIntervention(
                intervention_id=s.intervention.id,
                expected_reward=s.expected_reward,
                probability=0.0,
                reason_not_selected=(
                    "Lower expected reward" if s.score < top_score else "Not selected by sampling"
                ),
            )
            for s in ranked
            if s.intervention.id != selected.intervention.id
        ][:MAX_ALTERNATIVES]
