"""
Tests for the selection strategies.
"""

import logging
import math
import statistics

import pytest

from src.learning.strategies import (
    MAX_ALTERNATIVES,
    GradientBanditScorer,
    ScoredArm,
    ScoringContext,
    SelectionStrategy,
    calculate_ucb,
    contextual_bonus,
    scorer_for,
    thompson_sample,
)
from src.models.bandit import BanditArm, ContextualBanditArm
from src.models.config import OptimizerConfig, merge_config


def _candidates(make_intervention, arms: dict[str, BanditArm]):
    return [(make_intervention(intervention_id), arm) for intervention_id, arm in arms.items()]


# ==============================================================================
# Thompson Sampling
# ==============================================================================

class TestThompsonSampling:
    """Tests for thompson_sample."""

    def test_draws_confined_to_unit_interval(self, config, sampler):
        cold = BanditArm(intervention_id="cold")
        warm = BanditArm(
            intervention_id="warm",
            pull_count=50,
            normal_mean=0.95,
            normal_precision=2.0,
        )

        draws = [thompson_sample(arm, config, sampler) for arm in (cold, warm) for _ in range(300)]

        assert all(0.0 <= d <= 1.0 for d in draws)

    def test_alpha_much_larger_than_beta_trends_high(self, config, sampler):
        arm = BanditArm(intervention_id="a", alpha_success=100.0, beta_failure=1.0)

        draws = [thompson_sample(arm, config, sampler) for _ in range(200)]

        assert statistics.mean(draws) > 0.5
        assert min(draws) > 0.5

    def test_zero_prior_strength_is_floored(self, sampler):
        config = OptimizerConfig(thompson_prior_strength=0.0)
        arm = BanditArm(intervention_id="a", alpha_success=0.0, beta_failure=0.0)

        assert config.thompson_prior_strength > 0.0
        assert 0.0 <= thompson_sample(arm, config, sampler) <= 1.0

    def test_non_positive_beta_parameters_are_floored(self, config, sampler):
        arm = BanditArm(intervention_id="a", alpha_success=-1.0, beta_failure=-1.0)

        assert 0.0 <= thompson_sample(arm, config, sampler) <= 1.0

    def test_warm_arm_uses_normal_posterior(self, config, sampler):
        arm = BanditArm(
            intervention_id="a",
            pull_count=config.min_pulls_per_arm,
            alpha_success=1.0,
            beta_failure=100.0,
            normal_mean=0.8,
            normal_precision=10000.0,
        )

        draws = [thompson_sample(arm, config, sampler) for _ in range(100)]

        assert statistics.mean(draws) == pytest.approx(0.8, abs=0.01)


# ==============================================================================
# UCB
# ==============================================================================

class TestUCB:
    """Tests for calculate_ucb."""

    def test_unpulled_arm_is_infinite(self):
        assert calculate_ucb(BanditArm(intervention_id="a"), 100, 2.0) == math.inf

    def test_formula(self):
        arm = BanditArm(intervention_id="a", pull_count=4, mean_reward=0.6)

        expected = 0.6 + 2.0 * math.sqrt(math.log(9) / 4)
        assert calculate_ucb(arm, 8, 2.0) == pytest.approx(expected)

    def test_better_arm_scores_higher_at_equal_pulls(self):
        """A: 10 pulls at 0.8, B: 10 pulls at 0.2, 20 pulls in total."""
        arm_a = BanditArm(intervention_id="a", pull_count=10, mean_reward=0.8)
        arm_b = BanditArm(intervention_id="b", pull_count=10, mean_reward=0.2)

        assert calculate_ucb(arm_a, 20, 2.0) > calculate_ucb(arm_b, 20, 2.0)

    def test_unpulled_arm_selected_first(self, make_intervention, make_context, sampler):
        config = OptimizerConfig(exploration_strategy="ucb")
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            "a": BanditArm(intervention_id="a", pull_count=50, mean_reward=0.99),
            "b": BanditArm(intervention_id="b"),
        })
        ctx = ScoringContext(config=config, sampler=sampler, total_pulls=50)

        choice = strategy.choose(candidates, make_context(), ctx)

        assert choice.selected.intervention.id == "b"
        assert choice.probability == 1.0
        assert choice.selected.expected_reward == 0.5


# ==============================================================================
# Other Strategies
# ==============================================================================

class TestStrategies:
    """Tests for epsilon-greedy, Boltzmann, gradient and the fallback."""

    def test_epsilon_greedy_exploration_is_uniform(self, make_intervention, make_context, sampler):
        config = OptimizerConfig(exploration_strategy="epsilon_greedy")
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            "a": BanditArm(intervention_id="a", pull_count=10, mean_reward=0.9),
            "b": BanditArm(intervention_id="b", pull_count=10, mean_reward=0.1),
            "c": BanditArm(intervention_id="c", pull_count=10, mean_reward=0.5),
        })
        ctx = ScoringContext(config=config, sampler=sampler)

        picks = set()
        for _ in range(100):
            choice = strategy.choose(candidates, make_context(), ctx, explore=True)
            assert choice.probability == pytest.approx(1 / 3)
            picks.add(choice.selected.intervention.id)

        assert picks == {"a", "b", "c"}

    def test_epsilon_greedy_exploits_mean_reward(self, make_intervention, make_context, sampler):
        config = OptimizerConfig(exploration_strategy="epsilon_greedy")
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            "a": BanditArm(intervention_id="a", mean_reward=0.3),
            "b": BanditArm(intervention_id="b", mean_reward=0.6),
        })

        choice = strategy.choose(candidates, make_context(), ScoringContext(config=config, sampler=sampler))

        assert choice.selected.intervention.id == "b"
        assert choice.probability == pytest.approx(0.6 / 0.9)
        assert [alt.intervention_id for alt in choice.alternatives] == ["a"]
        assert choice.alternatives[0].reason_not_selected == "Lower expected reward"

    def test_boltzmann_reports_softmax_probability(self, make_intervention, make_context, sampler):
        config = OptimizerConfig(exploration_strategy="boltzmann", temperature=0.5)
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            "a": BanditArm(intervention_id="a", mean_reward=0.9),
            "b": BanditArm(intervention_id="b", mean_reward=0.1),
        })
        ctx = ScoringContext(config=config, sampler=sampler)

        high = math.exp(0.9 / 0.5)
        low = math.exp(0.1 / 0.5)
        expected = {"a": high / (high + low), "b": low / (high + low)}

        picks = []
        for _ in range(300):
            choice = strategy.choose(candidates, make_context(), ctx)
            picks.append(choice.selected.intervention.id)
            assert choice.probability == pytest.approx(expected[choice.selected.intervention.id])

        # Softmax is a draw, not an argmax
        assert set(picks) == {"a", "b"}
        assert picks.count("a") > picks.count("b")

    def test_gradient_score_is_relative_to_average(self, config, sampler):
        arm = BanditArm(intervention_id="a", mean_reward=0.7)
        ctx = ScoringContext(config=config, sampler=sampler, average_reward=0.4)

        assert GradientBanditScorer().score(arm, ctx) == pytest.approx(0.3)

    def test_unknown_strategy_falls_back_to_mean_reward(self, caplog):
        config = OptimizerConfig(exploration_strategy="random_forest")

        with caplog.at_level(logging.WARNING):
            scorer = scorer_for(config)

        assert scorer.score(BanditArm(intervention_id="a", mean_reward=0.42), None) == 0.42
        assert "Unknown exploration strategy" in caplog.text

    def test_alternatives_capped(self, make_intervention, make_context, sampler):
        config = OptimizerConfig(exploration_strategy="ucb")
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            f"i{n}": BanditArm(intervention_id=f"i{n}", pull_count=1, mean_reward=n / 10)
            for n in range(8)
        })
        ctx = ScoringContext(config=config, sampler=sampler, total_pulls=8)

        choice = strategy.choose(candidates, make_context(), ctx)

        assert choice.selected.intervention.id == "i7"
        assert len(choice.alternatives) == MAX_ALTERNATIVES


# ==============================================================================
# Scoring
# ==============================================================================

class TestScoring:
    """Tests for score ranking and the contextual bonus."""

    def test_contextual_bonus(self, config, make_context):
        arm = ContextualBanditArm(intervention_id="a", feature_weights={"bias": 0.2, "valence": 0.5})

        assert contextual_bonus(arm, make_context(valence=0.4), config) == pytest.approx(0.4)

    def test_contextual_bonus_disabled(self, make_context):
        config = OptimizerConfig(enable_contextual_bandit=False)
        arm = ContextualBanditArm(intervention_id="a", feature_weights={"bias": 0.2})

        assert contextual_bonus(arm, make_context(), config) == 0.0

    def test_plain_arm_has_no_bonus(self, config, make_context):
        assert contextual_bonus(BanditArm(intervention_id="a"), make_context(), config) == 0.0

    def test_score_all_stable_on_ties(self, make_intervention, make_context, sampler):
        config = merge_config(overrides={"exploration_strategy": "epsilon_greedy"})
        strategy = SelectionStrategy(config, sampler)
        candidates = _candidates(make_intervention, {
            "a": BanditArm(intervention_id="a"),
            "b": BanditArm(intervention_id="b"),
            "c": BanditArm(intervention_id="c", mean_reward=0.9),
        })

        ranked = strategy.score_all(candidates, make_context(), ScoringContext(config=config, sampler=sampler))

        assert [s.intervention.id for s in ranked] == ["c", "a", "b"]

    def test_zero_scores_report_probability_one(self, make_intervention):
        scored = [
            ScoredArm(intervention=make_intervention("a"), arm=BanditArm(intervention_id="a"), score=0.0),
            ScoredArm(intervention=make_intervention("b"), arm=BanditArm(intervention_id="b"), score=-0.2),
        ]

        assert SelectionStrategy._probability(scored, scored[0]) == 1.0
