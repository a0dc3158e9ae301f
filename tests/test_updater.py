"""
Tests for the arm updater.
"""

import pytest

from src.learning.store import ArmStore
from src.learning.updater import ArmUpdater
from src.models.bandit import BanditArm, ContextualBanditArm
from src.models.config import OptimizerConfig
from src.models.decision import RewardSignal


@pytest.fixture
def arms():
    return ArmStore()


@pytest.fixture
def updater(arms, config, clock):
    return ArmUpdater(arms, config, clock=clock)


class TestArmCreation:
    """Tests for lazy arm creation."""

    def test_contextual_arm_by_default(self, updater):
        arm = updater.ensure_arm("a")

        assert isinstance(arm, ContextualBanditArm)
        assert arm.alpha_success == 1.0
        assert arm.beta_failure == 1.0

    def test_plain_arm_when_contextual_disabled(self, arms, clock):
        updater = ArmUpdater(arms, OptimizerConfig(enable_contextual_bandit=False), clock=clock)

        assert type(updater.ensure_arm("a")) is BanditArm

    def test_prior_strength(self, arms, clock):
        updater = ArmUpdater(arms, OptimizerConfig(thompson_prior_strength=3.0), clock=clock)

        arm = updater.ensure_arm("a")
        assert arm.alpha_success == 3.0
        assert arm.beta_failure == 3.0

    def test_update_creates_unknown_arm(self, updater, arms):
        updater.update("never_registered", RewardSignal.direct(0.7))

        assert arms.get("never_registered").pull_count == 1


class TestArmUpdate:
    """Tests for posterior and moment updates."""

    @pytest.mark.parametrize("reward", [0.0, 0.3, 0.8, 1.0])
    def test_pull_count_and_mean(self, updater, reward):
        for _ in range(25):
            arm = updater.update("a", RewardSignal.direct(reward))

        assert arm.pull_count == 25
        assert arm.mean_reward == pytest.approx(reward)
        assert arm.total_reward == pytest.approx(25 * reward)
        # Identical rewards add nothing to the prior accumulator
        assert arm.reward_variance == pytest.approx(0.25 / 25)

    def test_welford_variance(self, updater):
        for reward in (0.2, 0.4, 0.6, 0.8):
            arm = updater.update("a", RewardSignal.direct(reward))

        assert arm.mean_reward == pytest.approx(0.5)
        # Sum of squared deviations on top of the prior accumulator
        assert arm.reward_m2 == pytest.approx(0.25 + 0.2)

    def test_repeated_full_reward(self, updater):
        """Test that reward 1.0 drives alpha up and the mean towards 1."""
        alphas = []
        for _ in range(50):
            arm = updater.update("a", RewardSignal.direct(1.0))
            alphas.append(arm.alpha_success)

        assert alphas == sorted(alphas)
        assert arm.alpha_success == pytest.approx(51.0)
        assert arm.beta_failure == 1.0
        assert arm.mean_reward == pytest.approx(1.0)
        assert 0.0 <= arm.normal_mean <= 1.0

    def test_low_reward_updates_beta(self, updater):
        arm = updater.update("a", RewardSignal.direct(0.2))

        assert arm.alpha_success == 1.0
        assert arm.beta_failure == pytest.approx(1.8)

    def test_normal_posterior_fusion(self, updater):
        arm = updater.update("a", RewardSignal.direct(1.0))

        # First pull: variance is still the prior 0.25, so observation precision is 4
        assert arm.normal_precision == pytest.approx(8.0)
        assert arm.normal_mean == pytest.approx(0.75)

    def test_ucb_value_and_timestamps(self, updater, clock):
        arm = updater.update("a", RewardSignal.direct(0.6))

        assert arm.ucb_value is not None
        assert arm.last_pulled == clock.now
        assert arm.last_updated == clock.now


class TestContextualRegression:
    """Tests for the online linear model."""

    def test_weights_move_towards_reward(self, updater, make_context):
        context = make_context(valence=0.5)

        arm = updater.update("a", RewardSignal.direct(1.0), context)

        features = context.to_feature_vector()
        shrinkage = 1 - 1.0 * 0.01
        assert arm.feature_weights["bias"] == pytest.approx(0.01 * 1.0 * shrinkage)
        assert arm.feature_weights["valence"] == pytest.approx(0.01 * 0.5 * shrinkage)
        assert set(arm.feature_weights) == set(features)

    def test_prediction_error_shrinks(self, updater, make_context):
        context = make_context(valence=0.5, energy_level=0.8)

        first_error = None
        for _ in range(200):
            arm = updater.update("a", RewardSignal.direct(0.9), context)
            error = abs(0.9 - arm.predict(context.to_feature_vector()))
            if first_error is None:
                first_error = error

        assert error < first_error

    def test_no_regression_without_context(self, updater):
        arm = updater.update("a", RewardSignal.direct(1.0))

        assert arm.feature_weights == {}
