"""
Tests for the reward computer.
"""

import pytest

from src.learning.reward import RewardComputer
from src.models.config import OptimizerConfig, merge_config
from src.models.enums import OutcomeType


@pytest.fixture
def computer(config):
    return RewardComputer(config)


@pytest.fixture
def unshaped():
    return RewardComputer(OptimizerConfig(enable_reward_shaping=False))


class TestRewardBuckets:
    """Tests for the immediate/delayed split and discounting."""

    def test_immediate_outcome(self, unshaped, make_outcome, make_context):
        signal = unshaped.compute([make_outcome("dp_1", "a", value=1.0)], make_context())

        assert signal.immediate_reward == 1.0
        assert signal.delayed_reward == 0.0
        # base = 0.4 * 1.0, mapped onto [0, 1]
        assert signal.reward == pytest.approx(0.7)

    def test_delayed_outcome_is_discounted(self, unshaped, make_outcome, make_context):
        outcome = make_outcome("dp_1", "a", value=1.0, latency_seconds=7200)

        signal = unshaped.compute([outcome], make_context())

        assert signal.immediate_reward == 0.0
        assert signal.delayed_reward == pytest.approx(0.95 ** 2)
        assert signal.reward == pytest.approx((0.6 * 0.95 ** 2 + 1) / 2)

    def test_window_boundary(self, unshaped, make_outcome, make_context):
        """Test that latency of exactly 300 seconds counts as delayed."""
        signal = unshaped.compute(
            [make_outcome("dp_1", "a", value=0.5, latency_seconds=300)], make_context()
        )

        assert signal.immediate_reward == 0.0
        assert signal.delayed_reward > 0.0

    def test_buckets_averaged_over_all_outcomes(self, unshaped, make_outcome, make_context):
        outcomes = [
            make_outcome("dp_1", "a", value=1.0),
            make_outcome("dp_1", "a", value=1.0, latency_seconds=3600),
        ]

        signal = unshaped.compute(outcomes, make_context())

        assert signal.immediate_reward == pytest.approx(0.5)
        assert signal.delayed_reward == pytest.approx(0.95 / 2)
        assert len(signal.outcomes) == 2

    def test_negative_outcome_maps_below_half(self, unshaped, make_outcome, make_context):
        signal = unshaped.compute(
            [make_outcome("dp_1", "a", value=-1.0, outcome_type=OutcomeType.MOOD_IMPROVEMENT)],
            make_context(),
        )

        assert signal.reward == pytest.approx(0.3)

    def test_reward_always_in_unit_interval(self, make_outcome, make_context):
        computer = RewardComputer(merge_config(overrides={
            "reward_shaping_weights": {"engagement_bonus": 10.0, "completion_bonus": 10.0},
        }))
        outcomes = [
            make_outcome("dp_1", "a", value=1.0),
            make_outcome("dp_1", "a", value=1.0, outcome_type=OutcomeType.COMPLETION),
        ]

        signal = computer.compute(outcomes, make_context())

        assert signal.shaped_reward == 1.0
        assert signal.reward == 1.0


class TestRewardShaping:
    """Tests for the shaping components."""

    def test_engagement_outcome_components(self, computer, make_outcome, make_context):
        signal = computer.compute([make_outcome("dp_1", "a", value=1.0)], make_context())
        components = signal.shaping_components

        assert components.engagement_bonus == 0.5
        assert components.completion_bonus == 0.0
        assert components.progress_potential == 1.0
        assert components.timing_bonus == 0.0
        assert components.context_match_bonus == 0.0
        # 0.4 base + 0.2 * 0.5 engagement + 0.15 * 1.0 progress
        assert signal.shaped_reward == pytest.approx(0.65)
        assert signal.reward == pytest.approx(0.825)

    def test_negative_engagement_earns_no_bonus(self, computer, make_outcome, make_context):
        signal = computer.compute([make_outcome("dp_1", "a", value=-0.5)], make_context())

        assert signal.shaping_components.engagement_bonus == 0.0
        assert signal.shaping_components.progress_potential == 0.0

    def test_completion_bonus(self, computer, make_outcome, make_context):
        signal = computer.compute(
            [make_outcome("dp_1", "a", value=0.5, outcome_type=OutcomeType.COMPLETION)],
            make_context(),
        )

        assert signal.shaping_components.completion_bonus == 0.8

    @pytest.mark.parametrize(
        "hour,bonus",
        [(2, -0.2), (6, 0.0), (8, 0.1), (12, 0.0), (19, 0.1), (21, 0.0)],
    )
    def test_timing_bonus(self, computer, make_context, hour, bonus):
        assert computer.timing_bonus(make_context(hour_of_day=hour)) == bonus

    def test_context_match_bonus(self, computer, make_context):
        assert computer.context_match_bonus(make_context(engagement_score=0.9)) == 0.1
        assert computer.context_match_bonus(make_context(intervention_fatigue=0.8)) == -0.1
        assert computer.context_match_bonus(make_context()) == 0.0

    def test_calibration_is_configurable(self, make_context):
        computer = RewardComputer(merge_config(overrides={
            "reward_calibration": {"morning_bonus": 0.3, "morning_hours": [6, 9]},
        }))

        assert computer.timing_bonus(make_context(hour_of_day=6)) == 0.3
