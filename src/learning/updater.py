"""
Arm updater.

Applies a reward to one arm: Welford mean/variance, Beta and Normal
posterior updates, the cached UCB value and, for contextual arms, one
step of L2-regularized online linear regression.
"""

import logging
import math
from datetime import datetime
from typing import Callable, Optional

from src.learning.strategies import calculate_ucb
from src.models.bandit import BanditArm, ContextualBanditArm
from src.models.config import OptimizerConfig
from src.models.context import ContextualFeatures
from src.models.decision import RewardSignal
from src.utils.protocols import ArmRepositoryProtocol


logger = logging.getLogger(__name__)


# Floor on the per-observation variance used for the Normal posterior
MIN_OBSERVATION_VARIANCE = 0.01


class ArmUpdater:
    """Owns arm creation and mutation."""

    def __init__(
        self,
        arms: ArmRepositoryProtocol,
        config: OptimizerConfig,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.arms = arms
        self.config = config
        self.clock = clock

    def new_arm(self, intervention_id: str) -> BanditArm:
        """Fresh arm: optimistic mean, prior-strength Beta, prior Normal."""
        arm_class = ContextualBanditArm if self.config.enable_contextual_bandit else BanditArm
        return arm_class(
            intervention_id=intervention_id,
            alpha_success=self.config.thompson_prior_strength,
            beta_failure=self.config.thompson_prior_strength,
            last_updated=self.clock(),
        )

    def ensure_arm(self, intervention_id: str) -> BanditArm:
        return self.arms.get_or_create(intervention_id, self.new_arm)

    def update(
        self,
        intervention_id: str,
        reward: RewardSignal,
        context: Optional[ContextualFeatures] = None,
    ) -> BanditArm:
        """
        Apply a reward to an arm, creating the arm if needed.

        Args:
            intervention_id: Arm to update
            reward: Reward signal; ``reward.reward`` lies in [0, 1]
            context: Decision context, for contextual arms

        Returns:
            The updated arm
        """
        value = reward.reward
        with self.arms.locked(intervention_id):
            arm = self.ensure_arm(intervention_id)

            arm.pull_count += 1
            arm.total_reward += value

            # Welford
            delta = value - arm.mean_reward
            arm.mean_reward += delta / arm.pull_count
            delta2 = value - arm.mean_reward
            arm.reward_m2 += delta * delta2

            if value > 0.5:
                arm.alpha_success += value
            else:
                arm.beta_failure += 1 - value

            prior_precision = arm.normal_precision
            observation_precision = 1.0 / max(MIN_OBSERVATION_VARIANCE, arm.reward_variance)
            arm.normal_precision = prior_precision + observation_precision
            arm.normal_mean = (
                prior_precision * arm.normal_mean + observation_precision * value
            ) / arm.normal_precision

            ucb = calculate_ucb(arm, self.arms.total_pulls(), self.config.ucb_constant)
            arm.ucb_value = ucb if math.isfinite(ucb) else None

            now = self.clock()
            arm.last_updated = now
            arm.last_pulled = now

            if (
                context is not None
                and self.config.enable_contextual_bandit
                and isinstance(arm, ContextualBanditArm)
            ):
                self._regression_step(arm, context, value)

        logger.debug(
            f"Updated arm {intervention_id}: pulls={arm.pull_count}, "
            f"mean={arm.mean_reward:.3f}, reward={value:.3f}"
        )
        return arm

    def _regression_step(
        self,
        arm: ContextualBanditArm,
        context: ContextualFeatures,
        reward: float,
    ) -> None:
        """w += lr * (reward - w.x) * x, then w *= (1 - lambda * lr)."""
        features = context.to_feature_vector()
        error = reward - arm.predict(features)
        learning_rate = self.config.learning_rate
        shrinkage = 1 - self.config.contextual_regularization * learning_rate
        for name, value in features.items():
            weight = arm.feature_weights.get(name, 0.0) + learning_rate * error * value
            arm.feature_weights[name] = weight * shrinkage
