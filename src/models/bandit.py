"""
Bandit arm models.

One arm per intervention. Plain arms carry reward moments and the Beta /
Normal posteriors; contextual arms additionally carry a linear model over
the context feature vector. The ``kind`` field is the discriminant, so a
snapshot always restores to the right variant.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.models.enums import ArmKind


# Prior variance for an arm with no observations
PRIOR_REWARD_VARIANCE = 0.25


class BanditArm(BaseModel):
    """Reward statistics for one intervention."""

    kind: Literal[ArmKind.PLAIN] = ArmKind.PLAIN

    intervention_id: str
    pull_count: int = 0
    total_reward: float = 0.0

    # Welford accumulators. reward_m2 is the running sum of squared deviations.
    mean_reward: float = 0.5
    reward_m2: float = PRIOR_REWARD_VARIANCE

    # Beta posterior (Thompson, cold start)
    alpha_success: float = 1.0
    beta_failure: float = 1.0

    # Normal posterior (Thompson, warm)
    normal_mean: float = 0.5
    normal_precision: float = 1 / PRIOR_REWARD_VARIANCE

    # None stands for +infinity: the arm has never been pulled
    ucb_value: Optional[float] = None

    last_updated: datetime = Field(default_factory=datetime.now)
    last_pulled: Optional[datetime] = None

    @property
    def reward_variance(self) -> float:
        """Running variance estimate (prior variance until the first pull)."""
        if self.pull_count == 0:
            return PRIOR_REWARD_VARIANCE
        return self.reward_m2 / self.pull_count

    @property
    def is_contextual(self) -> bool:
        return self.kind == ArmKind.CONTEXTUAL


class ContextualBanditArm(BanditArm):
    """Arm with an online linear model over context features."""

    kind: Literal[ArmKind.CONTEXTUAL] = ArmKind.CONTEXTUAL

    feature_weights: dict[str, float] = Field(default_factory=dict)

    def predict(self, features: dict[str, float]) -> float:
        """Dot product of the weights and a feature vector."""
        return sum(self.feature_weights.get(name, 0.0) * value for name, value in features.items())


Arm = Annotated[Union[BanditArm, ContextualBanditArm], Field(discriminator="kind")]
