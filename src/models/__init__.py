"""Data models for the intervention optimizer."""

from src.models.bandit import Arm, BanditArm, ContextualBanditArm
from src.models.config import (
    DEFAULT_OPTIMIZER_CONFIG,
    DIAMANTE_REWARD_WEIGHTS,
    OptimizerConfig,
    RewardCalibration,
    RewardShapingWeights,
    merge_config,
)
from src.models.context import FEATURE_NAMES, ContextualFeatures
from src.models.decision import (
    DecisionPoint,
    InterventionOutcome,
    PendingOutcome,
    RewardShapingComponents,
    RewardSignal,
)
from src.models.intervention import (
    INTERVENTION_CATEGORIES,
    TIME_OF_DAY_HOURS,
    Intervention,
    InterventionContraindications,
    InterventionPreconditions,
    LocalizedContent,
    default_crisis_intervention,
    time_of_day_for_hour,
)
from src.models.profile import CategoryStats, InterventionStats, UserInterventionProfile
from src.models.selection import (
    AlternativeIntervention,
    InfluentialFeature,
    InterventionSelection,
    SelectionReasoning,
)
from src.models.state import GlobalStats, OptimizerState

__all__ = [
    "Arm",
    "BanditArm",
    "ContextualBanditArm",
    "DEFAULT_OPTIMIZER_CONFIG",
    "DIAMANTE_REWARD_WEIGHTS",
    "OptimizerConfig",
    "RewardCalibration",
    "RewardShapingWeights",
    "merge_config",
    "FEATURE_NAMES",
    "ContextualFeatures",
    "DecisionPoint",
    "InterventionOutcome",
    "PendingOutcome",
    "RewardShapingComponents",
    "RewardSignal",
    "INTERVENTION_CATEGORIES",
    "TIME_OF_DAY_HOURS",
    "Intervention",
    "InterventionContraindications",
    "InterventionPreconditions",
    "LocalizedContent",
    "default_crisis_intervention",
    "time_of_day_for_hour",
    "CategoryStats",
    "InterventionStats",
    "UserInterventionProfile",
    "AlternativeIntervention",
    "InfluentialFeature",
    "InterventionSelection",
    "SelectionReasoning",
    "GlobalStats",
    "OptimizerState",
]
