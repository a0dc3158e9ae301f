"""
Learning & Optimization Layer.

Contains components for:
- Sampler: Seedable Beta/Gamma/Normal draws for posterior sampling
- Stores: Arms, user profiles, decision log and intervention catalog
- Eligibility Filter and Crisis Override: Safety gates run before scoring
- Selection Strategies: Thompson Sampling, UCB, epsilon-greedy, Boltzmann, gradient
- Reward Computer and Arm Updater: Turning outcomes into posterior updates
- InterventionOptimizer: The façade tying it all together
"""

from src.learning.config_loader import load_optimizer_config
from src.learning.errors import (
    ConfigLoadError,
    NoEligibleInterventionsError,
    OptimizerError,
)
from src.learning.optimizer import InterventionOptimizer, create_intervention_optimizer
from src.learning.reward import RewardComputer
from src.learning.sampling import PosteriorSampler
from src.learning.store import ArmStore, DecisionLog, InterventionCatalog, UserProfileStore

__all__ = [
    "load_optimizer_config",
    "ConfigLoadError",
    "NoEligibleInterventionsError",
    "OptimizerError",
    "InterventionOptimizer",
    "create_intervention_optimizer",
    "RewardComputer",
    "PosteriorSampler",
    "ArmStore",
    "DecisionLog",
    "InterventionCatalog",
    "UserProfileStore",
]
