"""
Crisis override.

When the context signals crisis, selection skips eligibility and the
bandit and returns the safety intervention with full confidence.
"""

import logging
from typing import Optional

from src.models.config import OptimizerConfig
from src.models.context import ContextualFeatures
from src.models.intervention import Intervention, default_crisis_intervention


logger = logging.getLogger(__name__)


def is_crisis_context(context: ContextualFeatures, config: OptimizerConfig) -> bool:
    """Risk above the risk threshold OR crisis proximity above its threshold."""
    return (
        context.risk_level > config.crisis_risk_threshold
        or context.crisis_proximity > config.crisis_proximity_threshold
    )


class CrisisOverride:
    """Short-circuit check run before any arm is looked up."""

    def __init__(self, config: OptimizerConfig):
        self.config = config

    def applies(self, context: ContextualFeatures) -> bool:
        return self.config.enable_crisis_override and is_crisis_context(context, self.config)

    def intervention(self, registered: Optional[Intervention]) -> Intervention:
        """
        The intervention to deliver in a crisis.

        Args:
            registered: Crisis intervention from the catalog, if any

        Returns:
            The registered crisis intervention when active, otherwise the
            built-in safety message
        """
        if registered is not None and registered.is_active:
            return registered
        logger.warning("No active crisis intervention registered, using built-in safety message")
        return default_crisis_intervention()
