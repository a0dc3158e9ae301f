"""Shared FastAPI dependencies."""

import logging
import os
from typing import Optional

from src.learning.config_loader import load_optimizer_config
from src.learning.optimizer import InterventionOptimizer

logger = logging.getLogger(__name__)

# One optimizer per process (in production, back the stores with a database)
_optimizer: Optional[InterventionOptimizer] = None


def get_optimizer() -> InterventionOptimizer:
    """Return the process-wide optimizer, creating it on first use."""
    global _optimizer
    if _optimizer is None:
        seed = os.getenv("OPTIMIZER_SEED")
        _optimizer = InterventionOptimizer(
            load_optimizer_config(),
            seed=int(seed) if seed else None,
        )
        logger.info(f"Optimizer ready (strategy={_optimizer.config.exploration_strategy})")
    return _optimizer


def reset_optimizer() -> None:
    """Drop the process-wide optimizer."""
    global _optimizer
    _optimizer = None
