"""
Configuration loader for the optimizer.

Reads partial overrides from a YAML file and merges them over the
defaults. A missing file is not an error; the defaults are used.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml

from src.learning.errors import ConfigLoadError
from src.models.config import OptimizerConfig, merge_config


logger = logging.getLogger(__name__)


CONFIG_PATH_ENV = "OPTIMIZER_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config/optimizer.yaml"


def load_optimizer_config(config_path: Optional[Union[str, Path]] = None) -> OptimizerConfig:
    """
    Load the optimizer configuration.

    Args:
        config_path: YAML file with overrides. Defaults to the
            OPTIMIZER_CONFIG_PATH env var, then config/optimizer.yaml.

    Returns:
        Fully populated configuration

    Raises:
        ConfigLoadError: The file exists but is not a valid YAML mapping
    """
    path = Path(config_path or os.getenv(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))

    if not path.exists():
        logger.warning(f"Config file not found at {path}, using default configuration")
        return merge_config()

    try:
        with open(path, encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in config file {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigLoadError(f"Config file {path} must contain a mapping, got {type(overrides).__name__}")

    # Allow the overrides to sit under a top-level "optimizer" key
    overrides = overrides.get("optimizer", overrides)

    config = merge_config(overrides=overrides)
    logger.info(f"Loaded optimizer configuration from {path}")
    return config
