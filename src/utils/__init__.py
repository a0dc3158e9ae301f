"""Utility functions and helpers."""

from src.utils.logging import get_logger, setup_logging
from src.utils.protocols import ArmRepositoryProtocol, ProfileRepositoryProtocol

__all__ = [
    "get_logger",
    "setup_logging",
    "ArmRepositoryProtocol",
    "ProfileRepositoryProtocol",
]
