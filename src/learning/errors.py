"""Exceptions raised by the intervention optimizer."""


class OptimizerError(Exception):
    """Base class for optimizer failures."""


class NoEligibleInterventionsError(OptimizerError):
    """Raised when filtering leaves no intervention to choose from.

    This is a hard stop: callers decide what to show instead.
    """

    def __init__(self, message: str = "No eligible interventions available for current context"):
        super().__init__(message)


class ConfigLoadError(OptimizerError):
    """Raised when a configuration file exists but cannot be used."""
