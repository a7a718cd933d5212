class RollingStatisticsError(Exception):
    """Base class for errors raised by rolling statistics engines."""


class ConfigurationError(RollingStatisticsError, ValueError):
    """Engine or configuration parameters are invalid."""


class InvalidObservation(RollingStatisticsError, ValueError):
    """Observation is not a finite Decimal. The engine state is left untouched."""
