"""
Domain-specific exception hierarchy for slot computation.
"""


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class InvalidDuration(SchedulingError):
    """Raised when a service duration is not a positive number of minutes."""


class InvalidStep(SchedulingError):
    """Raised when the slot step granularity is not a positive number of minutes."""


class UnknownServiceError(SchedulingError):
    """Raised when a booking names a service the professional does not offer."""


class OccupancyFetchError(SchedulingError):
    """Raised when existing appointments cannot be fetched or parsed."""
