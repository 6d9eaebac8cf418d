"""
Exception hierarchy for the sleep module.
"""


class SleepTrackerError(Exception):
    """Base class for all sleep module errors."""
    pass


class FormatError(SleepTrackerError, ValueError):
    """Raised when a clock string does not match HH:MM."""
    pass


class InvalidSessionError(SleepTrackerError, ValueError):
    """Raised when a sleep session cannot be built from the given times."""
    pass


class RepositoryError(SleepTrackerError):
    """Raised when the session store cannot be read or written."""
    pass


class NotFoundError(SleepTrackerError):
    """Raised when a requested session does not exist."""
    pass
