"""
Exception types raised by the store and rendered by the API.
Each maps to exactly one HTTP status code.
"""


class FinanceTrackerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceTrackerError):
    """A required field is missing or malformed, or a unique name is taken."""

    status_code = 400

    def __init__(self, message: str, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class NotFoundError(FinanceTrackerError):
    """The referenced id does not exist."""

    status_code = 404


class StorageFault(FinanceTrackerError):
    """The database engine failed to execute a statement."""

    status_code = 500
