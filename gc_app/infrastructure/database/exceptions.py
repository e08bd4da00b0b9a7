"""Data-access exceptions. Typed, no HTTP."""


class DataAccessError(Exception):
    """Base for all data-access errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RecordNotFoundError(DataAccessError):
    """Raised when update/delete targets a record that does not exist."""


class UnknownModelError(DataAccessError):
    """Raised when an operation names a model that is not registered."""


class UnsupportedOperationError(DataAccessError):
    """Raised for unknown actions or where-clause operators."""


class DatabaseUnavailableError(DataAccessError):
    """Raised when a data operation is requested but no database is configured."""
