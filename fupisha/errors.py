"""
Error kinds raised by the store layer and the auth resource.

Every store error carries an operation-identifying message and, when it
wraps a backend failure, the original exception as ``cause``. ``str()``
renders both, e.g. ``"connecting to database: could not translate host name"``.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for all store-layer failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class DatabaseConnectionError(StoreError):
    """The backend could not be reached or did not answer a ping."""


class SchemaMigrationError(StoreError):
    """A DDL statement failed while migrating or dropping the schema."""

    def __init__(self, message: str, phase: str, cause: Optional[BaseException] = None):
        self.phase = phase
        super().__init__(message, cause)


class ConflictError(StoreError):
    """A unique key (alias or email) is already taken."""


class NotFoundError(StoreError):
    """The operation targets a key that does not exist."""


class InvalidInputError(StoreError):
    """Malformed input such as an invalid URL, alias or email."""


class BackendError(StoreError):
    """Any other failure reported by the backend."""


class OperationTimeoutError(BackendError):
    """The backend call was cancelled or timed out."""


class AuthenticationError(Exception):
    """Credentials or token could not be verified."""
