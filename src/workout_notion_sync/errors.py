"""Error types shared by the sync workflows."""
from typing import Optional


class SyncError(RuntimeError):
    """Base class for workflow errors."""


class NotFoundError(SyncError):
    """Raised when a sheet or nested Notion page cannot be found."""


class ConfigurationMissingError(SyncError):
    """Raised when config.json or a required argument is missing."""


class RemoteCallError(SyncError):
    """
    Raised when a Google or Notion API call fails.

    Carries the operation name and the identifier it was called with so the
    caller can report which step of the workflow broke.
    """

    def __init__(self, operation: str, identifier: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.identifier = identifier
        self.cause = cause
        message = f"{operation} failed for {identifier}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
