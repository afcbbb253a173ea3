"""
Infrastructure exceptions for the client timeline.

This module defines infrastructure-level exceptions related to
database and change feed operations.
"""

from client_timeline.domain.exceptions import ChangeFeedException, PersistenceException


# Store Exceptions
class StoreWriteError(PersistenceException):
    """A store write failed and its transaction was rolled back."""

    def __init__(self, operation: str, reason: str, line_id: str | None = None):
        details = {"operation": operation, "reason": reason}
        if line_id is not None:
            details["line_id"] = line_id
        super().__init__(f"Store write failed during {operation}: {reason}", details)
        self.error_code = "STORE_WRITE_ERROR"


class LineNotFoundError(PersistenceException):
    """The line does not exist in the store."""

    def __init__(self, line_id: str):
        super().__init__(f"Line not found in store: {line_id}", {"line_id": line_id})
        self.error_code = "LINE_NOT_FOUND"


# Change Feed Exceptions
class ChangeFeedUnavailableError(ChangeFeedException):
    """The change feed backend cannot be reached."""

    def __init__(self, backend: str, reason: str):
        super().__init__(
            f"Change feed '{backend}' unavailable: {reason}",
            {"backend": backend, "reason": reason},
        )
