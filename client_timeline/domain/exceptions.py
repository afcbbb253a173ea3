"""
Errors raised by the timeline domain.

Every error carries a stable ``error_code`` and a ``details`` mapping so the
service layer can log it and hand it to the UI without inspecting types.
"""

from typing import Any


class TimelineException(Exception):
    """
    Base class for timeline errors.

    Attributes:
        message: Text shown to the user
        error_code: Stable identifier, the class name unless given
        details: Context such as the offending field or line id
    """

    def __init__(self, message: str, error_code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(TimelineException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidEventDateError(ValidationException):
    """Raised when an event date is neither unset nor DD/MM[/YYYY]."""

    def __init__(self, value: str):
        super().__init__(f"Invalid event date: {value!r}", field="date")
        self.details["value"] = value


class DescriptionTooLongError(ValidationException):
    """Raised when an event description exceeds the allowed length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Description too long ({length} > {max_length} characters)", field="description"
        )
        self.details.update({"length": length, "max_length": max_length})


class UnknownIconError(ValidationException):
    """Raised when an icon is not part of the organization's icon set."""

    def __init__(self, icon: str):
        super().__init__(f"Unknown icon: {icon!r}", field="icon")
        self.details["icon"] = icon


class LineLimitReachedException(TimelineException):
    """Raised when a timeline already holds the maximum number of lines."""

    def __init__(self, timeline_id: str, max_lines: int):
        super().__init__(
            f"Line limit reached for timeline {timeline_id} (max {max_lines})",
            "LINE_LIMIT_REACHED",
            {"timeline_id": timeline_id, "max_lines": max_lines},
        )


class ResourceNotFoundException(TimelineException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PersistenceException(TimelineException):
    """Raised when the store rejects a write; in-memory state was re-synced."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ChangeFeedException(TimelineException):
    """Raised when the change-notification channel fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "CHANGE_FEED_ERROR", details)
