"""
Timeline event domain entity.

One logged interaction on a line, independent of how it's stored.
"""

from dataclasses import dataclass, fields, replace
from datetime import UTC, datetime
from typing import Any

from client_timeline.domain.enums import EventPosition, EventStatus
from client_timeline.domain.exceptions import DescriptionTooLongError, ValidationException
from client_timeline.domain.value_objects.event_date import (UNSET_DATE,
                                                             validate_event_date,
                                                             validate_event_time)
from client_timeline.domain.value_objects.icons import IconSet
from client_timeline.shared.utils.generators import generate_temp_id, is_temp_id

DEFAULT_DESCRIPTION_MAX_LENGTH = 150
DEFAULT_ICON_SIZE = "text-2xl"

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
# Set only by the status cycle, which keeps each status on its forced side
_CYCLE_FIELDS = frozenset({"status", "position"})


def validate_description(description: str | None, max_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH) -> str:
    """Trim a description and enforce its maximum length"""
    description = (description or "").strip()
    if len(description) > max_length:
        raise DescriptionTooLongError(len(description), max_length)
    return description


@dataclass(frozen=True)
class TimelineEvent:
    """
    Domain entity for a timeline event.

    Events are values: every edit produces a new instance, so a line's
    event list can be rebuilt in memory before anything is persisted.
    """

    id: str
    icon: str
    date: str
    description: str
    position: EventPosition
    status: EventStatus
    order: int
    created_at: datetime
    time: str | None = None
    icon_size: str = DEFAULT_ICON_SIZE

    @classmethod
    def create(
        cls,
        *,
        icon: str,
        date: str = UNSET_DATE,
        description: str | None = "",
        time: str | None = None,
        icon_size: str = DEFAULT_ICON_SIZE,
        icon_set: IconSet | None = None,
        latest: "TimelineEvent | None" = None,
        max_description_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH,
    ) -> "TimelineEvent":
        """
        Create a new event for the front of a line.

        Args:
            latest: The line's most recently added event; the new event is
                placed on the opposite side of it (top when the line is empty)

        Raises:
            ValidationException: If any field is invalid
        """
        if icon_set is not None:
            icon = icon_set.validate(icon)
        elif not icon or not icon.strip():
            raise ValidationException("Icon is required", field="icon")

        return cls(
            id=generate_temp_id(),
            icon=icon.strip(),
            date=validate_event_date(date),
            description=validate_description(description, max_description_length),
            position=latest.position.opposite() if latest else EventPosition.TOP,
            status=EventStatus.CREATED,
            order=0,
            created_at=datetime.now(UTC),
            time=validate_event_time(time),
            icon_size=icon_size or DEFAULT_ICON_SIZE,
        )

    @property
    def is_temporary(self) -> bool:
        """True until the store has assigned a permanent id"""
        return is_temp_id(self.id)

    def with_changes(
        self,
        *,
        icon_set: IconSet | None = None,
        max_description_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH,
        **changes: Any,
    ) -> "TimelineEvent":
        """
        Return a validated copy with the given fields changed.

        Raises:
            ValidationException: On unknown or immutable fields, status or position
                changes, or invalid values
        """
        known = {f.name for f in fields(self)}
        for name in changes:
            if name in _IMMUTABLE_FIELDS:
                raise ValidationException(f"Field '{name}' cannot be changed", field=name)
            if name in _CYCLE_FIELDS:
                raise ValidationException(
                    f"Field '{name}' changes only by toggling the status", field=name
                )
            if name not in known:
                raise ValidationException(f"Unknown event field '{name}'", field=name)

        if "icon" in changes:
            icon = changes["icon"] or ""
            changes["icon"] = icon_set.validate(icon) if icon_set else icon.strip()
            if not changes["icon"]:
                raise ValidationException("Icon is required", field="icon")
        if "date" in changes:
            changes["date"] = validate_event_date(changes["date"])
        if "time" in changes:
            changes["time"] = validate_event_time(changes["time"])
        if "description" in changes:
            changes["description"] = validate_description(
                changes["description"], max_description_length
            )

        return replace(self, **changes)

    def validate(self, max_description_length: int = DEFAULT_DESCRIPTION_MAX_LENGTH) -> bool:
        """Validate event business rules"""
        validate_event_date(self.date)
        validate_event_time(self.time)
        validate_description(self.description, max_description_length)
        if self.order < 0:
            raise ValidationException("Event order cannot be negative", field="order")
        if not self.icon:
            raise ValidationException("Icon is required", field="icon")
        return True
