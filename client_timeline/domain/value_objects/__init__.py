"""Domain value objects."""

from client_timeline.domain.value_objects.event_date import (
    UNSET_DATE, format_event_date, is_unset_date, normalized_event_date,
    parse_event_date, validate_event_date, validate_event_time)
from client_timeline.domain.value_objects.icons import DEFAULT_ICONS, IconSet

__all__ = [
    "UNSET_DATE",
    "format_event_date",
    "is_unset_date",
    "normalized_event_date",
    "parse_event_date",
    "validate_event_date",
    "validate_event_time",
    "DEFAULT_ICONS",
    "IconSet",
]
