"""
Domain layer - timeline business rules.

This is the innermost layer containing entities, value objects,
and domain exceptions. It has no dependencies on other layers.
"""

from client_timeline.domain.entities import (ConsolidationPlan, Timeline,
                                             TimelineEvent, TimelineLine)
from client_timeline.domain.enums import (ChangeAction, ChangeTable, EventPosition,
                                          EventStatus, LineLoad, SegmentKind,
                                          SyncState)
from client_timeline.domain.exceptions import (ChangeFeedException,
                                               DescriptionTooLongError,
                                               InvalidEventDateError,
                                               LineLimitReachedException,
                                               PersistenceException,
                                               ResourceNotFoundException,
                                               TimelineException, UnknownIconError,
                                               ValidationException)
from client_timeline.domain.value_objects import UNSET_DATE, IconSet

__all__ = [
    # Entities
    "TimelineEvent",
    "TimelineLine",
    "Timeline",
    "ConsolidationPlan",
    # Value Objects
    "IconSet",
    "UNSET_DATE",
    # Enums
    "EventStatus",
    "EventPosition",
    "SegmentKind",
    "LineLoad",
    "SyncState",
    "ChangeTable",
    "ChangeAction",
    # Exceptions
    "TimelineException",
    "ValidationException",
    "InvalidEventDateError",
    "DescriptionTooLongError",
    "UnknownIconError",
    "LineLimitReachedException",
    "ResourceNotFoundException",
    "PersistenceException",
    "ChangeFeedException",
]
