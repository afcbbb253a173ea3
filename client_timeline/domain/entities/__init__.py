"""Domain entities."""

from client_timeline.domain.entities.event import TimelineEvent
from client_timeline.domain.entities.line import (STATUS_TRANSITIONS, TimelineLine,
                                                  next_status, renumber)
from client_timeline.domain.entities.timeline import ConsolidationPlan, Timeline

__all__ = [
    "TimelineEvent",
    "TimelineLine",
    "Timeline",
    "ConsolidationPlan",
    "STATUS_TRANSITIONS",
    "next_status",
    "renumber",
]
