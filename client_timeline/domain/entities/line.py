"""
Timeline line domain entity.

A line is an ordered sequence of events. Mutators here are pure: they return
the new event list and leave the line untouched, so the aggregate can persist
the full list before (or instead of) applying it.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from client_timeline.domain.entities.event import TimelineEvent
from client_timeline.domain.enums import EventPosition, EventStatus, LineLoad, SegmentKind
from client_timeline.domain.exceptions import InvalidEventDateError, ResourceNotFoundException
from client_timeline.domain.value_objects.event_date import normalized_event_date

DEFAULT_MAX_EVENTS_PER_LINE = 20

# status -> (next status, forced position or None to keep the current one)
STATUS_TRANSITIONS: dict[EventStatus, tuple[EventStatus, EventPosition | None]] = {
    EventStatus.CREATED: (EventStatus.RESOLVED, EventPosition.TOP),
    EventStatus.RESOLVED: (EventStatus.NO_RESPONSE, EventPosition.BOTTOM),
    EventStatus.NO_RESPONSE: (EventStatus.CREATED, None),
}

# Statuses that pin an event to one side of its line
FORCED_POSITIONS: dict[EventStatus, EventPosition] = {
    status: position for status, position in STATUS_TRANSITIONS.values() if position is not None
}


def next_status(event: TimelineEvent) -> TimelineEvent:
    """Apply one step of the status cycle to an event"""
    status, forced_position = STATUS_TRANSITIONS[event.status]
    return replace(event, status=status, position=forced_position or event.position)


def renumber(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Rewrite ``order`` as 0..n-1 following list order"""
    return [
        event if event.order == index else replace(event, order=index)
        for index, event in enumerate(events)
    ]


def _date_key(event: TimelineEvent) -> tuple[int, int] | None:
    try:
        return normalized_event_date(event.date)
    except InvalidEventDateError:
        # Unparseable dates never join a same-day segment
        return None


@dataclass
class TimelineLine:
    """Domain entity for a timeline line"""

    id: str
    timeline_id: str
    position: int
    events: list[TimelineEvent] = field(default_factory=list)
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        self.events = renumber(sorted(self.events, key=lambda e: e.order))

    @property
    def is_empty(self) -> bool:
        return not self.events

    @property
    def event_count(self) -> int:
        return len(self.events)

    @property
    def latest_event(self) -> TimelineEvent | None:
        """Most recently added event (new events are unshifted to the front)"""
        return self.events[0] if self.events else None

    @property
    def load_level(self) -> LineLoad:
        count = len(self.events)
        if count <= 5:
            return LineLoad.LOW
        if count <= 9:
            return LineLoad.MEDIUM
        return LineLoad.HIGH

    def is_full(self, max_events: int = DEFAULT_MAX_EVENTS_PER_LINE) -> bool:
        return len(self.events) >= max_events

    def index_of(self, event_id: str) -> int:
        for index, event in enumerate(self.events):
            if event.id == event_id:
                return index
        raise ResourceNotFoundException("Event", event_id)

    def get_event(self, event_id: str) -> TimelineEvent:
        return self.events[self.index_of(event_id)]

    def add_event(self, event: TimelineEvent) -> list[TimelineEvent]:
        """Return the events with ``event`` unshifted to the front"""
        return renumber([event, *self.events])

    def update_event(self, event: TimelineEvent) -> list[TimelineEvent]:
        """Return the events with the event of the same id replaced"""
        index = self.index_of(event.id)
        events = list(self.events)
        events[index] = event
        return renumber(events)

    def remove_event(self, event_id: str) -> list[TimelineEvent]:
        """Return the events without ``event_id``"""
        index = self.index_of(event_id)
        return renumber(self.events[:index] + self.events[index + 1:])

    def toggle_status(self, event_id: str) -> list[TimelineEvent]:
        """Return the events with one status transition applied to ``event_id``"""
        return self.update_event(next_status(self.get_event(event_id)))

    def segments(self) -> list[SegmentKind]:
        """
        Classify the segment between each pair of adjacent events.

        Adjacent events whose dates match on day and month (year ignored)
        are joined by a same-day segment; unset dates never match.
        """
        keys = [_date_key(event) for event in self.events]
        return [
            SegmentKind.SAME_DAY if left is not None and left == right else SegmentKind.DEFAULT
            for left, right in zip(keys, keys[1:])
        ]

    def has_contiguous_order(self) -> bool:
        return [event.order for event in self.events] == list(range(len(self.events)))
