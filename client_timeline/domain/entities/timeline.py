"""
Timeline aggregate root.

Holds the ordered lines of one client and owns the line-count policy and
the consolidation rule applied when a line loses its last event.
"""

from dataclasses import dataclass, field

from client_timeline.domain.entities.event import TimelineEvent
from client_timeline.domain.entities.line import FORCED_POSITIONS, TimelineLine, renumber
from client_timeline.domain.enums import EventStatus
from client_timeline.domain.exceptions import (LineLimitReachedException,
                                               ResourceNotFoundException,
                                               ValidationException)

DEFAULT_MAX_LINES = 10


@dataclass(frozen=True)
class ConsolidationPlan:
    """
    Writes needed to delete an event.

    ``persist_events`` become the full content of ``persist_line_id``;
    then ``delete_line_id`` (if any) is removed.
    """

    persist_line_id: str
    persist_events: list[TimelineEvent]
    delete_line_id: str | None = None

    @property
    def merges(self) -> bool:
        return self.delete_line_id is not None


@dataclass
class Timeline:
    """Domain aggregate for one client's timeline"""

    id: str
    organization_scope: str | None = None
    lines: list[TimelineLine] = field(default_factory=list)
    max_lines: int = DEFAULT_MAX_LINES

    def __post_init__(self) -> None:
        self.lines.sort(key=lambda line: line.position)
        self._compact_positions()

    def _compact_positions(self) -> None:
        for index, line in enumerate(self.lines):
            line.position = index

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def next_position(self) -> int:
        return len(self.lines)

    @property
    def can_add_line(self) -> bool:
        return len(self.lines) < self.max_lines

    @property
    def has_no_response(self) -> bool:
        """True when any event is waiting on the client"""
        return any(
            event.status is EventStatus.NO_RESPONSE for line in self.lines for event in line.events
        )

    def index_of_line(self, line_id: str) -> int:
        for index, line in enumerate(self.lines):
            if line.id == line_id:
                return index
        raise ResourceNotFoundException("Line", line_id)

    def get_line(self, line_id: str) -> TimelineLine:
        return self.lines[self.index_of_line(line_id)]

    def next_line(self, line_id: str) -> TimelineLine | None:
        index = self.index_of_line(line_id)
        return self.lines[index + 1] if index + 1 < len(self.lines) else None

    def previous_line(self, line_id: str) -> TimelineLine | None:
        index = self.index_of_line(line_id)
        return self.lines[index - 1] if index > 0 else None

    def ensure_can_add_line(self) -> None:
        if not self.can_add_line:
            raise LineLimitReachedException(self.id, self.max_lines)

    def append_line(self, line: TimelineLine) -> None:
        self.ensure_can_add_line()
        line.position = len(self.lines)
        self.lines.append(line)

    def remove_line(self, line_id: str) -> TimelineLine:
        line = self.lines.pop(self.index_of_line(line_id))
        self._compact_positions()
        return line

    def set_line_events(self, line_id: str, events: list[TimelineEvent]) -> None:
        self.get_line(line_id).events = renumber(events)

    def ensure_can_delete_line(self, line_id: str) -> None:
        self.index_of_line(line_id)
        if len(self.lines) == 1:
            raise ValidationException("Cannot delete the only line of a timeline", field="line_id")

    def plan_event_deletion(self, line_id: str, event_id: str) -> ConsolidationPlan:
        """
        Work out the writes for deleting an event.

        A line left empty is merged into the next line by position, or
        the previous one when it is last; the emptied line is the one
        removed. An empty sole line is kept.
        """
        line = self.get_line(line_id)
        remaining = line.remove_event(event_id)

        if len(self.lines) == 1 or remaining:
            return ConsolidationPlan(line.id, remaining)

        following = self.next_line(line_id)
        if following is not None:
            return ConsolidationPlan(
                following.id, renumber([*remaining, *following.events]), delete_line_id=line.id
            )

        preceding = self.previous_line(line_id)
        if preceding is not None:
            return ConsolidationPlan(
                preceding.id, renumber([*preceding.events, *remaining]), delete_line_id=line.id
            )

        return ConsolidationPlan(line.id, remaining)

    def validate(self) -> bool:
        """Validate timeline invariants"""
        if len(self.lines) > self.max_lines:
            raise LineLimitReachedException(self.id, self.max_lines)
        if [line.position for line in self.lines] != list(range(len(self.lines))):
            raise ValidationException("Line positions must be contiguous", field="position")
        for line in self.lines:
            if not line.has_contiguous_order():
                raise ValidationException(
                    f"Event order of line {line.id} must be contiguous", field="order"
                )
            for event in line.events:
                forced = FORCED_POSITIONS.get(event.status)
                if forced is not None and event.position is not forced:
                    raise ValidationException(
                        f"Event {event.id} is {event.status.value} but sits at the "
                        f"{event.position.value}",
                        field="position",
                    )
        return True
