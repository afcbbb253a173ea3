"""Read-only timeline snapshot consumed by risk analysis"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from client_timeline.domain.entities import Timeline, TimelineLine
from client_timeline.domain.enums import EventPosition, EventStatus, SegmentKind


class EventSnapshot(BaseModel):
    id: str
    icon: str
    date: str
    time: str | None = None
    description: str
    position: EventPosition
    status: EventStatus
    order: int
    created_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)


class LineSnapshot(BaseModel):
    id: str
    position: int
    events: tuple[EventSnapshot, ...]
    segments: tuple[SegmentKind, ...]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_line(cls, line: TimelineLine) -> "LineSnapshot":
        return cls(
            id=line.id,
            position=line.position,
            events=tuple(EventSnapshot.model_validate(event) for event in line.events),
            segments=tuple(line.segments()),
        )


class TimelineMetrics(BaseModel):
    """Counts and rates over every event of a timeline"""

    total_events: int
    created_count: int
    resolved_count: int
    no_response_count: int
    response_rate: float
    no_response_rate: float
    has_no_response: bool
    line_count: int
    avg_events_per_line: float

    model_config = ConfigDict(frozen=True)


class TimelineSnapshot(BaseModel):
    """
    Immutable copy of a timeline.

    Report generators read this instead of the live aggregate so a reload
    in the middle of an analysis cannot change what they see.
    """

    timeline_id: str
    organization_scope: str | None = None
    taken_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    lines: tuple[LineSnapshot, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_timeline(cls, timeline: Timeline) -> "TimelineSnapshot":
        return cls(
            timeline_id=timeline.id,
            organization_scope=timeline.organization_scope,
            lines=tuple(LineSnapshot.from_line(line) for line in timeline.lines),
        )

    @property
    def events(self) -> list[EventSnapshot]:
        return [event for line in self.lines for event in line.events]

    def metrics(self) -> TimelineMetrics:
        events = self.events
        total = len(events)
        counts = {status: 0 for status in EventStatus}
        for event in events:
            counts[event.status] += 1

        def rate(count: int) -> float:
            return round(count / total * 100, 1) if total else 0.0

        return TimelineMetrics(
            total_events=total,
            created_count=counts[EventStatus.CREATED],
            resolved_count=counts[EventStatus.RESOLVED],
            no_response_count=counts[EventStatus.NO_RESPONSE],
            response_rate=rate(counts[EventStatus.RESOLVED]),
            no_response_rate=rate(counts[EventStatus.NO_RESPONSE]),
            has_no_response=counts[EventStatus.NO_RESPONSE] > 0,
            line_count=len(self.lines),
            avg_events_per_line=round(total / len(self.lines), 1) if self.lines else 0.0,
        )
