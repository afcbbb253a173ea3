from datetime import UTC

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from client_timeline.domain.entities import TimelineEvent
from client_timeline.domain.enums import EventPosition, EventStatus
from client_timeline.infrastructure.persistence.database import Base
from client_timeline.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


def _in_clause(column: str, values: list[str]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class Event(CuidMixin, CreatedAtMixin, Base):
    """
    One event on a timeline line.

    Inherits from:
        - CuidMixin: CUID primary key
        - CreatedAtMixin: creation time, carried over when rows are replaced

    Note: A line's events are always written as a full set, so rows are
    replaced rather than updated.
    """

    __tablename__ = "timeline_event"

    line_id: Mapped[str] = mapped_column(
        String, ForeignKey("timeline_line.id", ondelete="CASCADE"), nullable=False, index=True
    )
    icon: Mapped[str] = mapped_column(String(16), nullable=False)
    icon_size: Mapped[str] = mapped_column(String(32), nullable=False, default="text-2xl")
    event_date: Mapped[str] = mapped_column(String(16), nullable=False, default="--/--")
    event_time: Mapped[str | None] = mapped_column(String(5))
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    position: Mapped[str] = mapped_column(String(8), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    event_order: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("line_id", "event_order", name="uq_timeline_event_line_order"),
        Index("ix_timeline_event_line_order", "line_id", "event_order"),
        CheckConstraint(_in_clause("position", EventPosition.values()), name="ck_timeline_event_position"),
        CheckConstraint(_in_clause("status", EventStatus.values()), name="ck_timeline_event_status"),
        CheckConstraint("event_order >= 0", name="ck_timeline_event_order"),
    )

    @classmethod
    def from_entity(cls, line_id: str, event: TimelineEvent, event_id: str | None = None) -> "Event":
        return cls(
            id=event_id or event.id,
            line_id=line_id,
            icon=event.icon,
            icon_size=event.icon_size,
            event_date=event.date,
            event_time=event.time,
            description=event.description,
            position=event.position.value,
            status=event.status.value,
            event_order=event.order,
            created_at=event.created_at,
        )

    def to_entity(self) -> TimelineEvent:
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return TimelineEvent(
            id=self.id,
            icon=self.icon,
            date=self.event_date,
            description=self.description or "",
            position=EventPosition(self.position),
            status=EventStatus(self.status),
            order=self.event_order,
            created_at=created_at,
            time=self.event_time,
            icon_size=self.icon_size,
        )
