from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from client_timeline.domain.entities import TimelineLine
from client_timeline.infrastructure.persistence.database import Base
from client_timeline.infrastructure.persistence.models.mixins import (CreatedAtMixin, CuidMixin,
                                                                    UpdatedAtMixin)


class Line(CuidMixin, CreatedAtMixin, UpdatedAtMixin, Base):
    """
    One line of a client timeline.

    Inherits from:
        - CuidMixin: CUID primary key
        - CreatedAtMixin, UpdatedAtMixin: timestamps

    Positions are dense within a timeline; deleting a line shifts the
    lines after it.
    """

    __tablename__ = "timeline_line"

    timeline_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("ix_timeline_line_timeline_position", "timeline_id", "position"),)

    def to_entity(self) -> TimelineLine:
        return TimelineLine(
            id=self.id,
            timeline_id=self.timeline_id,
            position=self.position,
            created_at=self.created_at,
        )
