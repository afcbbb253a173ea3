from sqlalchemy.ext.asyncio import AsyncSession

from client_timeline.domain.entities import TimelineEvent
from client_timeline.infrastructure.persistence.models.event import Event
from client_timeline.infrastructure.persistence.repositories.base import BaseRepository
from client_timeline.shared.utils.generators import generate_cuid


class EventRepository(BaseRepository[Event]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Event)

    async def get_by_line(self, line_id: str) -> list[Event]:
        """Get the events of a line ordered by event_order"""
        return await self.list_where(Event.line_id == line_id, order_by=Event.event_order)

    async def delete_by_line(self, line_id: str) -> int:
        """Delete every event of a line; returns the number of rows removed"""
        return await self.delete_where(Event.line_id == line_id)

    async def insert_events(self, line_id: str, events: list[TimelineEvent]) -> list[Event]:
        """
        Insert a full set of events for a line.

        Temporary ids are swapped for fresh CUIDs; every other id is kept.
        """
        rows = [
            Event.from_entity(line_id, event, generate_cuid() if event.is_temporary else None)
            for event in events
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return rows
