from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from client_timeline.infrastructure.persistence.models.line import Line
from client_timeline.infrastructure.persistence.repositories.base import BaseRepository


class LineRepository(BaseRepository[Line]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Line)

    async def get_by_timeline(self, timeline_id: str) -> list[Line]:
        """Get the lines of a timeline ordered by position"""
        return await self.list_where(
            Line.timeline_id == timeline_id, order_by=(Line.position, Line.created_at)
        )

    async def create_line(self, timeline_id: str, position: int) -> Line:
        return await self.create(Line(timeline_id=timeline_id, position=position))

    async def shift_positions_after(self, timeline_id: str, position: int) -> int:
        """Close the gap left by a deleted line; returns the number of lines moved"""
        result = await self.db.execute(
            update(Line)
            .where(Line.timeline_id == timeline_id)
            .where(Line.position > position)
            .values(position=Line.position - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
