from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from client_timeline.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Base repository for the timeline tables.

    Repositories only flush; the store owns the session and decides when
    the transaction commits.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: str) -> ModelType | None:
        # Cast to Any for SQLAlchemy dynamic attribute access (id comes from CuidMixin)
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == id))
        return result.scalar_one_or_none()

    async def list_where(self, *criteria: ColumnElement[bool], order_by: Any = ()) -> list[ModelType]:
        """Rows matching every criterion, in ``order_by`` order"""
        order = order_by if isinstance(order_by, tuple) else (order_by,)
        result = await self.db.execute(select(self.model).where(*criteria).order_by(*order))
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Insert a row and load its database-side defaults"""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    async def delete_where(self, *criteria: ColumnElement[bool]) -> int:
        """Bulk delete without loading rows; returns the number removed"""
        result = await self.db.execute(
            delete(self.model).where(*criteria).execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
