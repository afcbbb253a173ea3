"""
SQLAlchemy implementation of the timeline store.

Every write runs in its own session and transaction; the change feed is
notified only after the transaction commits.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from client_timeline.application.interfaces.change_feed import ChangeNotification
from client_timeline.domain.enums import ChangeAction, ChangeTable
from client_timeline.infrastructure.exceptions import LineNotFoundError, StoreWriteError
from client_timeline.infrastructure.persistence.repositories import (EventRepository,
                                                                     LineRepository)
from client_timeline.shared.telemetry.logging import get_logger
from client_timeline.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from client_timeline.application.interfaces.change_feed import (ChangeCallback,
                                                                    IChangeFeed, Unsubscribe)
    from client_timeline.domain.entities import TimelineEvent, TimelineLine

logger = get_logger(__name__)


class SqlAlchemyTimelineStore:
    """Timeline store over async SQLAlchemy, publishing to a change feed"""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], change_feed: IChangeFeed
    ) -> None:
        self.session_factory = session_factory
        self.change_feed = change_feed

    # Reads

    async def list_lines(self, timeline_id: str) -> list[TimelineLine]:
        async with self.session_factory() as session:
            rows = await LineRepository(session).get_by_timeline(timeline_id)
            return [row.to_entity() for row in rows]

    async def list_events(self, line_id: str) -> list[TimelineEvent]:
        async with self.session_factory() as session:
            rows = await EventRepository(session).get_by_line(line_id)
            return [row.to_entity() for row in rows]

    # Writes

    @traced("store.replace_events")
    async def replace_events(
        self, line_id: str, events: list[TimelineEvent]
    ) -> list[TimelineEvent]:
        """
        Replace the full event set of a line in one transaction.

        Raises:
            LineNotFoundError: If the line does not exist
            StoreWriteError: If the transaction fails; prior rows are kept
        """
        add_span_attributes(line_id=line_id, event_count=len(events))
        try:
            async with self.session_factory() as session, session.begin():
                line = await LineRepository(session).get_by_id(line_id)
                if line is None:
                    raise LineNotFoundError(line_id)
                timeline_id = line.timeline_id

                repo = EventRepository(session)
                removed = await repo.delete_by_line(line_id)
                rows = await repo.insert_events(line_id, events)
                stored = [row.to_entity() for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to replace events of line {line_id}: {e}")
            raise StoreWriteError("replace_events", str(e), line_id) from e

        logger.debug("Replaced %d events with %d on line %s", removed, len(stored), line_id)
        await self._publish(ChangeTable.EVENTS, ChangeAction.UPDATE, timeline_id, line_id)
        return stored

    @traced("store.create_line")
    async def create_line(self, timeline_id: str, position: int) -> TimelineLine:
        add_span_attributes(timeline_id=timeline_id, position=position)
        try:
            async with self.session_factory() as session, session.begin():
                row = await LineRepository(session).create_line(timeline_id, position)
                line = row.to_entity()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create line for timeline {timeline_id}: {e}")
            raise StoreWriteError("create_line", str(e)) from e

        await self._publish(ChangeTable.LINES, ChangeAction.INSERT, timeline_id, line.id)
        return line

    @traced("store.delete_line")
    async def delete_line(self, line_id: str) -> None:
        """
        Delete a line and its events, shifting later lines down by one.

        Raises:
            LineNotFoundError: If the line does not exist
            StoreWriteError: If the transaction fails
        """
        add_span_attributes(line_id=line_id)
        try:
            async with self.session_factory() as session, session.begin():
                lines = LineRepository(session)
                line = await lines.get_by_id(line_id)
                if line is None:
                    raise LineNotFoundError(line_id)
                timeline_id, position = line.timeline_id, line.position

                await EventRepository(session).delete_by_line(line_id)
                await lines.delete(line)
                await lines.shift_positions_after(timeline_id, position)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete line {line_id}: {e}")
            raise StoreWriteError("delete_line", str(e), line_id) from e

        await self._publish(ChangeTable.LINES, ChangeAction.DELETE, timeline_id, line_id)

    # Change notifications

    def subscribe_to_changes(
        self,
        table: ChangeTable,
        callback: ChangeCallback,
        change_filter: Mapping[str, Any] | None = None,
    ) -> Unsubscribe:
        return self.change_feed.subscribe(table, callback, change_filter)

    async def _publish(
        self, table: ChangeTable, action: ChangeAction, timeline_id: str, line_id: str
    ) -> None:
        await self.change_feed.publish(
            ChangeNotification(table=table, action=action, timeline_id=timeline_id, line_id=line_id)
        )
