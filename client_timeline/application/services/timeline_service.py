"""
Timeline service.

Orchestrates every mutation of one client's timeline: the change is computed
in memory, applied optimistically, then persisted through the store's
replace-events / line primitives inside the sync controller's local-write
window. A failed write discards the optimistic state and reloads from the
store.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, nullcontext
from copy import copy
from typing import TYPE_CHECKING, Any

from client_timeline.application.schemas.event import EventCreate, EventUpdate, parse_input
from client_timeline.application.services.snapshot import TimelineSnapshot
from client_timeline.application.services.sync_controller import SyncController
from client_timeline.domain.entities import (ConsolidationPlan, Timeline, TimelineEvent,
                                             TimelineLine, renumber)
from client_timeline.domain.exceptions import PersistenceException
from client_timeline.domain.value_objects.icons import IconSet
from client_timeline.infrastructure.config.settings import Settings, get_settings
from client_timeline.shared.telemetry.logging import get_logger
from client_timeline.shared.telemetry.tracing import (add_span_attributes, add_span_event,
                                                      traced)

if TYPE_CHECKING:
    from client_timeline.application.interfaces.store import ITimelineStore

logger = get_logger(__name__)


class TimelineService:
    """Timeline aggregate service following DIP - depends on the store protocol"""

    def __init__(
        self,
        timeline_id: str,
        store: "ITimelineStore",
        *,
        organization_scope: str | None = None,
        icon_set: IconSet | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self.icon_set = icon_set or IconSet.default()
        self.organization_scope = organization_scope
        self.timeline = Timeline(
            timeline_id, organization_scope, [], max_lines=self.settings.max_lines
        )
        self.sync: SyncController | None = None
        # Bumped when a local write starts; a load that straddles a write is stale
        self._write_generation = 0
        self._writes_active = 0

    @property
    def timeline_id(self) -> str:
        return self.timeline.id

    def create_sync_controller(self, **kwargs: Any) -> SyncController:
        """Build the sync controller that reloads this service on peer changes"""
        self.sync = SyncController(
            self.timeline_id, self.store, self.load, settings=self.settings, **kwargs
        )
        return self.sync

    # Reads

    @traced("timeline.load")
    async def load(self) -> Timeline:
        """
        Replace the in-memory timeline with the store's state.

        If a local write was running when the read started, or started before
        it finished, the read may predate that write; it is discarded and the
        current in-memory timeline is returned unchanged.
        """
        add_span_attributes(timeline_id=self.timeline_id)
        generation = self._write_generation
        overlapped = self._writes_active > 0
        lines = await self.store.list_lines(self.timeline_id)
        for line in lines:
            line.events = renumber(await self.store.list_events(line.id))

        if overlapped or generation != self._write_generation:
            logger.info("Discarded reload of timeline %s: a local write overlapped it", self.timeline_id)
            return self.timeline

        self.timeline = Timeline(
            self.timeline_id, self.organization_scope, lines, max_lines=self.settings.max_lines
        )
        logger.debug("Loaded timeline %s with %d lines", self.timeline_id, len(lines))
        return self.timeline

    def snapshot(self) -> TimelineSnapshot:
        """Read-only copy for report generation"""
        return TimelineSnapshot.from_timeline(self.timeline)

    # Persistence boundary

    def _write_window(self):
        return self.sync.local_write() if self.sync is not None else nullcontext()

    def _checkpoint(self) -> Timeline:
        lines = [copy(line) for line in self.timeline.lines]
        for line in lines:
            line.events = list(line.events)
        return Timeline(
            self.timeline.id, self.timeline.organization_scope, lines, self.timeline.max_lines
        )

    @asynccontextmanager
    async def _tracking_write(self) -> AsyncIterator[None]:
        self._write_generation += 1
        self._writes_active += 1
        try:
            yield
        finally:
            self._writes_active -= 1

    @asynccontextmanager
    async def _persisting(self, action: str) -> AsyncIterator[None]:
        """
        Run store writes; on failure roll back to the checkpoint and reload.

        Raises:
            PersistenceException: If any write in the block fails
        """
        checkpoint = self._checkpoint()
        try:
            async with self._write_window(), self._tracking_write():
                yield
        except Exception as e:
            self.timeline = checkpoint
            logger.warning(
                "Failed to %s for timeline %s: %s; reloading from store",
                action,
                self.timeline_id,
                e,
            )
            try:
                await self.load()
            except Exception:
                logger.exception("Reload after failed write failed for timeline %s", self.timeline_id)
            raise PersistenceException(
                f"Failed to {action}", {"timeline_id": self.timeline_id, "reason": str(e)}
            ) from e

    async def _store_events(self, line_id: str, events: list[TimelineEvent]) -> list[TimelineEvent]:
        self.timeline.set_line_events(line_id, events)
        stored = await self.store.replace_events(line_id, renumber(events))
        self.timeline.set_line_events(line_id, stored)
        return self.timeline.get_line(line_id).events

    @traced("timeline.replace_line_events")
    async def replace_line_events(
        self, line_id: str, events: list[TimelineEvent]
    ) -> list[TimelineEvent]:
        """
        Make ``events`` the full, authoritative content of a line.

        The only way events reach the store; orders are renumbered from
        list order and temporary ids are replaced by the store's ids.
        """
        add_span_attributes(timeline_id=self.timeline_id, line_id=line_id)
        self.timeline.get_line(line_id)
        async with self._persisting("save line events"):
            stored = await self._store_events(line_id, events)
        logger.info("Saved %d events on line %s", len(stored), line_id)
        return stored

    # Event operations

    async def add_event(
        self, line_id: str | None, data: EventCreate | dict[str, Any]
    ) -> TimelineEvent:
        """
        Add a new event at the front of a line.

        With ``line_id=None`` the first line is used, created if the timeline
        has none. A full line overflows into a new line.
        """
        payload = parse_input(EventCreate, data)
        if line_id is not None:
            line: TimelineLine | None = self.timeline.get_line(line_id)
        else:
            line = self.timeline.lines[0] if self.timeline.lines else None

        full = line is not None and line.is_full(self.settings.max_events_per_line)
        event = TimelineEvent.create(
            icon=payload.icon,
            date=payload.date,
            description=payload.description,
            time=payload.time,
            icon_size=payload.icon_size or self.settings.default_icon_size,
            icon_set=self.icon_set,
            latest=line.latest_event if line is not None and not full else None,
            max_description_length=self.settings.description_max_length,
        )

        if line is None or full:
            self.timeline.ensure_can_add_line()
            if line is not None:
                logger.info("Line %s is full; starting a new line", line.id)
            line = await self._create_line()

        stored = await self.replace_line_events(line.id, line.add_event(event))
        return stored[0]

    async def update_event(
        self, line_id: str, event_id: str, data: EventUpdate | dict[str, Any]
    ) -> TimelineEvent:
        payload = parse_input(EventUpdate, data)
        line = self.timeline.get_line(line_id)
        index = line.index_of(event_id)
        updated = line.events[index].with_changes(
            icon_set=self.icon_set,
            max_description_length=self.settings.description_max_length,
            **payload.changes(),
        )
        stored = await self.replace_line_events(line_id, line.update_event(updated))
        return stored[index]

    async def toggle_status(self, line_id: str, event_id: str) -> TimelineEvent:
        """Advance an event along the created -> resolved -> no_response cycle"""
        line = self.timeline.get_line(line_id)
        index = line.index_of(event_id)
        stored = await self.replace_line_events(line_id, line.toggle_status(event_id))
        return stored[index]

    @traced("timeline.delete_event")
    async def delete_event(self, line_id: str, event_id: str) -> ConsolidationPlan:
        """
        Delete an event, consolidating the line if it ends up empty.

        Returns:
            The plan that was applied (which line survived, which was removed)
        """
        add_span_attributes(timeline_id=self.timeline_id, line_id=line_id)
        plan = self.timeline.plan_event_deletion(line_id, event_id)

        async with self._persisting("delete event"):
            await self._store_events(plan.persist_line_id, plan.persist_events)
            if plan.delete_line_id is not None:
                self.timeline.remove_line(plan.delete_line_id)
                await self.store.delete_line(plan.delete_line_id)

        if plan.merges:
            add_span_event(
                "line_consolidated",
                {"deleted_line_id": plan.delete_line_id, "target_line_id": plan.persist_line_id},
            )
            logger.info(
                "Consolidated emptied line %s into %s", plan.delete_line_id, plan.persist_line_id
            )
        return plan

    # Line operations

    async def _create_line(self) -> TimelineLine:
        self.timeline.ensure_can_add_line()
        async with self._persisting("create line"):
            line = await self.store.create_line(self.timeline_id, self.timeline.next_position)
            self.timeline.append_line(line)
        return line

    @traced("timeline.add_line")
    async def add_line(self, *, with_placeholder: bool = True) -> TimelineLine:
        """
        Append a line at the end of the timeline.

        The new line is seeded with a placeholder event unless
        ``with_placeholder`` is False.

        Raises:
            LineLimitReachedException: If the timeline is already at the cap
        """
        add_span_attributes(timeline_id=self.timeline_id)
        self.timeline.ensure_can_add_line()
        line = await self._create_line()
        if with_placeholder:
            placeholder = TimelineEvent.create(
                icon=self.settings.placeholder_icon,
                description=self.settings.placeholder_description,
                icon_size=self.settings.default_icon_size,
            )
            await self.replace_line_events(line.id, [placeholder])
        logger.info("Added line %s at position %d", line.id, line.position)
        return line

    @traced("timeline.delete_line")
    async def delete_line(self, line_id: str) -> None:
        """Delete a line and its events; the sole line cannot be deleted"""
        add_span_attributes(timeline_id=self.timeline_id, line_id=line_id)
        self.timeline.ensure_can_delete_line(line_id)
        async with self._persisting("delete line"):
            self.timeline.remove_line(line_id)
            await self.store.delete_line(line_id)
        logger.info("Deleted line %s", line_id)
