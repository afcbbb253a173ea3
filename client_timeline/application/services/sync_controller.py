"""
Sync controller.

Keeps one client's in-memory timeline consistent with the store by listening
to the change feed. Notifications caused by this client's own writes
(echoes) are dropped; bursts of peer notifications collapse into a single
reload after a debounce interval.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from client_timeline.domain.enums import ChangeTable, SyncState
from client_timeline.domain.exceptions import ChangeFeedException
from client_timeline.infrastructure.config.settings import Settings, get_settings
from client_timeline.shared.telemetry.logging import get_logger
from client_timeline.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from client_timeline.application.interfaces.change_feed import (ChangeNotification,
                                                                    Unsubscribe)
    from client_timeline.application.interfaces.store import ITimelineStore

logger = get_logger(__name__)

ReloadCallback = Callable[[], Awaitable[Any]]


class SyncController:
    """
    Per-timeline subscription state machine.

    States:
        idle: nothing pending
        local_write_in_flight: a local write is running or its suppression
            window is still open; notifications are treated as echoes
        reload_pending: a peer notification arrived and the debounce timer
            is running

    One instance per open timeline; no state is shared between instances.
    """

    def __init__(
        self,
        timeline_id: str,
        store: "ITimelineStore",
        reload: ReloadCallback,
        *,
        settings: Settings | None = None,
        suppression_window: float | None = None,
        debounce_interval: float | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.timeline_id = timeline_id
        self.store = store
        self._reload = reload
        self.suppression_window = (
            suppression_window if suppression_window is not None
            else settings.sync_suppression_window
        )
        self.debounce_interval = (
            debounce_interval if debounce_interval is not None
            else settings.sync_debounce_interval
        )

        self._unsubscribes: list["Unsubscribe"] = []
        self._writes_in_flight = 0
        self._suppression_handles: set[asyncio.TimerHandle] = set()
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._deferred_reload = False
        self._reload_task: asyncio.Task[None] | None = None
        self._reloads_in_flight = 0
        self._reload_requested = False
        self._closed = True

        self.reload_count = 0
        self.dropped_echoes = 0

    @property
    def state(self) -> SyncState:
        if self._writes_in_flight:
            return SyncState.LOCAL_WRITE_IN_FLIGHT
        if self._debounce_handle is not None:
            return SyncState.RELOAD_PENDING
        return SyncState.IDLE

    @property
    def is_running(self) -> bool:
        return not self._closed

    # Subscription lifecycle

    def start(self) -> None:
        """Subscribe to line and event changes of this timeline"""
        if not self._closed:
            return
        self._closed = False
        self._subscribe()
        logger.info("Sync started for timeline %s", self.timeline_id)

    async def stop(self) -> None:
        """Unsubscribe and cancel every pending timer and reload"""
        self._closed = True
        self._unsubscribe_all()
        self._cancel_debounce()
        for handle in self._suppression_handles:
            handle.cancel()
        self._suppression_handles.clear()
        self._writes_in_flight = 0
        self._deferred_reload = False

        task, self._reload_task = self._reload_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Sync stopped for timeline %s", self.timeline_id)

    async def resubscribe(self) -> None:
        """
        Recover from a dropped change feed.

        Notifications may have been lost while the feed was down, so a
        full reload follows the new subscription.
        """
        if self._closed:
            return
        self._unsubscribe_all()
        self._subscribe()
        logger.info("Resubscribed to changes for timeline %s", self.timeline_id)
        await self.reload_now()

    async def __aenter__(self) -> "SyncController":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def _subscribe(self) -> None:
        change_filter = {"timeline_id": self.timeline_id}
        for table in ChangeTable:
            self._unsubscribes.append(
                self.store.subscribe_to_changes(table, self._on_change, change_filter)
            )

    def _unsubscribe_all(self) -> None:
        unsubscribes, self._unsubscribes = self._unsubscribes, []
        for unsubscribe in unsubscribes:
            try:
                unsubscribe()
            except ChangeFeedException as e:
                logger.warning("Failed to unsubscribe timeline %s: %s", self.timeline_id, e)

    # Local writes

    @asynccontextmanager
    async def local_write(self) -> AsyncIterator[None]:
        """
        Mark a local write in flight.

        Usage:
            async with sync.local_write():
                await store.replace_events(line_id, events)

        The suppression window closes ``suppression_window`` seconds after a
        successful write, or immediately if the write raises.
        """
        self._begin_local_write()
        try:
            yield
        except BaseException:
            self._end_local_write()
            raise
        self._schedule_window_close()

    def _begin_local_write(self) -> None:
        self._writes_in_flight += 1
        if self._debounce_handle is not None:
            # A peer change is pending; re-arm it once the write settles
            self._cancel_debounce()
            self._deferred_reload = True
        elif self._reloads_in_flight:
            # The running reload read the store before this write and gets
            # discarded; the peer change it was fetching is reloaded afterwards
            self._deferred_reload = True

    def _schedule_window_close(self) -> None:
        if self._closed:
            self._end_local_write()
            return

        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle | None = None

        def close_window() -> None:
            self._suppression_handles.discard(handle)  # type: ignore[arg-type]
            self._end_local_write()

        handle = loop.call_later(self.suppression_window, close_window)
        self._suppression_handles.add(handle)

    def _end_local_write(self) -> None:
        self._writes_in_flight = max(0, self._writes_in_flight - 1)
        if self._writes_in_flight == 0 and self._deferred_reload and not self._closed:
            self._deferred_reload = False
            self._arm_debounce()

    # Notifications

    def _on_change(self, notification: "ChangeNotification") -> None:
        if self._closed:
            return

        if self._writes_in_flight:
            self.dropped_echoes += 1
            logger.debug(
                "Dropped echo %s/%s for timeline %s",
                notification.table.value,
                notification.action.value,
                self.timeline_id,
            )
            return

        logger.debug(
            "Change %s/%s for timeline %s; reload scheduled",
            notification.table.value,
            notification.action.value,
            self.timeline_id,
        )
        self._arm_debounce()

    def _arm_debounce(self) -> None:
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.debounce_interval, self._on_debounce_expired)

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _on_debounce_expired(self) -> None:
        self._debounce_handle = None
        if self._closed:
            return

        if self._reload_task is not None and not self._reload_task.done():
            self._reload_requested = True
            return
        self._reload_task = asyncio.get_running_loop().create_task(self._run_reloads())

    async def _run_reloads(self) -> None:
        while True:
            self._reload_requested = False
            try:
                await self._do_reload()
            except Exception:
                logger.exception("Background reload failed for timeline %s", self.timeline_id)
            if self._closed or not self._reload_requested:
                return

    # Reloads

    @traced("timeline.sync.reload")
    async def _do_reload(self) -> None:
        add_span_attributes(timeline_id=self.timeline_id)
        self._reloads_in_flight += 1
        try:
            await self._reload()
        finally:
            self._reloads_in_flight -= 1
        self.reload_count += 1
        logger.debug("Reloaded timeline %s (%d reloads)", self.timeline_id, self.reload_count)

    async def reload_now(self) -> None:
        """Manual reload, always available when the feed is unreliable"""
        self._cancel_debounce()
        self._deferred_reload = False
        await self._do_reload()
