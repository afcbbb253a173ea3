"""Tests for SyncController echo suppression and debouncing"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from client_timeline.application.interfaces.change_feed import ChangeNotification
from client_timeline.application.services.sync_controller import SyncController
from client_timeline.domain.enums import ChangeAction, ChangeTable, SyncState
from client_timeline.infrastructure.messaging.memory_feed import InMemoryChangeFeed

WINDOW = 0.05
SETTLE = 0.2


@pytest.fixture
def feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def store(feed):
    """Store stand-in; the controller only subscribes through it"""
    store = MagicMock()
    store.subscribe_to_changes.side_effect = feed.subscribe
    return store


@pytest.fixture
def reload():
    return AsyncMock()


@pytest.fixture
async def sync(store, reload, settings):
    controller = SyncController(
        "client-1",
        store,
        reload,
        settings=settings,
        suppression_window=WINDOW,
        debounce_interval=WINDOW,
    )
    controller.start()
    yield controller
    await controller.stop()


def notify(feed, timeline_id="client-1", table=ChangeTable.EVENTS):
    return feed.dispatch(
        ChangeNotification(table=table, action=ChangeAction.UPDATE, timeline_id=timeline_id, line_id="line-1")
    )


@pytest.mark.asyncio
async def test_start_subscribes_to_both_tables(sync, store, feed):
    assert feed.subscriber_count(ChangeTable.LINES) == 1
    assert feed.subscriber_count(ChangeTable.EVENTS) == 1
    for call in store.subscribe_to_changes.call_args_list:
        assert call.args[2] == {"timeline_id": "client-1"}


@pytest.mark.asyncio
async def test_burst_of_notifications_reloads_once(sync, feed, reload):
    notify(feed)
    notify(feed, table=ChangeTable.LINES)
    notify(feed)
    assert sync.state is SyncState.RELOAD_PENDING

    await asyncio.sleep(SETTLE)

    reload.assert_awaited_once()
    assert sync.reload_count == 1
    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_other_timelines_are_ignored(sync, feed, reload):
    assert notify(feed, timeline_id="client-2") == 0

    await asyncio.sleep(SETTLE)
    reload.assert_not_awaited()


@pytest.mark.asyncio
async def test_echo_inside_window_is_dropped(sync, feed, reload):
    async with sync.local_write():
        notify(feed)
    assert sync.state is SyncState.LOCAL_WRITE_IN_FLIGHT
    notify(feed)

    await asyncio.sleep(SETTLE)

    assert sync.dropped_echoes == 2
    reload.assert_not_awaited()
    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_notification_after_window_reloads(sync, feed, reload):
    async with sync.local_write():
        pass
    await asyncio.sleep(SETTLE)

    notify(feed)
    await asyncio.sleep(SETTLE)

    reload.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_write_closes_window_immediately(sync):
    with pytest.raises(RuntimeError):
        async with sync.local_write():
            raise RuntimeError("boom")

    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_overlapping_writes_keep_window_open(sync):
    sync.suppression_window = 0.2
    async with sync.local_write():
        pass
    await asyncio.sleep(0.1)
    async with sync.local_write():
        pass

    # First window has closed, second is still open
    await asyncio.sleep(0.15)
    assert sync.state is SyncState.LOCAL_WRITE_IN_FLIGHT

    await asyncio.sleep(SETTLE)
    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_pending_reload_deferred_until_write_settles(sync, feed, reload):
    notify(feed)
    assert sync.state is SyncState.RELOAD_PENDING

    async with sync.local_write():
        assert sync.state is SyncState.LOCAL_WRITE_IN_FLIGHT
    await asyncio.sleep(WINDOW / 2)
    reload.assert_not_awaited()

    await asyncio.sleep(SETTLE)
    reload.assert_awaited_once()


@pytest.mark.asyncio
async def test_stop_cancels_pending_reload(sync, feed, reload):
    notify(feed)

    await sync.stop()
    await asyncio.sleep(SETTLE)

    reload.assert_not_awaited()
    assert feed.subscriber_count() == 0
    assert not sync.is_running
    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_reload_failure_is_logged(store, feed, settings, caplog):
    reload = AsyncMock(side_effect=RuntimeError("store down"))
    async with SyncController(
        "client-1", store, reload, settings=settings, suppression_window=WINDOW, debounce_interval=WINDOW
    ) as sync:
        with caplog.at_level(logging.ERROR):
            notify(feed)
            await asyncio.sleep(SETTLE)

    reload.assert_awaited_once()
    assert sync.reload_count == 0
    assert "Background reload failed" in caplog.text


@pytest.mark.asyncio
async def test_resubscribe_reloads_once(sync, feed, reload):
    await sync.resubscribe()

    reload.assert_awaited_once()
    assert feed.subscriber_count() == 2


@pytest.mark.asyncio
async def test_reload_now_cancels_debounce(sync, feed, reload):
    notify(feed)

    await sync.reload_now()
    await asyncio.sleep(SETTLE)

    reload.assert_awaited_once()
    assert sync.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_write_during_running_reload_reloads_again(store, feed, settings):
    started = asyncio.Event()

    async def slow_reload():
        started.set()
        await asyncio.sleep(WINDOW * 2)

    reload = AsyncMock(side_effect=slow_reload)
    async with SyncController(
        "client-1", store, reload, settings=settings, suppression_window=WINDOW, debounce_interval=WINDOW
    ) as sync:
        notify(feed)
        await started.wait()

        async with sync.local_write():
            pass
        await asyncio.sleep(SETTLE * 2)

        assert reload.await_count == 2
        assert sync.state is SyncState.IDLE
