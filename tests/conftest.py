"""Shared test fixtures for pytest"""
from datetime import UTC, datetime

import pytest

from client_timeline.application.services.timeline_service import TimelineService
from client_timeline.domain.entities import TimelineEvent, TimelineLine
from client_timeline.domain.enums import EventPosition, EventStatus
from client_timeline.infrastructure.config.settings import Settings
from client_timeline.infrastructure.messaging.memory_feed import InMemoryChangeFeed
from client_timeline.infrastructure.persistence.database import (create_engine,
                                                                 create_session_factory,
                                                                 create_tables)
from client_timeline.infrastructure.persistence.store import SqlAlchemyTimelineStore

# In-memory SQLite shared by every session of one test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TIMELINE_ID = "client-1"


def _make_event(
    event_id: str,
    *,
    date: str = "--/--",
    status: EventStatus = EventStatus.CREATED,
    position: EventPosition = EventPosition.TOP,
    order: int = 0,
    icon: str = "💬",
    description: str = "",
) -> TimelineEvent:
    """Build a stored-looking event without going through validation"""
    return TimelineEvent(
        id=event_id,
        icon=icon,
        date=date,
        description=description or f"event {event_id}",
        position=position,
        status=status,
        order=order,
        created_at=datetime(2024, 3, 5, 12, 0, tzinfo=UTC),
    )


def _make_line(line_id: str, position: int, *event_ids: str, timeline_id: str = TIMELINE_ID) -> TimelineLine:
    return TimelineLine(
        id=line_id,
        timeline_id=timeline_id,
        position=position,
        events=[_make_event(event_id, order=index) for index, event_id in enumerate(event_ids)],
    )


@pytest.fixture
def make_event():
    return _make_event


@pytest.fixture
def make_line():
    return _make_line


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file"""
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        telemetry_enabled=False,
        sync_suppression_window_ms=50,
        sync_debounce_interval_ms=50,
    )


@pytest.fixture
async def test_engine(settings):
    """Create test database engine"""
    engine = create_engine(settings)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
def change_feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def store(session_factory, change_feed) -> SqlAlchemyTimelineStore:
    return SqlAlchemyTimelineStore(session_factory, change_feed)


@pytest.fixture
def service(store, settings) -> TimelineService:
    return TimelineService(TIMELINE_ID, store, organization_scope="org-1", settings=settings)
