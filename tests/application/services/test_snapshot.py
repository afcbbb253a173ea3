"""Tests for timeline snapshots and metrics"""

import pytest
from pydantic import ValidationError

from client_timeline.application.services.snapshot import TimelineSnapshot
from client_timeline.domain.entities import Timeline, TimelineLine
from client_timeline.domain.enums import EventStatus, SegmentKind


@pytest.fixture
def timeline(make_event) -> Timeline:
    return Timeline(
        "client-1",
        "org-1",
        [
            TimelineLine(
                "line-0",
                "client-1",
                0,
                [
                    make_event("a", date="05/03", status=EventStatus.RESOLVED, order=0),
                    make_event("b", date="05/03/2019", status=EventStatus.NO_RESPONSE, order=1),
                ],
            ),
            TimelineLine("line-1", "client-1", 1, [make_event("c", status=EventStatus.CREATED)]),
        ],
    )


def test_snapshot_copies_lines_and_segments(timeline):
    snapshot = TimelineSnapshot.from_timeline(timeline)

    assert snapshot.timeline_id == "client-1"
    assert snapshot.organization_scope == "org-1"
    assert [line.id for line in snapshot.lines] == ["line-0", "line-1"]
    assert snapshot.lines[0].segments == (SegmentKind.SAME_DAY,)
    assert [event.id for event in snapshot.events] == ["a", "b", "c"]


def test_snapshot_is_detached_from_timeline(timeline):
    snapshot = TimelineSnapshot.from_timeline(timeline)

    timeline.remove_line("line-1")

    assert len(snapshot.lines) == 2
    with pytest.raises(ValidationError):
        snapshot.timeline_id = "other"


def test_metrics(timeline):
    metrics = TimelineSnapshot.from_timeline(timeline).metrics()

    assert metrics.total_events == 3
    assert metrics.created_count == 1
    assert metrics.resolved_count == 1
    assert metrics.no_response_count == 1
    assert metrics.response_rate == 33.3
    assert metrics.no_response_rate == 33.3
    assert metrics.has_no_response
    assert metrics.line_count == 2
    assert metrics.avg_events_per_line == 1.5


def test_metrics_empty_timeline():
    metrics = TimelineSnapshot.from_timeline(Timeline("client-1")).metrics()

    assert metrics.total_events == 0
    assert metrics.response_rate == 0.0
    assert metrics.avg_events_per_line == 0.0
    assert not metrics.has_no_response
