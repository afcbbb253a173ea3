"""Tests for the TimelineLine entity"""

import pytest

from client_timeline.domain.entities import TimelineLine
from client_timeline.domain.enums import EventPosition, EventStatus, LineLoad, SegmentKind
from client_timeline.domain.exceptions import ResourceNotFoundException


@pytest.fixture
def line(make_line) -> TimelineLine:
    return make_line("line-1", 0, "evt-a", "evt-b", "evt-c")


class TestToggleStatus:
    @pytest.mark.parametrize(
        "status,position,expected_status,expected_position",
        [
            (EventStatus.CREATED, EventPosition.TOP, EventStatus.RESOLVED, EventPosition.TOP),
            (EventStatus.CREATED, EventPosition.BOTTOM, EventStatus.RESOLVED, EventPosition.TOP),
            (EventStatus.RESOLVED, EventPosition.TOP, EventStatus.NO_RESPONSE, EventPosition.BOTTOM),
            (EventStatus.RESOLVED, EventPosition.BOTTOM, EventStatus.NO_RESPONSE, EventPosition.BOTTOM),
            (EventStatus.NO_RESPONSE, EventPosition.BOTTOM, EventStatus.CREATED, EventPosition.BOTTOM),
            (EventStatus.NO_RESPONSE, EventPosition.TOP, EventStatus.CREATED, EventPosition.TOP),
        ],
    )
    def test_transition_table(
        self, make_event, status, position, expected_status, expected_position
    ):
        line = TimelineLine("line-1", "client-1", 0, [make_event("evt-1", status=status, position=position)])

        toggled = line.toggle_status("evt-1")[0]

        assert toggled.status is expected_status
        assert toggled.position is expected_position

    @pytest.mark.parametrize(
        "status,position",
        [
            (EventStatus.RESOLVED, EventPosition.TOP),
            (EventStatus.NO_RESPONSE, EventPosition.BOTTOM),
            (EventStatus.CREATED, EventPosition.BOTTOM),
        ],
    )
    def test_three_toggles_return_to_start(self, make_event, status, position):
        line = TimelineLine("line-1", "client-1", 0, [make_event("evt-1", status=status, position=position)])

        for _ in range(3):
            line = TimelineLine(line.id, line.timeline_id, 0, line.toggle_status("evt-1"))

        event = line.events[0]
        assert (event.status, event.position) == (status, position)

    def test_other_events_untouched(self, line):
        events = line.toggle_status("evt-b")

        assert [e.id for e in events] == ["evt-a", "evt-b", "evt-c"]
        assert events[0] == line.events[0]
        assert events[2] == line.events[2]
        assert [e.order for e in events] == [0, 1, 2]

    def test_unknown_event(self, line):
        with pytest.raises(ResourceNotFoundException):
            line.toggle_status("missing")


class TestSegments:
    def test_same_day_ignores_year(self, make_event):
        line = TimelineLine(
            "line-1",
            "client-1",
            0,
            [
                make_event("a", date="05/03", order=0),
                make_event("b", date="05/03/2019", order=1),
                make_event("c", date="06/03", order=2),
                make_event("d", date="--/--", order=3),
                make_event("e", date="--/--", order=4),
            ],
        )

        assert line.segments() == [
            SegmentKind.SAME_DAY,
            SegmentKind.DEFAULT,
            SegmentKind.DEFAULT,
            SegmentKind.DEFAULT,
        ]

    def test_unparseable_stored_date_is_default(self, make_event):
        line = TimelineLine(
            "line-1",
            "client-1",
            0,
            [make_event("a", date="99/99", order=0), make_event("b", date="99/99", order=1)],
        )
        assert line.segments() == [SegmentKind.DEFAULT]

    def test_single_event_has_no_segments(self, make_line):
        assert make_line("line-1", 0, "a").segments() == []


class TestPureMutators:
    def test_add_event_unshifts(self, line, make_event):
        events = line.add_event(make_event("evt-new", order=0))

        assert [e.id for e in events] == ["evt-new", "evt-a", "evt-b", "evt-c"]
        assert [e.order for e in events] == [0, 1, 2, 3]
        assert [e.id for e in line.events] == ["evt-a", "evt-b", "evt-c"]

    def test_remove_event_renumbers(self, line):
        events = line.remove_event("evt-a")

        assert [e.id for e in events] == ["evt-b", "evt-c"]
        assert [e.order for e in events] == [0, 1]
        assert line.event_count == 3

    def test_update_event_replaces_in_place(self, line):
        changed = line.events[1].with_changes(description="updated")
        events = line.update_event(changed)

        assert events[1].description == "updated"
        assert events[1].order == 1

    def test_construction_sorts_and_renumbers(self, make_event):
        line = TimelineLine(
            "line-1",
            "client-1",
            0,
            [make_event("b", order=7), make_event("a", order=2)],
        )
        assert [e.id for e in line.events] == ["a", "b"]
        assert line.has_contiguous_order()
        assert line.latest_event.id == "a"


class TestLoad:
    @pytest.mark.parametrize(
        "count,expected",
        [(0, LineLoad.LOW), (5, LineLoad.LOW), (6, LineLoad.MEDIUM), (9, LineLoad.MEDIUM), (10, LineLoad.HIGH)],
    )
    def test_load_level(self, make_line, count, expected):
        line = make_line("line-1", 0, *[f"evt-{i}" for i in range(count)])
        assert line.load_level is expected

    def test_is_full(self, make_line):
        assert not make_line("line-1", 0, *[f"evt-{i}" for i in range(19)]).is_full()
        assert make_line("line-1", 0, *[f"evt-{i}" for i in range(20)]).is_full()
        assert make_line("line-1", 0, "a", "b").is_full(max_events=2)
