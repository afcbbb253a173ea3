"""Tests for event input schemas"""

import pytest

from client_timeline.application.schemas import EventCreate, EventUpdate, parse_input
from client_timeline.domain.exceptions import ValidationException


def test_event_create_defaults():
    payload = parse_input(EventCreate, {"icon": " 💬 "})

    assert payload.icon == "💬"
    assert payload.date == "--/--"
    assert payload.description == ""
    assert payload.time is None


def test_existing_instance_passes_through():
    payload = EventCreate(icon="💬")
    assert parse_input(EventCreate, payload) is payload


@pytest.mark.parametrize(
    "data,field",
    [
        ({"icon": "💬", "date": "40/01"}, "date"),
        ({"icon": "💬", "time": "7pm"}, "time"),
        ({"icon": ""}, "icon"),
        ({"icon": "x" * 11}, "icon"),
        ({"icon": "💬", "colour": "red"}, "colour"),
        ({}, "icon"),
    ],
)
def test_invalid_input_names_field(data, field):
    with pytest.raises(ValidationException) as exc_info:
        parse_input(EventCreate, data)
    assert exc_info.value.details["field"] == field


def test_event_update_changes_only_set_fields():
    payload = parse_input(EventUpdate, {"description": "Done", "time": "09:15"})

    assert payload.changes() == {"description": "Done", "time": "09:15"}


@pytest.mark.parametrize("field,value", [("status", "resolved"), ("position", "bottom")])
def test_event_update_rejects_cycle_fields(field, value):
    with pytest.raises(ValidationException) as exc_info:
        parse_input(EventUpdate, {field: value})
    assert exc_info.value.details["field"] == field
