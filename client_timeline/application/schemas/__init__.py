"""Input schemas for timeline operations."""

from client_timeline.application.schemas.event import EventCreate, EventUpdate, parse_input

__all__ = ["EventCreate", "EventUpdate", "parse_input"]
