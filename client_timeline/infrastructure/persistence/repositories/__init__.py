""" Repository module for the persistence layer. """

from client_timeline.infrastructure.persistence.repositories.base import BaseRepository
from client_timeline.infrastructure.persistence.repositories.event_repo import EventRepository
from client_timeline.infrastructure.persistence.repositories.line_repo import LineRepository

__all__ = [
    "BaseRepository",
    "EventRepository",
    "LineRepository",
]
