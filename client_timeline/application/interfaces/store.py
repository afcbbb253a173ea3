"""
Store adapter interface (port).

The timeline service depends on this protocol, not on a database.
Following Dependency Inversion Principle (DIP).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from client_timeline.application.interfaces.change_feed import (ChangeCallback,
                                                                    Unsubscribe)
    from client_timeline.domain.entities import TimelineEvent, TimelineLine
    from client_timeline.domain.enums import ChangeTable


class ITimelineStore(Protocol):
    """Protocol for timeline persistence (DIP)"""

    async def list_lines(self, timeline_id: str) -> list[TimelineLine]:
        """Lines of a timeline ordered by position, without their events"""
        ...

    async def list_events(self, line_id: str) -> list[TimelineEvent]:
        """Events of a line ordered by order"""
        ...

    async def replace_events(
        self, line_id: str, events: list[TimelineEvent]
    ) -> list[TimelineEvent]:
        """Make ``events`` the full content of the line; returns the stored events"""
        ...

    async def create_line(self, timeline_id: str, position: int) -> TimelineLine:
        """Create an empty line"""
        ...

    async def delete_line(self, line_id: str) -> None:
        """Delete a line and its events"""
        ...

    def subscribe_to_changes(
        self,
        table: ChangeTable,
        callback: ChangeCallback,
        change_filter: Mapping[str, Any] | None = None,
    ) -> Unsubscribe:
        """Subscribe to change notifications for a table"""
        ...
