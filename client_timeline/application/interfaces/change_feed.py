"""
Change feed interfaces (ports).

A change feed reports mutations of the lines/events tables to every
subscribed client, including the client that made the write.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from client_timeline.domain.enums import ChangeAction, ChangeTable


@dataclass(frozen=True)
class ChangeNotification:
    """One mutation of the lines or events table"""

    table: ChangeTable
    action: ChangeAction
    timeline_id: str
    line_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        data["table"] = self.table.value
        data["action"] = self.action.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangeNotification":
        """Create from dictionary"""
        return cls(
            table=ChangeTable(data["table"]),
            action=ChangeAction(data["action"]),
            timeline_id=data["timeline_id"],
            line_id=data.get("line_id"),
        )

    def matches(self, change_filter: Mapping[str, Any] | None) -> bool:
        """Check every filter field against this notification"""
        if not change_filter:
            return True
        return all(getattr(self, key, None) == value for key, value in change_filter.items())


ChangeCallback = Callable[[ChangeNotification], None]
Unsubscribe = Callable[[], None]


class IChangeFeed(Protocol):
    """Protocol for change notification feeds (DIP)"""

    async def publish(self, notification: ChangeNotification) -> None:
        """Deliver a notification to subscribers"""
        ...

    def subscribe(
        self,
        table: ChangeTable,
        callback: ChangeCallback,
        change_filter: Mapping[str, Any] | None = None,
    ) -> Unsubscribe:
        """Register a callback; returns a function that removes it"""
        ...
