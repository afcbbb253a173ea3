"""Domain enumerations for the client timeline."""

from enum import Enum


class EventStatus(str, Enum):
    """Event status enumeration"""

    CREATED = "created"
    RESOLVED = "resolved"
    NO_RESPONSE = "no_response"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class EventPosition(str, Enum):
    """Vertical placement of an event relative to the line axis"""

    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [position.value for position in cls]

    def opposite(self) -> "EventPosition":
        return EventPosition.BOTTOM if self is EventPosition.TOP else EventPosition.TOP


class SegmentKind(str, Enum):
    """Classification of the segment joining two adjacent events"""

    SAME_DAY = "same_day"
    DEFAULT = "default"


class LineLoad(str, Enum):
    """How full a line is"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SyncState(str, Enum):
    """Sync controller state per timeline subscription"""

    IDLE = "idle"
    LOCAL_WRITE_IN_FLIGHT = "local_write_in_flight"
    RELOAD_PENDING = "reload_pending"


class ChangeTable(str, Enum):
    """Tables that emit change notifications"""

    LINES = "lines"
    EVENTS = "events"


class ChangeAction(str, Enum):
    """Kind of mutation reported by the change feed"""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
