"""Application ports."""

from client_timeline.application.interfaces.change_feed import (ChangeCallback,
                                                                ChangeNotification,
                                                                IChangeFeed, Unsubscribe)
from client_timeline.application.interfaces.store import ITimelineStore

__all__ = [
    "ChangeCallback",
    "ChangeNotification",
    "IChangeFeed",
    "ITimelineStore",
    "Unsubscribe",
]
