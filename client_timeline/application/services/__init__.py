"""Application services."""

from client_timeline.application.services.snapshot import (TimelineMetrics,
                                                           TimelineSnapshot)
from client_timeline.application.services.sync_controller import SyncController
from client_timeline.application.services.timeline_service import TimelineService

__all__ = [
    "SyncController",
    "TimelineMetrics",
    "TimelineService",
    "TimelineSnapshot",
]
