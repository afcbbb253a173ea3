"""In-process change feed for clients sharing one event loop"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from client_timeline.application.interfaces.change_feed import (ChangeCallback,
                                                                ChangeNotification, Unsubscribe)
from client_timeline.domain.enums import ChangeTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class _Subscription:
    callback: ChangeCallback
    change_filter: Mapping[str, Any] | None


class InMemoryChangeFeed:
    """Fans notifications out to every matching subscriber, writer included"""

    def __init__(self) -> None:
        self._subscriptions: dict[ChangeTable, list[_Subscription]] = {
            table: [] for table in ChangeTable
        }

    def subscriber_count(self, table: ChangeTable | None = None) -> int:
        if table is not None:
            return len(self._subscriptions[table])
        return sum(len(subs) for subs in self._subscriptions.values())

    async def publish(self, notification: ChangeNotification) -> None:
        self.dispatch(notification)

    def dispatch(self, notification: ChangeNotification) -> int:
        """Call matching subscribers; returns how many were called"""
        delivered = 0
        for subscription in list(self._subscriptions[notification.table]):
            if not notification.matches(subscription.change_filter):
                continue
            try:
                subscription.callback(notification)
                delivered += 1
            except Exception:
                logger.exception(f"Change subscriber failed for {notification.table.value}")
        return delivered

    def subscribe(
        self,
        table: ChangeTable,
        callback: ChangeCallback,
        change_filter: Mapping[str, Any] | None = None,
    ) -> Unsubscribe:
        subscription = _Subscription(callback, dict(change_filter) if change_filter else None)
        subscriptions = self._subscriptions[ChangeTable(table)]
        subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in subscriptions:
                subscriptions.remove(subscription)

        return unsubscribe
