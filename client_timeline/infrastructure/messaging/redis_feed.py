"""Redis Pub/Sub change feed for clients in different processes"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

import redis.asyncio as redis

from client_timeline.application.interfaces.change_feed import (ChangeCallback,
                                                                ChangeNotification, Unsubscribe)
from client_timeline.domain.enums import ChangeTable
from client_timeline.infrastructure.config.settings import Settings, get_settings
from client_timeline.infrastructure.exceptions import ChangeFeedUnavailableError
from client_timeline.infrastructure.messaging.memory_feed import InMemoryChangeFeed

logger = logging.getLogger(__name__)


class RedisChangeFeed:
    """
    Publishes change notifications to Redis and dispatches received ones
    to local subscribers.

    Every notification goes to channel ``<prefix>:<timeline_id>``; one
    pattern subscription per process receives all of them, including the
    process's own writes. While Redis is unavailable notifications are
    dispatched locally only.
    """

    def __init__(
        self, redis_client: redis.Redis | None = None, settings: Settings | None = None
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.channel_prefix = self.settings.change_feed_channel_prefix
        self._local = InMemoryChangeFeed()
        self._connected = False
        self._pubsub: redis.client.PubSub | None = None
        self._listener: asyncio.Task | None = None

    async def connect(self, *, required: bool = False) -> None:
        """
        Establish Redis connection and start listening.

        Raises:
            ChangeFeedUnavailableError: If Redis is unreachable and ``required`` is set
        """
        try:
            if self.redis is None:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password or None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                )
            await self.redis.ping()
            self._pubsub = self.redis.pubsub()
            await self._pubsub.psubscribe(f"{self.channel_prefix}:*")
            self._connected = True
            logger.info("Redis change feed connected")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(f"Redis change feed connection failed: {e}")
            self._connected = False
            self.redis = None
            self._pubsub = None
            if required:
                raise ChangeFeedUnavailableError("redis", str(e)) from e
            return

        self._listener = asyncio.create_task(self._listen())

    async def disconnect(self) -> None:
        """Stop listening and close Redis connection and pubsub"""
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None
        if self._pubsub:
            await self._pubsub.punsubscribe(f"{self.channel_prefix}:*")
            await self._pubsub.close()
            self._pubsub = None
        if self.redis:
            await self.redis.close()
            self._connected = False
            logger.info("Redis change feed disconnected")

    def is_available(self) -> bool:
        """Check if Redis is connected"""
        return self._connected and self.redis is not None

    def _get_channel(self, timeline_id: str) -> str:
        """Get channel name for timeline"""
        return f"{self.channel_prefix}:{timeline_id}"

    async def publish(self, notification: ChangeNotification) -> None:
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, dispatching change locally")
            self._local.dispatch(notification)
            return

        channel = self._get_channel(notification.timeline_id)
        try:
            await self.redis.publish(channel, json.dumps(notification.to_dict()))
            logger.debug(f"Published change to {channel}: {notification.table.value}")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(f"Failed to publish change to {channel}: {e}; dispatching locally")
            self._connected = False
            self._local.dispatch(notification)

    def subscribe(
        self,
        table: ChangeTable,
        callback: ChangeCallback,
        change_filter: Mapping[str, Any] | None = None,
    ) -> Unsubscribe:
        return self._local.subscribe(table, callback, change_filter)

    def handle_message(self, message: Mapping[str, Any]) -> int:
        """
        Dispatch one pub/sub message to local subscribers.

        Returns:
            Number of subscribers called (0 for non-data or malformed messages)
        """
        if message.get("type") not in ("message", "pmessage"):
            return 0
        try:
            notification = ChangeNotification.from_dict(json.loads(message["data"]))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse change message: {e}")
            return 0
        return self._local.dispatch(notification)

    async def _listen(self) -> None:
        if self._pubsub is None:
            return
        try:
            async for message in self._pubsub.listen():
                self.handle_message(message)
        except asyncio.CancelledError:
            raise
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.error(f"Redis change feed subscription lost: {e}")
            self._connected = False
