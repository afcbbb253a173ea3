from client_timeline.infrastructure.messaging.factory import create_change_feed
from client_timeline.infrastructure.messaging.memory_feed import InMemoryChangeFeed
from client_timeline.infrastructure.messaging.redis_feed import RedisChangeFeed

__all__ = ["InMemoryChangeFeed", "RedisChangeFeed", "create_change_feed"]
