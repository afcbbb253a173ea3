from client_timeline.application.interfaces.change_feed import IChangeFeed
from client_timeline.infrastructure.config.settings import Settings, get_settings
from client_timeline.infrastructure.messaging.memory_feed import InMemoryChangeFeed
from client_timeline.infrastructure.messaging.redis_feed import RedisChangeFeed


def create_change_feed(settings: Settings | None = None) -> IChangeFeed:
    """
    Build the configured change feed.

    A Redis feed is returned unconnected; await ``connect()`` before use.
    """
    settings = settings or get_settings()
    if settings.change_feed_backend == "redis":
        return RedisChangeFeed(settings=settings)
    return InMemoryChangeFeed()
