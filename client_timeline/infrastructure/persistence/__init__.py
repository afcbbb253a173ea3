from client_timeline.infrastructure.persistence.database import (Base, create_engine,
                                                                 create_session_factory,
                                                                 create_tables)
from client_timeline.infrastructure.persistence.store import SqlAlchemyTimelineStore

__all__ = [
    "Base",
    "SqlAlchemyTimelineStore",
    "create_engine",
    "create_session_factory",
    "create_tables",
]
