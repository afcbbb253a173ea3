"""
Column mixins shared by the timeline tables.

Ids are CUIDs generated in Python; created_at is also set in Python so a
replaced event row can carry its original value forward.
"""
from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from client_timeline.shared.utils.generators import generate_cuid


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CuidMixin:
    """String primary key, generated when the caller doesn't supply one"""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Immutable creation time (UTC)"""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class UpdatedAtMixin:
    """Last modification time, maintained by the database"""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
