# mediashelf/database/core/service_object.py
from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ServiceObject:
    """
    Mixin providing common columns for persisted models.
    Use with multiple inheritance: `class MyModel(ServiceObject, Base): ...`

    Ids and timestamps are generated client-side so the same models run on
    PostgreSQL and SQLite.
    """
    __abstract__ = True

    @declared_attr
    def id(cls) -> Mapped[PyUUID]:
        return mapped_column(Uuid, primary_key=True, default=uuid4)

    @declared_attr
    def date_created(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    @declared_attr
    def last_updated(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
