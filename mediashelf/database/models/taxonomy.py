# mediashelf/database/models/taxonomy.py
from __future__ import annotations

from uuid import UUID as UUID_t

from sqlalchemy import Enum as SAEnum, ForeignKey, Index, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from mediashelf.database.core.main import Base
from mediashelf.database.core.service_object import ServiceObject
from mediashelf.domain.enums.tag_scope import TagScope


# =======================
# Tags
# =======================
class Tag(ServiceObject, Base):
    __tablename__ = "tag"
    __table_args__ = (
        UniqueConstraint("name", name="uq_tag_name"),
        Index("ix_tag_applies_to", "applies_to"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    applies_to: Mapped[TagScope] = mapped_column(
        SAEnum(TagScope, name="tag_scope", native_enum=False, length=16),
        nullable=False,
        default=TagScope.all,
        server_default=text("'all'"),
    )

    def __repr__(self) -> str:
        return f"<Tag id={self.id} name={self.name!r}>"


class MediaTag(Base):
    """
    Association table for Media <-> Tag. The composite primary key is the
    at-most-one-row-per-pair guarantee.
    """
    __tablename__ = "media_tag"
    __table_args__ = (
        Index("ix_media_tag_tag_id", "tag_id"),
    )

    media_id: Mapped[UUID_t] = mapped_column(
        Uuid,
        ForeignKey("media.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[UUID_t] = mapped_column(
        Uuid,
        ForeignKey("tag.id", ondelete="CASCADE"),
        primary_key=True,
    )
