# mediashelf/database/models/media.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Enum as SAEnum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mediashelf.database.core.main import Base
from mediashelf.database.core.service_object import ServiceObject
from mediashelf.domain.enums.media_kind import MediaKind


class Media(ServiceObject, Base):
    __tablename__ = "media"
    __table_args__ = (
        # kind decides which locator is populated
        CheckConstraint(
            "(kind = 'video' AND external_url IS NOT NULL AND storage_key IS NULL) OR "
            "(kind IN ('image', 'audio') AND storage_key IS NOT NULL AND external_url IS NULL)",
            name="locator_matches_kind",
        ),
        CheckConstraint("length(trim(title)) > 0", name="title_not_blank"),
        Index("ix_media_kind", "kind"),
    )

    kind: Mapped[MediaKind] = mapped_column(
        SAEnum(MediaKind, name="media_kind", native_enum=False, length=16), nullable=False
    )

    # locators
    storage_key: Mapped[Optional[str]] = mapped_column(String(500))   # image/audio
    external_url: Mapped[Optional[str]] = mapped_column(Text)         # video

    # curation
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Media id={self.id} kind={self.kind} title={self.title!r}>"
