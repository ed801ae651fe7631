# mediashelf/domain/entities/media.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from mediashelf.domain.entities.tag import Tag
from mediashelf.domain.enums.media_kind import MediaKind

TITLE_MAX = 255


@dataclass
class Media:
    """
    Core domain entity for one catalogued item. Persistence concerns (ids,
    timestamps) are optional so the entity can be built before it is stored.

    Invariants that we keep here:
      - kind is a valid MediaKind
      - exactly one locator is populated, chosen by kind:
          image/audio -> storage_key (object in object storage)
          video       -> external_url (externally hosted link)
      - title is non-empty

    `display_url` is derived: repositories recompute it from `storage_key`
    on every read and it is never written back.
    """

    # Persistence (optional)
    id: Optional[UUID] = None
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    kind: MediaKind = MediaKind.image
    title: str = ""
    description: Optional[str] = None

    # Locators
    storage_key: Optional[str] = None
    external_url: Optional[str] = None

    # Derived on read
    display_url: Optional[str] = None

    tags: List[Tag] = field(default_factory=list)

    def __post_init__(self):
        self.kind = MediaKind(self.kind)
        if not self.title or not self.title.strip():
            raise ValueError("Media.title is required")
        if len(self.title) > TITLE_MAX:
            raise ValueError(f"Media.title must be at most {TITLE_MAX} characters")

        if self.kind.uses_object_storage:
            if not self.storage_key or not self.storage_key.strip():
                raise ValueError(f"{self.kind} media requires storage_key")
            if self.external_url is not None:
                raise ValueError(f"{self.kind} media must not carry external_url")
        else:
            if not self.external_url or not self.external_url.strip():
                raise ValueError("video media requires external_url")
            if self.storage_key is not None:
                raise ValueError("video media must not carry storage_key")

    # ---- Classification ----------------------------------------------------

    def is_image(self) -> bool:
        return self.kind == MediaKind.image

    def is_video(self) -> bool:
        return self.kind == MediaKind.video

    def is_audio(self) -> bool:
        return self.kind == MediaKind.audio

    def uses_object_storage(self) -> bool:
        return self.kind.uses_object_storage and bool(self.storage_key)

    def tag_ids(self) -> List[UUID]:
        return [t.id for t in self.tags if t.id is not None]

    def as_dict(self):
        return asdict(self)
