# mediashelf/domain/entities/tag.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional
from uuid import UUID

from mediashelf.domain.enums.media_kind import MediaKind
from mediashelf.domain.enums.tag_scope import TagScope

TAG_NAME_MAX = 255


@dataclass
class Tag:
    """
    A label that media can be associated with. Names are unique and
    case-sensitive ("Cats" and "cats" are different tags).

    `applies_to` records which media kinds the tag is meant for. It is
    informational: associating a video-only tag with an image is allowed.
    """
    id: Optional[UUID] = None
    name: str = ""                       # required
    applies_to: TagScope = TagScope.all
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Tag.name is required")
        if len(self.name) > TAG_NAME_MAX:
            raise ValueError(f"Tag.name must be at most {TAG_NAME_MAX} characters")
        self.applies_to = TagScope.coerce(self.applies_to)

    def accepts(self, kind: MediaKind) -> bool:
        return self.applies_to == TagScope.all or self.applies_to.value == MediaKind(kind).value

    def as_dict(self):
        return asdict(self)
