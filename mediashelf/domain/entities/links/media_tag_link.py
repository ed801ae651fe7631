# mediashelf/domain/entities/links/media_tag_link.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class MediaTagLink:
    """
    Join entity connecting a Media record and a Tag.
    The DB enforces that (media_id, tag_id) is unique; the pair has no lifecycle of its own.
    """
    media_id: UUID
    tag_id: UUID
