# mediashelf/domain/policies/object_keys.py
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional
from uuid import UUID, uuid4

from mediashelf.domain.enums.media_kind import MediaKind

AUDIO_CONTENT_TYPES = frozenset({
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/wave",
    "audio/x-wav",
})

# Top-level prefix per storage-backed kind
KEY_PREFIXES = {
    MediaKind.image: "images",
    MediaKind.audio: "audio",
}


class UnsupportedContentType(ValueError):
    pass


def kind_for_content_type(content_type: str) -> MediaKind:
    """
    Domain policy for classifying an uploaded payload. Known audio types
    (and anything else under audio/) become audio; image/* becomes image.
    """
    ct = (content_type or "").split(";", 1)[0].strip().lower()
    if ct in AUDIO_CONTENT_TYPES or ct.startswith("audio/"):
        return MediaKind.audio
    if ct.startswith("image/"):
        return MediaKind.image
    raise UnsupportedContentType(f"unsupported content type: {content_type!r}")


def object_key_for(kind: MediaKind, filename: Optional[str] = None, object_id: Optional[UUID] = None) -> str:
    """
    '<prefix>/<uuid><ext>', keeping the original file extension (lowercased).
    """
    kind = MediaKind(kind)
    if kind not in KEY_PREFIXES:
        raise ValueError(f"{kind} media is not stored in object storage")
    ext = PurePosixPath(filename or "").suffix.lower()
    return f"{KEY_PREFIXES[kind]}/{object_id or uuid4()}{ext}"
