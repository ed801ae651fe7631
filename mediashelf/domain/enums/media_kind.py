from __future__ import annotations
from enum import StrEnum

class MediaKind(StrEnum):
    image = "image"
    video = "video"
    audio = "audio"

    @property
    def uses_object_storage(self) -> bool:
        # video is an externally hosted link; image/audio live in object storage
        return self in (MediaKind.image, MediaKind.audio)
