from __future__ import annotations
from enum import StrEnum
from typing import Optional

class TagScope(StrEnum):
    all = "all"
    image = "image"
    audio = "audio"
    video = "video"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "TagScope":
        if value is None or not str(value).strip():
            return cls.all
        return cls(str(value).strip())
