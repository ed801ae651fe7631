# mediashelf/database/models/__init__.py

from mediashelf.database.models.media import (
    Base,
    Media,
)
from mediashelf.database.models.taxonomy import (
    Tag,
    MediaTag,
)
from mediashelf.database.models.todo import Todo

__all__ = [
    "Base",
    "Media",
    "Tag",
    "MediaTag",
    "Todo",
]
