from mediashelf.domain.enums.media_kind import MediaKind
from mediashelf.domain.enums.tag_scope import TagScope
__all__ = [
    "MediaKind",
    "TagScope",
]
