# mediashelf/domain/dataclasses/paging.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Generic, Iterable, List, Optional, TypeVar
from uuid import UUID

from mediashelf.domain.enums.tag_scope import TagScope

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
DEFAULT_MAX_PAGE_SIZE = 100


def _clean_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PageWindow:
    """offset >= 0 and 0 < limit <= max_page_size."""
    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE
    max_page_size: int = field(default=DEFAULT_MAX_PAGE_SIZE, compare=False, repr=False)

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.limit <= 0:
            raise ValueError("limit must be > 0")
        if self.limit > self.max_page_size:
            raise ValueError(f"limit must be <= {self.max_page_size}")


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    offset: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


# ---------------------------------------------------------------------------
# Filters (normalized on construction; blank values mean "no filter")
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MediaFilter:
    title_contains: Optional[str] = None
    tag_ids: FrozenSet[UUID] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "title_contains", _clean_text(self.title_contains))
        object.__setattr__(self, "tag_ids", frozenset(self.tag_ids or ()))

    @classmethod
    def of(cls, title_contains: Optional[str] = None, tag_ids: Optional[Iterable[UUID]] = None) -> "MediaFilter":
        return cls(title_contains=title_contains, tag_ids=frozenset(tag_ids or ()))

    @property
    def is_empty(self) -> bool:
        return self.title_contains is None and not self.tag_ids


@dataclass(frozen=True)
class TagFilter:
    name_contains: Optional[str] = None
    applies_to: Optional[TagScope] = None

    def __post_init__(self):
        object.__setattr__(self, "name_contains", _clean_text(self.name_contains))
        if self.applies_to is not None:
            object.__setattr__(self, "applies_to", TagScope(self.applies_to))


@dataclass(frozen=True)
class TodoFilter:
    title_contains: Optional[str] = None
    completed: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "title_contains", _clean_text(self.title_contains))
