from uuid import uuid4

import pytest

from mediashelf.domain.dataclasses.paging import MediaFilter, Page, PageWindow, TagFilter, TodoFilter
from mediashelf.domain.enums import TagScope


def test_window_defaults():
    w = PageWindow()
    assert (w.offset, w.limit, w.max_page_size) == (0, 20, 100)


@pytest.mark.parametrize(
    "kw",
    [{"offset": -1}, {"limit": 0}, {"limit": -5}, {"limit": 101}, {"limit": 11, "max_page_size": 10}],
)
def test_window_rejects_invalid(kw):
    with pytest.raises(ValueError):
        PageWindow(**kw)


def test_window_upper_bound_inclusive():
    assert PageWindow(limit=100).limit == 100


@pytest.mark.parametrize(
    "offset,n,total,expected",
    [(0, 10, 25, True), (20, 5, 25, False), (0, 0, 0, False), (30, 0, 25, False)],
)
def test_has_more(offset, n, total, expected):
    assert Page(items=list(range(n)), total=total, offset=offset, limit=10).has_more is expected


def test_media_filter_normalizes():
    a, b = uuid4(), uuid4()
    f = MediaFilter.of(title_contains="  cat ", tag_ids=[a, b, a])
    assert f.title_contains == "cat"
    assert f.tag_ids == frozenset({a, b})
    assert not f.is_empty
    assert MediaFilter.of(title_contains="   ", tag_ids=None).is_empty


def test_tag_and_todo_filters():
    assert TagFilter(name_contains=" ", applies_to="image").applies_to is TagScope.image
    assert TagFilter(name_contains=" ").name_contains is None
    assert TodoFilter(title_contains="", completed=False).title_contains is None
