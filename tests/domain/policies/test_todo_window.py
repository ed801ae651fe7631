from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from mediashelf.domain.entities.todo import Todo
from mediashelf.domain.policies.todo_window import (
    Window,
    is_unscheduled,
    is_upcoming,
    overlaps,
    schedule_anchor,
    select_upcoming,
)

UTC = timezone.utc


def d(day: int, hour: int = 0) -> datetime:
    return datetime(2024, 7, day, hour, tzinfo=UTC)


def test_for_day_spans_until_last_second():
    w = Window.for_day(date(2024, 7, 4))
    assert w.start == d(4)
    assert w.end == d(4) + timedelta(days=1) - timedelta(seconds=1)


def test_for_day_keeps_local_day_for_aware_input():
    plus9 = timezone(timedelta(hours=9))
    w = Window.for_day(datetime(2024, 7, 4, 15, 0, tzinfo=plus9))
    # local midnight in +09:00 is 15:00 UTC the previous day
    assert w.start == datetime(2024, 7, 3, 15, 0, tzinfo=UTC)
    assert w.end - w.start == timedelta(days=1) - timedelta(seconds=1)


def test_window_rejects_inverted():
    with pytest.raises(ValueError):
        Window(start=d(5), end=d(4))


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (d(1), d(3), True),    # ends at window start
        (d(6), d(9), True),    # starts at window end
        (d(1), d(9), True),    # covers
        (d(4), d(5), True),    # inside
        (d(1), d(2), False),   # before
        (d(7), d(9), False),   # after
    ],
)
def test_period_overlap_inclusive(start, end, expected):
    t = Todo(title="t", start_date=start, end_date=end)
    assert overlaps(t, d(3), d(6)) is expected


def test_due_date_overlap_inclusive():
    assert overlaps(Todo(title="t", due_date=d(3)), d(3), d(6))
    assert overlaps(Todo(title="t", due_date=d(6)), d(3), d(6))
    assert not overlaps(Todo(title="t", due_date=d(6, 1)), d(3), d(6))


def test_period_or_due_date():
    t = Todo(title="t", start_date=d(1), end_date=d(2), due_date=d(5))
    assert overlaps(t, d(4), d(6))
    assert not overlaps(Todo(title="t"), d(1), d(30))


def test_completed_never_upcoming():
    w = Window(start=d(1), end=d(9))
    assert is_upcoming(Todo(title="t", due_date=d(5)), w)
    assert not is_upcoming(Todo(title="t", due_date=d(5), completed=True), w)


def test_anchor_and_unscheduled():
    assert schedule_anchor(Todo(title="t", start_date=d(5), end_date=d(8), due_date=d(3))) == d(3)
    assert schedule_anchor(Todo(title="t", start_date=d(5), end_date=d(8))) == d(5)
    assert schedule_anchor(Todo(title="t", due_date=d(7))) == d(7)
    assert schedule_anchor(Todo(title="t")) is None
    assert is_unscheduled(Todo(title="t"))
    assert not is_unscheduled(Todo(title="t", due_date=d(7)))


def test_select_upcoming_orders_by_anchor():
    w = Window(start=d(1), end=d(31))
    late = Todo(id=uuid4(), title="late", due_date=d(20))
    early = Todo(id=uuid4(), title="early", start_date=d(2), end_date=d(25))
    done = Todo(id=uuid4(), title="done", due_date=d(3), completed=True)
    outside = Todo(id=uuid4(), title="outside", due_date=datetime(2024, 8, 2, tzinfo=UTC))

    assert [t.title for t in select_upcoming([late, done, outside, early], w)] == ["early", "late"]
