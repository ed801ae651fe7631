# mediashelf/domain/policies/todo_window.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from mediashelf.domain.entities.todo import Todo, as_utc


@dataclass(frozen=True)
class Window:
    """
    Closed date interval [start, end] used to query todos. Both ends are
    normalized to UTC (naive input is taken as UTC).
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start > self.end:
            raise ValueError("window start must not be after window end")

    @classmethod
    def for_day(cls, day: date | datetime) -> "Window":
        """
        The whole calendar day containing `day`: [00:00:00, 23:59:59].
        For an aware datetime the day boundaries follow its own timezone.
        """
        if isinstance(day, datetime):
            tz = day.tzinfo or timezone.utc
            start = datetime.combine(day.date(), time.min, tzinfo=tz)
        else:
            start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        return cls(start=start, end=start + timedelta(days=1) - timedelta(seconds=1))


def overlaps(todo: Todo, window_start: datetime, window_end: datetime) -> bool:
    """
    A todo overlaps [window_start, window_end] when its period intersects the
    window or its due date falls inside it. Boundaries are inclusive.
    """
    ws, we = as_utc(window_start), as_utc(window_end)
    if todo.has_period():
        if as_utc(todo.start_date) <= we and as_utc(todo.end_date) >= ws:
            return True
    if todo.has_due_date():
        if ws <= as_utc(todo.due_date) <= we:
            return True
    return False


def is_upcoming(todo: Todo, window: Window) -> bool:
    # only pending items are "upcoming"
    return not todo.completed and overlaps(todo, window.start, window.end)


def schedule_anchor(todo: Todo) -> Optional[datetime]:
    """The earlier of start_date and due_date, whichever is populated."""
    candidates = [as_utc(d) for d in (todo.start_date, todo.due_date) if d is not None]
    return min(candidates) if candidates else None


def is_unscheduled(todo: Todo) -> bool:
    return not todo.has_period() and not todo.has_due_date()


def select_upcoming(todos: Iterable[Todo], window: Window) -> List[Todo]:
    """In-memory form of the window query: pending, overlapping, earliest anchor first."""
    hits = [t for t in todos if is_upcoming(t, window)]
    hits.sort(key=lambda t: (schedule_anchor(t), str(t.id)))
    return hits
