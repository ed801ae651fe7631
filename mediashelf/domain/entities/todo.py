# mediashelf/domain/entities/todo.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC; aware ones are converted to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Todo:
    """
    A to-do item. Scheduling is optional and comes in two shapes that may
    coexist: a period (start_date + end_date) and a single due_date.
    """
    id: Optional[UUID] = None
    title: str = ""
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    completed: bool = False
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Todo.title is required")
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be set together")
        if self.start_date is not None and as_utc(self.start_date) > as_utc(self.end_date):
            raise ValueError("start_date must not be after end_date")

    def has_period(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def has_due_date(self) -> bool:
        return self.due_date is not None

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.completed:
            return False
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        # due_date wins over the period end when both exist
        deadline = self.due_date if self.due_date is not None else self.end_date
        if deadline is None:
            return False
        return as_utc(deadline) < now

    def as_dict(self):
        return asdict(self)
