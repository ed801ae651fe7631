# mediashelf/database/models/todo.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from mediashelf.database.core.main import Base
from mediashelf.database.core.service_object import ServiceObject


class Todo(ServiceObject, Base):
    __tablename__ = "todo"
    __table_args__ = (
        CheckConstraint(
            "(start_date IS NULL AND end_date IS NULL) OR "
            "(start_date IS NOT NULL AND end_date IS NOT NULL AND start_date <= end_date)",
            name="period_complete",
        ),
        Index("ix_todo_start_date", "start_date"),
        Index("ix_todo_end_date", "end_date"),
        Index("ix_todo_due_date", "due_date"),
        Index("ix_todo_completed", "completed"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # period (both or neither) and/or a single due date
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self) -> str:
        return f"<Todo id={self.id} title={self.title!r} completed={self.completed}>"
