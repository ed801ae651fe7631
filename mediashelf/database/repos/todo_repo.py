# mediashelf/database/repos/todo_repo.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, case, false, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.common.logging import get_logger
from mediashelf.database.core.transaction import transactional
from mediashelf.database.models.todo import Todo as DBTodo
from mediashelf.database.repos._mapping import apply_todo_to_orm, to_domain_todo
from mediashelf.database.repos.predicates import Listing, Predicate, contains_ci, listing_statements
from mediashelf.domain.dataclasses.paging import DEFAULT_MAX_PAGE_SIZE, Page, PageWindow, TodoFilter
from mediashelf.domain.entities.todo import Todo as DomainTodo, as_utc
from mediashelf.domain.errors import NotFoundError
from mediashelf.domain.policies.todo_window import Window

logger = get_logger(__name__)

TODO_ORDERING = (DBTodo.date_created.desc(), DBTodo.id.desc())

# earlier of start_date / due_date, whichever is populated
SCHEDULE_ANCHOR = case(
    (
        and_(
            DBTodo.start_date.is_not(None),
            DBTodo.due_date.is_not(None),
            DBTodo.due_date < DBTodo.start_date,
        ),
        DBTodo.due_date,
    ),
    else_=func.coalesce(DBTodo.start_date, DBTodo.due_date),
)


def todo_predicate(flt: Optional[TodoFilter]) -> Predicate:
    pred = Predicate("and")
    if flt is None:
        return pred
    pred.add(contains_ci(DBTodo.title, flt.title_contains))
    if flt.completed is not None:
        pred.add(DBTodo.completed == bool(flt.completed))
    return pred


def window_clause(window: Window) -> ColumnElement[bool]:
    """Pending todos whose period intersects the window or whose due date is inside it."""
    period_hit = and_(
        DBTodo.start_date.is_not(None),
        DBTodo.end_date.is_not(None),
        DBTodo.start_date <= window.end,
        DBTodo.end_date >= window.start,
    )
    due_hit = and_(
        DBTodo.due_date.is_not(None),
        DBTodo.due_date.between(window.start, window.end),
    )
    return and_(DBTodo.completed == false(), or_(period_hit, due_hit))


def unscheduled_predicate() -> Predicate:
    return Predicate("and").extend([
        DBTodo.start_date.is_(None),
        DBTodo.end_date.is_(None),
        DBTodo.due_date.is_(None),
        DBTodo.completed == false(),
    ])


class SqlAlchemyTodoRepo:
    def __init__(self, db: Session, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
        self.db = db
        self.max_page_size = max_page_size

    def _require_row(self, todo_id: UUID) -> DBTodo:
        row = self.db.get(DBTodo, todo_id)
        if row is None:
            raise NotFoundError("Todo", todo_id)
        return row

    def _window(self, offset: int, limit: int) -> PageWindow:
        return PageWindow(offset=offset, limit=limit, max_page_size=self.max_page_size)

    def _page(self, listing: Listing, window: PageWindow) -> Page[DomainTodo]:
        total = int(self.db.execute(listing.count).scalar_one())
        rows = self.db.execute(listing.rows).scalars().all()
        return Page(items=[to_domain_todo(r) for r in rows], total=total, offset=window.offset, limit=window.limit)

    # ---------- reads ----------

    def find_by_id(self, todo_id: UUID) -> DomainTodo:
        return to_domain_todo(self._require_row(todo_id))

    def find_all(self) -> List[DomainTodo]:
        listing = listing_statements(DBTodo, todo_predicate(None), TODO_ORDERING)
        return [to_domain_todo(r) for r in self.db.execute(listing.rows).scalars().all()]

    def find_all_paginated(self, offset: int, limit: int) -> Page[DomainTodo]:
        return self.find_all_filtered(offset, limit)

    def find_all_filtered(
        self,
        offset: int,
        limit: int,
        title_contains: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Page[DomainTodo]:
        window = self._window(offset, limit)
        flt = TodoFilter(title_contains=title_contains, completed=completed)
        return self._page(listing_statements(DBTodo, todo_predicate(flt), TODO_ORDERING, window), window)

    def find_by_date_range(self, start: datetime, end: datetime) -> List[DomainTodo]:
        """
        Pending todos touching [start, end] (inclusive), earliest start/due first.
        """
        window = Window(start=start, end=end)
        stmt = (
            select(DBTodo)
            .where(window_clause(window))
            .order_by(SCHEDULE_ANCHOR.asc(), DBTodo.id.asc())
        )
        return [to_domain_todo(r) for r in self.db.execute(stmt).scalars().all()]

    def find_by_date(self, day: date | datetime) -> List[DomainTodo]:
        w = Window.for_day(day)
        return self.find_by_date_range(w.start, w.end)

    def find_without_due_date(self, offset: int, limit: int) -> Page[DomainTodo]:
        """Pending todos with neither a period nor a due date, newest first."""
        window = self._window(offset, limit)
        return self._page(listing_statements(DBTodo, unscheduled_predicate(), TODO_ORDERING, window), window)

    # ---------- writes ----------

    def create(self, todo: DomainTodo) -> DomainTodo:
        with transactional(self.db):
            orm = DBTodo(id=todo.id or uuid4())
            apply_todo_to_orm(orm, todo)
            if todo.date_created is not None:
                orm.date_created = as_utc(todo.date_created)
            self.db.add(orm)
            self.db.flush()
        logger.info("todo created id=%s", orm.id)
        return to_domain_todo(orm)

    def update(self, todo: DomainTodo) -> DomainTodo:
        if todo.id is None:
            raise NotFoundError("Todo", None)
        with transactional(self.db):
            orm = self._require_row(todo.id)
            apply_todo_to_orm(orm, todo)
            self.db.flush()
        return to_domain_todo(orm)

    def delete(self, todo_id: UUID) -> None:
        with transactional(self.db):
            self.db.delete(self._require_row(todo_id))
            self.db.flush()
        logger.info("todo deleted id=%s", todo_id)
