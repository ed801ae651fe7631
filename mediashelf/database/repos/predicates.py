# mediashelf/database/repos/predicates.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.domain.dataclasses.paging import PageWindow

_LIKE_ESCAPE = "\\"


class Predicate:
    """
    Ordered list of WHERE clauses joined by one explicit join word.

    Each clause is a SQLAlchemy expression and carries its own bound
    parameters, so user input never reaches the SQL text. An empty predicate
    means "no WHERE clause at all".
    """

    JOIN_WORDS = ("and", "or")

    def __init__(self, join_word: str = "and") -> None:
        if join_word not in self.JOIN_WORDS:
            raise ValueError(f"join_word must be one of {self.JOIN_WORDS}")
        self.join_word = join_word
        self._clauses: List[ColumnElement[bool]] = []

    def add(self, clause: Optional[ColumnElement[bool]]) -> "Predicate":
        if clause is not None:
            self._clauses.append(clause)
        return self

    def extend(self, clauses: Iterable[Optional[ColumnElement[bool]]]) -> "Predicate":
        for c in clauses:
            self.add(c)
        return self

    def __len__(self) -> int:
        return len(self._clauses)

    def compile(self) -> Optional[ColumnElement[bool]]:
        if not self._clauses:
            return None
        if len(self._clauses) == 1:
            return self._clauses[0]
        joiner = and_ if self.join_word == "and" else or_
        return joiner(*self._clauses)

    def apply(self, stmt: Select) -> Select:
        where = self.compile()
        return stmt if where is None else stmt.where(where)


def escape_like(text: str) -> str:
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def contains_ci(column, text: Optional[str]) -> Optional[ColumnElement[bool]]:
    """
    Case-insensitive substring match; blank text means no clause.
    ILIKE on PostgreSQL, `lower(col) LIKE lower(:text)` elsewhere (SQLite gets a
    Unicode-aware lower() from the engine's connect hook).
    """
    if text is None or not text.strip():
        return None
    needle = f"%{escape_like(text.strip())}%"
    return column.ilike(needle, escape=_LIKE_ESCAPE)


@dataclass(frozen=True)
class Listing:
    """A row query and its count query, derived from the same predicate."""
    rows: Select
    count: Select


def listing_statements(
    model,
    predicate: Predicate,
    ordering: Sequence,
    window: Optional[PageWindow] = None,
) -> Listing:
    """
    The one place where list and count queries are built. Both share the
    predicate, so `offset + len(page) < total` is a correct has-more test.
    """
    rows = predicate.apply(select(model)).order_by(*ordering)
    if window is not None:
        rows = rows.offset(window.offset).limit(window.limit)
    count = predicate.apply(select(func.count()).select_from(model))
    return Listing(rows=rows, count=count)
