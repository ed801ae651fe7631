# mediashelf/database/core/transaction.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mediashelf.domain.errors import ConstraintViolationError, TransactionFailedError


@contextmanager
def transactional(db: Session) -> Iterator[Session]:
    """
    Run a block atomically on `db` without committing.

    The block always runs inside a SAVEPOINT (the session's transaction is
    begun first if needed). A failure rolls back only the block; the caller's
    transaction stays usable. Committing belongs to the caller's unit of
    work (`session_scope`), never to a repository.
    Driver errors are translated; domain errors pass through unchanged.
    """
    try:
        with db.begin_nested():
            yield db
    except IntegrityError as exc:
        raise ConstraintViolationError(
            "storage integrity constraint violated",
            {"statement": exc.statement, "reason": str(exc.orig)},
        ) from exc
    except SQLAlchemyError as exc:
        raise TransactionFailedError(f"transaction rolled back: {exc}") from exc
