# mediashelf/database/core/main.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import Column, MetaData, Table, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mediashelf.common.logging import configure_logging
from mediashelf.common.settings import Settings, get_settings

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

_serviceobject_first = ("id", "date_created", "last_updated")


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @classmethod
    def __table_cls__(cls, *args, **kw):
        """Reorder columns so ServiceObject fields come first."""
        if not args:
            return super().__table_cls__(*args, **kw)

        # Positional args are (name, metadata, *columns_and_constraints)
        name, metadata, *rest = args

        cols: List[Column] = [x for x in rest if isinstance(x, Column)]
        others = [x for x in rest if not isinstance(x, Column)]

        # Stable ordering: ServiceObject fields first, then everything else in their original order
        priority = {n: i for i, n in enumerate(_serviceobject_first)}
        original_index = {c: i for i, c in enumerate(cols)}

        cols.sort(key=lambda c: (priority.get(c.name, 10_000), original_index[c]))

        return Table(name, metadata, *(cols + others), **kw)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _install_sqlite_hooks(engine: Engine) -> None:
    # pysqlite defers BEGIN and breaks SAVEPOINT; take over transaction control
    # and turn on FK enforcement so ON DELETE CASCADE works.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _):
        dbapi_conn.isolation_level = None
        # built-in lower() only folds ASCII
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(settings: Optional[Settings] = None, *, url: Optional[str] = None) -> Engine:
    cfg = settings or get_settings()
    url = url or cfg.database_url
    configure_logging(cfg.log_level)

    if url.startswith("sqlite"):
        kw = {"echo": cfg.db.echo}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            # one shared connection, otherwise every checkout sees an empty database
            kw.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        engine = create_engine(url, **kw)
        _install_sqlite_hooks(engine)
        return engine

    return create_engine(
        url,
        echo=cfg.db.echo,
        pool_size=cfg.db.pool_size,
        max_overflow=cfg.db.max_overflow,
        pool_pre_ping=cfg.db.pool_pre_ping,
        pool_recycle=cfg.db.pool_recycle,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    Unit-of-work scope for one request/job.
    Commits on success, rolls back on error.
    """
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
