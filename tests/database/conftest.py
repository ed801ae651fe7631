# tests/database/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from mediashelf.database.core.main import build_engine, build_session_factory
from mediashelf.database.models import Base
from mediashelf.database.repos.media_repo import SqlAlchemyMediaRepo
from mediashelf.database.repos.tag_repo import SqlAlchemyTagRepo
from mediashelf.database.repos.todo_repo import SqlAlchemyTodoRepo
from mediashelf.domain.entities.media import Media
from mediashelf.domain.entities.tag import Tag
from mediashelf.domain.enums import MediaKind

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db(db_engine) -> Session:
    """
    Per-test SQLAlchemy Session bound to an outer transaction (rolled back after each test).
    Repo-level begin/commit become SAVEPOINTs inside it.
    """
    connection = db_engine.connect()
    trans = connection.begin()

    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
        autoflush=False,
    )
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def session_factory():
    """A private engine for tests that really commit."""
    engine = build_engine(url="sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def media_repo(db, storage) -> SqlAlchemyMediaRepo:
    return SqlAlchemyMediaRepo(db, storage, max_page_size=100)


@pytest.fixture()
def tag_repo(db) -> SqlAlchemyTagRepo:
    return SqlAlchemyTagRepo(db, max_page_size=100)


@pytest.fixture()
def todo_repo(db) -> SqlAlchemyTodoRepo:
    return SqlAlchemyTodoRepo(db, max_page_size=100)


@pytest.fixture()
def make_tag(tag_repo):
    def _make(name: str, **kw) -> Tag:
        return tag_repo.create(Tag(name=name, **kw))
    return _make


@pytest.fixture()
def make_media(media_repo):
    """
    Create media with a deterministic creation time: the n-th call is T0 + n minutes,
    so newer calls sort first.
    """
    counter = {"n": 0}

    def _make(title: str, kind: MediaKind = MediaKind.image, tag_ids=(), **kw) -> Media:
        counter["n"] += 1
        if kind == MediaKind.video:
            kw.setdefault("external_url", f"https://video.example/{counter['n']}")
        else:
            prefix = "images" if kind == MediaKind.image else "audio"
            kw.setdefault("storage_key", f"{prefix}/obj-{counter['n']}.bin")
        kw.setdefault("date_created", T0 + timedelta(minutes=counter["n"]))
        return media_repo.create(Media(kind=kind, title=title, **kw), tag_ids=list(tag_ids))

    return _make
