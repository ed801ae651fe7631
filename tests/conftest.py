# tests/conftest.py
from __future__ import annotations

from typing import Dict, List, Optional

import pytest
from sqlalchemy.engine import Engine

from mediashelf.common.settings import get_settings
from mediashelf.database.core.main import build_engine
from mediashelf.database.models import Base  # <-- imports models/metadata
from mediashelf.domain.errors import StorageUnavailableError


def _start_postgres():
    from testcontainers.postgres import PostgresContainer

    pg = PostgresContainer(get_settings().test_db_image)
    pg.start()
    # Force psycopg (v3) driver in the URL returned by testcontainers (it defaults to psycopg2)
    return pg, pg.get_connection_url().replace("psycopg2", "psycopg")


@pytest.fixture(scope="session")
def db_engine() -> Engine:
    """
    Engine with the schema created from the models (no migrations).
    SQLite in memory by default; USE_TESTCONTAINERS=true runs against PostgreSQL.
    """
    container = None
    if get_settings().use_testcontainers:
        container, url = _start_postgres()
    else:
        url = "sqlite:///:memory:"

    engine = build_engine(url=url)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        if container is not None:
            container.stop()


class FakeStorage:
    """In-memory object store that records calls and can be told to fail."""

    def __init__(self, base_url: str = "https://cdn.test/objects") -> None:
        self.base_url = base_url
        self.objects: Dict[str, bytes] = {}
        self.deleted: List[str] = []
        self.fail_upload: Optional[Exception] = None
        self.fail_delete: Optional[Exception] = None

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail_upload is not None:
            raise self.fail_upload
        self.objects[key] = data

    def delete(self, key: str) -> None:
        if self.fail_delete is not None:
            raise self.fail_delete
        self.deleted.append(key)
        self.objects.pop(key, None)

    def resolve(self, key: str) -> str:
        return f"{self.base_url}/{key}"


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def broken_storage() -> FakeStorage:
    s = FakeStorage()
    s.fail_delete = StorageUnavailableError("delete", "*", "bucket offline")
    return s
