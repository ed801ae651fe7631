import pytest
from pydantic import ValidationError

from mediashelf.common.settings import PaginationConfig, Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.delenv("DB__URL", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.pagination.default_page_size == 20
    assert cfg.pagination.max_page_size == 100
    assert cfg.database_url.startswith("postgresql+psycopg://")
    assert cfg.db.is_sqlite is False


def test_nested_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DB__URL", "sqlite:///:memory:")
    monkeypatch.setenv("STORAGE__ROOT", str(tmp_path))
    monkeypatch.setenv("STORAGE__PUBLIC_BASE_URL", "https://cdn.example/media/")
    monkeypatch.setenv("PAGINATION__MAX_PAGE_SIZE", "50")
    monkeypatch.setenv("USE_TESTCONTAINERS", "yes")

    cfg = get_settings()
    assert cfg.database_url == "sqlite:///:memory:"
    assert cfg.db.is_sqlite is True
    assert cfg.storage.root == tmp_path
    assert cfg.storage.public_base_url == "https://cdn.example/media"
    assert cfg.pagination.max_page_size == 50
    assert cfg.use_testcontainers is True


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_settings_have_no_filesystem_side_effects(monkeypatch, tmp_path):
    target = tmp_path / "objects"
    monkeypatch.setenv("STORAGE__ROOT", str(target))
    get_settings()
    assert not target.exists()


def test_default_page_size_cannot_exceed_max():
    with pytest.raises(ValidationError):
        PaginationConfig(default_page_size=200, max_page_size=100)
