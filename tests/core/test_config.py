"""Settings — connection string normalization and defaults."""

import pytest

from psql_mapper.config import Settings


@pytest.mark.parametrize("url, expected", [
    ("postgres://u:p@h:5432/d", "postgresql+asyncpg://u:p@h:5432/d"),
    ("postgresql://u:p@h/d", "postgresql+asyncpg://u:p@h/d"),
    ("postgresql+asyncpg://u:p@h/d", "postgresql+asyncpg://u:p@h/d"),
    ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
])
def test_database_url_normalized_for_asyncpg(url, expected):
    assert Settings(database_url=url).database_url == expected


def test_mapping_defaults():
    settings = Settings(database_url="postgresql://u:p@h/d")
    assert settings.path_prefix == ""
    assert settings.qualified_column_types is False
    assert settings.port == 8000


def test_prefix_from_environment(monkeypatch):
    monkeypatch.setenv("PATH_PREFIX", "/api/v1")
    assert Settings().path_prefix == "/api/v1"
