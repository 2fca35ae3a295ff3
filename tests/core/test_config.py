"""Settings — environment-driven configuration.

Tests cover:
    - postgresql:// URLs are rewritten to the asyncpg driver
    - "Group A" is always among the default group names
    - is_development toggles on ENVIRONMENT
"""

from hundi.config import Settings


def test_postgres_url_gets_asyncpg_driver():
    settings = Settings(database_url="postgresql://u:p@host:5432/hundi")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/hundi"


def test_sqlite_url_untouched():
    settings = Settings(database_url="sqlite+aiosqlite:///local.db")
    assert settings.database_url == "sqlite+aiosqlite:///local.db"


def test_default_group_names_include_group_a():
    settings = Settings(default_group_names=["North", "South"])
    assert settings.default_group_names == ["Group A", "North", "South"]


def test_default_group_names_drop_blanks():
    settings = Settings(default_group_names=["Group A", " ", "Group B "])
    assert settings.default_group_names == ["Group A", "Group B"]


def test_is_development():
    assert Settings(environment="development").is_development
    assert not Settings(environment="production").is_development
