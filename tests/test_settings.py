from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from app.scraping.base import DEFAULT_USER_AGENT
from app.scraping.config import get_review_scraping_settings
from db.config import normalize_postgres_url, resolve_database_url
from db.session import create_db_engine

SETTINGS_ENV = (
    "REVIEW_SCRAPE_USER_AGENT",
    "REVIEW_SCRAPE_HEADLESS",
    "REVIEW_SCRAPE_NAVIGATION_TIMEOUT_SECONDS",
    "REVIEW_SCRAPE_DEFAULT_MAX_PAGES",
    "REVIEW_BACKUP_ENABLED",
    "REVIEW_BACKUP_S3_BUCKET",
    "REVIEW_BACKUP_S3_PREFIX",
    "REVIEW_BACKUP_LOCAL_DIR",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_review_scraping_settings.cache_clear()
    yield
    get_review_scraping_settings.cache_clear()


def test_defaults() -> None:
    settings = get_review_scraping_settings()

    assert settings.default_user_agent == DEFAULT_USER_AGENT
    assert settings.headless is True
    assert settings.navigation_timeout_seconds == 30.0
    assert settings.default_max_pages == 10
    assert settings.backup_enabled is True
    assert settings.backup_s3_bucket is None
    assert settings.backup_s3_prefix == "backups"
    assert Path(settings.backup_local_dir).is_absolute()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REVIEW_SCRAPE_USER_AGENT", "ReviewBot/1.0")
    monkeypatch.setenv("REVIEW_SCRAPE_HEADLESS", "false")
    monkeypatch.setenv("REVIEW_SCRAPE_NAVIGATION_TIMEOUT_SECONDS", "0.2")
    monkeypatch.setenv("REVIEW_SCRAPE_DEFAULT_MAX_PAGES", "0")
    monkeypatch.setenv("REVIEW_BACKUP_ENABLED", "no")
    monkeypatch.setenv("REVIEW_BACKUP_S3_BUCKET", " review-backups ")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("REVIEW_BACKUP_LOCAL_DIR", str(tmp_path))

    settings = get_review_scraping_settings()

    assert settings.default_user_agent == "ReviewBot/1.0"
    assert settings.headless is False
    assert settings.navigation_timeout_seconds == 1.0
    assert settings.default_max_pages == 1
    assert settings.backup_enabled is False
    assert settings.backup_s3_bucket == "review-backups"
    assert settings.aws_region == "eu-west-1"
    assert settings.backup_local_dir == str(tmp_path)


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REVIEW_SCRAPE_DEFAULT_MAX_PAGES", "many")
    monkeypatch.setenv("REVIEW_SCRAPE_NAVIGATION_TIMEOUT_SECONDS", "soon")

    settings = get_review_scraping_settings()

    assert settings.default_max_pages == 10
    assert settings.navigation_timeout_seconds == 30.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("ON", True), (" yes ", True), ("0", False), ("off", False)],
)
def test_boolean_flags(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("REVIEW_SCRAPE_HEADLESS", raw)
    monkeypatch.setenv("REVIEW_BACKUP_ENABLED", raw)

    settings = get_review_scraping_settings()

    assert settings.headless is expected
    assert settings.backup_enabled is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@db/reviews", "postgresql+psycopg://u:p@db/reviews"),
        ("postgresql://u:p@db/reviews", "postgresql+psycopg://u:p@db/reviews"),
        ("postgresql+psycopg://u:p@db/reviews", "postgresql+psycopg://u:p@db/reviews"),
    ],
)
def test_normalize_postgres_url(raw: str, expected: str) -> None:
    assert normalize_postgres_url(raw) == expected


def test_database_url_priority(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCAL_DATABASE_URL", "postgresql://local/reviews")
    monkeypatch.setenv("CLOUD_DATABASE_URL", "postgresql://cloud/reviews")
    monkeypatch.delenv("DATABASE_URL", raising=False)

    monkeypatch.setenv("ENVIRONMENT", "local")
    assert resolve_database_url() == "postgresql+psycopg://local/reviews"

    monkeypatch.setenv("ENVIRONMENT", "production")
    assert resolve_database_url() == "postgresql+psycopg://cloud/reviews"

    monkeypatch.setenv("DATABASE_URL", "postgres://direct/reviews")
    assert resolve_database_url() == "postgresql+psycopg://direct/reviews"


def test_engine_rejects_non_postgres_url() -> None:
    with pytest.raises(RuntimeError):
        create_db_engine("sqlite:///reviews.db")


def test_engine_pool_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "not-a-number")

    engine = create_db_engine("postgresql+psycopg://u:p@localhost/reviews")
    try:
        assert engine.pool.size() == 3
        assert engine.pool._max_overflow == 10
        assert engine.echo is False
    finally:
        engine.dispose()
