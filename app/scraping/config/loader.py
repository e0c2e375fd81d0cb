"""
Environment config loader for review scraping.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from db.config import get_bool_env, get_int_env, load_env_files

from app.scraping.base import DEFAULT_USER_AGENT
from app.scraping.config.models import ReviewScrapingSettings


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped if stripped else None


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_dir(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_review_scraping_settings() -> ReviewScrapingSettings:
    """
    Return cached review scraping settings from environment variables.
    """

    load_env_files()
    return ReviewScrapingSettings(
        default_user_agent=_get_str_env("REVIEW_SCRAPE_USER_AGENT", DEFAULT_USER_AGENT),
        headless=get_bool_env("REVIEW_SCRAPE_HEADLESS", True),
        navigation_timeout_seconds=max(
            1.0,
            _get_float_env("REVIEW_SCRAPE_NAVIGATION_TIMEOUT_SECONDS", 30.0),
        ),
        default_max_pages=max(1, get_int_env("REVIEW_SCRAPE_DEFAULT_MAX_PAGES", 10)),
        backup_enabled=get_bool_env("REVIEW_BACKUP_ENABLED", True),
        backup_s3_bucket=_get_optional_str_env("REVIEW_BACKUP_S3_BUCKET"),
        backup_s3_prefix=_get_str_env("REVIEW_BACKUP_S3_PREFIX", "backups"),
        aws_region=_get_optional_str_env("AWS_REGION") or _get_optional_str_env("AWS_DEFAULT_REGION"),
        backup_local_dir=str(_resolve_dir(_get_str_env("REVIEW_BACKUP_LOCAL_DIR", "data/backups"))),
    )
