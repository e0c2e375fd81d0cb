"""
app/domain/review_scraping.py

Domain models for review scraper configuration and run outcomes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

DEFAULT_MAX_PAGES = 10


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


@dataclass(frozen=True)
class ScraperSettings:
    """
    Per-scraper run settings.

    delay_ms is the pause between successive page fetches; user_agent
    overrides the process-wide default when set.
    """

    max_pages: int = DEFAULT_MAX_PAGES
    delay_ms: int | None = None
    user_agent: str | None = None

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any] | None,
        *,
        default_max_pages: int = DEFAULT_MAX_PAGES,
    ) -> "ScraperSettings":
        """
        Build settings from stored JSON, accepting camelCase or snake_case keys.
        A missing or zero page count means the default.
        """

        raw = raw or {}
        max_pages = int(_first_present(raw, "maxPages", "max_pages") or 0)
        delay = _first_present(raw, "delayMs", "delay_ms", "delay")
        user_agent = _first_present(raw, "userAgent", "user_agent")
        if user_agent is not None:
            user_agent = str(user_agent).strip() or None
        return cls(
            max_pages=max(1, max_pages) if max_pages else default_max_pages,
            delay_ms=max(0, int(delay)) if delay is not None else None,
            user_agent=user_agent,
        )


@dataclass(frozen=True)
class ScraperConfig:
    """
    Stored scraper configuration as seen by the scraping core.
    """

    id: int
    owner_id: int
    platform: str
    target_url: str
    name: str = ""
    selectors: dict[str, str] = field(default_factory=dict)
    settings: ScraperSettings = field(default_factory=ScraperSettings)
    status: str = "paused"
    last_run: datetime | None = None
    total_reviews: int = 0
    success_rate: float = 0.0


@dataclass(frozen=True)
class PersistedReview:
    """
    A stored review. sentiment and keywords are owned by the enrichment service.
    """

    id: int
    scraper_id: int
    owner_id: int
    platform: str
    author_name: str
    rating: float
    title: str
    content: str
    review_date: str
    source_url: str
    author_location: str | None = None
    verified_purchase: bool = False
    helpful_votes: int = 0
    scraped_at: datetime | None = None
    sentiment: str | None = None
    keywords: list[str] | None = None


@dataclass(frozen=True)
class ReviewStats:
    total_scraped: int = 0
    new_count: int = 0
    updated_count: int = 0


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of one scraper run. Failures are reported here, never raised.
    """

    success: bool
    scraper_id: int
    reviews: list[PersistedReview] = field(default_factory=list)
    stats: ReviewStats = field(default_factory=ReviewStats)
    error: str | None = None
    error_message: str | None = None
    job_id: int | None = None


@dataclass(frozen=True)
class ScrapingJobRecord:
    """
    One entry of a scraper's run history.
    """

    id: int
    scraper_id: int
    status: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    reviews_scraped: int = 0
    execution_time_ms: int | None = None
