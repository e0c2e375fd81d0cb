"""
Error taxonomy for review scraping runs.

Every error carries a stable ``code`` that is reported in ``RunResult.error``.
"""

from __future__ import annotations


class ScrapingError(Exception):
    """Base exception for review scraping failures."""

    code = "ScrapingError"


class ScraperNotFound(ScrapingError):
    """Raised when a run references a scraper id absent from storage."""

    code = "ScraperNotFound"

    def __init__(self, scraper_id: int) -> None:
        super().__init__(f"Scraper not found: {scraper_id}")
        self.scraper_id = scraper_id


class UnsupportedPlatform(ScrapingError):
    """Raised when no adapter is registered for a scraper's platform."""

    code = "UnsupportedPlatform"

    def __init__(self, platform: str, allowed: list[str] | None = None) -> None:
        message = f"Unsupported platform: {platform}"
        if allowed:
            message = f"{message}. Allowed platforms: {', '.join(allowed)}."
        super().__init__(message)
        self.platform = platform


class AdapterFailure(ScrapingError):
    """Raised when browser navigation or extraction fails; the cause is chained."""

    code = "AdapterFailure"

    def __init__(self, platform: str, cause: BaseException) -> None:
        super().__init__(f"{platform} scrape failed: {type(cause).__name__}: {cause}")
        self.platform = platform
        self.cause = cause


class ReconciliationFailure(ScrapingError):
    """Raised when creating or updating a review fails during reconciliation."""

    code = "ReconciliationFailure"


class BackupFailure(ScrapingError):
    """Raised by backup storage; always handled inside the backup sidecar."""

    code = "BackupFailure"


class RunAlreadyInFlight(ScrapingError):
    """Raised when a scraper already has a run in progress."""

    code = "RunAlreadyInFlight"

    def __init__(self, scraper_id: int) -> None:
        super().__init__(f"A run is already in progress for scraper {scraper_id}")
        self.scraper_id = scraper_id


class RunCancelled(ScrapingError):
    """Raised between page fetches after a stop request."""

    code = "RunCancelled"

    def __init__(self, scraper_id: int | None = None) -> None:
        suffix = f" for scraper {scraper_id}" if scraper_id is not None else ""
        super().__init__(f"Run cancelled{suffix}")
        self.scraper_id = scraper_id
