"""
app/domain package marker.
"""

from app.domain.review_scraping import (
    PersistedReview,
    ReviewStats,
    RunResult,
    ScraperConfig,
    ScraperSettings,
    ScrapingJobRecord,
)

__all__ = [
    "PersistedReview",
    "ReviewStats",
    "RunResult",
    "ScraperConfig",
    "ScraperSettings",
    "ScrapingJobRecord",
]
