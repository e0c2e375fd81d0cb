"""
app/schemas package marker.
"""

from app.schemas.review_scraping import (
    ReviewResponse,
    ReviewStatsResponse,
    RunResultResponse,
    ScrapingJobResponse,
    StopScraperResponse,
)

__all__ = [
    "ReviewResponse",
    "ReviewStatsResponse",
    "RunResultResponse",
    "ScrapingJobResponse",
    "StopScraperResponse",
]
