"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from app.domain.review_scraping import PersistedReview, ReviewStats


@dataclass(frozen=True)
class RawReviewRecord:
    """
    One review as extracted from a page, before persistence.
    """

    author_name: str
    rating: float
    title: str
    content: str
    review_date: str
    source_url: str
    platform: str
    author_location: str | None = None
    verified_purchase: bool = False
    helpful_votes: int = 0

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.source_url, self.author_name, self.review_date)

    def as_fields(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReconciliationOutcome:
    """
    Reviews created by one reconciliation pass plus run statistics.
    """

    saved_records: list[PersistedReview] = field(default_factory=list)
    stats: ReviewStats = field(default_factory=ReviewStats)
