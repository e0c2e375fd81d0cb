"""
Storage layer interface consumed by the review scraping core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from app.domain.review_scraping import PersistedReview, ScraperConfig, ScrapingJobRecord


class ReviewStore(ABC):
    """
    Persistence for scrapers, their reviews and their run history.

    Every write is durable once the call returns.
    """

    @abstractmethod
    def find_scraper_by_id(self, scraper_id: int) -> ScraperConfig | None:
        """
        Load one scraper configuration, or None when it does not exist.
        """

    @abstractmethod
    def update_scraper_status(self, scraper_id: int, status: str) -> bool:
        """
        Set the scraper status. Returns False when the scraper does not exist.
        """

    @abstractmethod
    def update_scraper_run_metadata(
        self,
        scraper_id: int,
        *,
        last_run: datetime,
        total_reviews: int,
        status: str,
    ) -> None:
        """
        Record the outcome of a successful run.
        """

    @abstractmethod
    def find_review_by_identity(
        self,
        scraper_id: int,
        source_url: str,
        author_name: str,
        review_date: str,
    ) -> PersistedReview | None:
        """
        Find the stored review matching (source_url, author_name, review_date).
        """

    @abstractmethod
    def create_review(self, fields: dict[str, Any]) -> PersistedReview:
        """
        Insert a review and return it with its assigned id.
        """

    @abstractmethod
    def update_review(self, review_id: int, fields: dict[str, Any]) -> PersistedReview:
        """
        Overwrite the scraped fields of an existing review.
        """

    @abstractmethod
    def start_scraping_job(self, scraper_id: int) -> ScrapingJobRecord:
        """
        Open a run history entry in the running state.
        """

    @abstractmethod
    def finish_scraping_job(
        self,
        job_id: int,
        *,
        status: str,
        reviews_scraped: int = 0,
        error_message: str | None = None,
    ) -> ScrapingJobRecord | None:
        """
        Close a run history entry.
        """

    @abstractmethod
    def list_scraping_jobs(self, scraper_id: int, *, limit: int = 10) -> list[ScrapingJobRecord]:
        """
        Most recent run history entries, newest first.
        """
