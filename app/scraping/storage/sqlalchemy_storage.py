"""
SQLAlchemy-backed storage implementation for review scraping.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.review_scraping import (
    PersistedReview,
    ScraperConfig,
    ScraperSettings,
    ScrapingJobRecord,
)
from app.scraping.storage.base import ReviewStore
from db.models.review import Review
from db.models.scraper import Scraper
from db.models.scraping_job import ScrapingJob, ScrapingJobStatus
from db.repositories.review_repository import ReviewRepository
from db.repositories.scraper_repository import ScraperRepository
from db.repositories.scraping_job_repository import ScrapingJobRepository

T = TypeVar("T")


def scraper_to_config(scraper: Scraper, *, default_max_pages: int = 10) -> ScraperConfig:
    configuration = scraper.configuration or {}
    selectors = configuration.get("selectors") or {}
    return ScraperConfig(
        id=scraper.id,
        owner_id=scraper.user_id,
        name=scraper.name,
        platform=scraper.platform,
        target_url=scraper.target_url,
        selectors={str(key): str(value) for key, value in selectors.items() if value},
        settings=ScraperSettings.from_mapping(
            configuration.get("settings"),
            default_max_pages=default_max_pages,
        ),
        status=scraper.status,
        last_run=scraper.last_run,
        total_reviews=scraper.total_reviews or 0,
        success_rate=float(scraper.success_rate or 0),
    )


def review_to_domain(review: Review) -> PersistedReview:
    return PersistedReview(
        id=review.id,
        scraper_id=review.scraper_id,
        owner_id=review.user_id,
        platform=review.platform,
        author_name=review.author_name,
        author_location=review.author_location,
        rating=review.rating,
        title=review.title,
        content=review.content,
        review_date=review.review_date,
        verified_purchase=bool(review.verified_purchase),
        helpful_votes=review.helpful_votes or 0,
        source_url=review.source_url,
        scraped_at=review.scraped_date,
        sentiment=review.sentiment,
        keywords=list(review.keywords) if review.keywords is not None else None,
    )


def job_to_domain(job: ScrapingJob) -> ScrapingJobRecord:
    return ScrapingJobRecord(
        id=job.id,
        scraper_id=job.scraper_id,
        status=job.status,
        started_at=job.started_at,
        completed_at=job.completed_at,
        error_message=job.error_message,
        reviews_scraped=job.reviews_scraped,
        execution_time_ms=job.execution_time_ms,
    )


class SQLAlchemyReviewStore(ReviewStore):
    """
    Persist scraper state and reviews through repositories, committing each write.
    """

    def __init__(self, *, session: Session, default_max_pages: int = 10) -> None:
        self._session = session
        self._default_max_pages = default_max_pages
        self._scrapers = ScraperRepository(session)
        self._reviews = ReviewRepository(session)
        self._jobs = ScrapingJobRepository(session)

    def find_scraper_by_id(self, scraper_id: int) -> ScraperConfig | None:
        scraper = self._scrapers.get_scraper(scraper_id)
        if scraper is None:
            return None
        return scraper_to_config(scraper, default_max_pages=self._default_max_pages)

    def update_scraper_status(self, scraper_id: int, status: str) -> bool:
        return self._write(lambda: self._scrapers.set_status(scraper_id=scraper_id, status=status)) is not None

    def update_scraper_run_metadata(
        self,
        scraper_id: int,
        *,
        last_run: datetime,
        total_reviews: int,
        status: str,
    ) -> None:
        self._write(
            lambda: self._scrapers.set_run_metadata(
                scraper_id=scraper_id,
                last_run=last_run,
                total_reviews=total_reviews,
                status=status,
            )
        )

    def find_review_by_identity(
        self,
        scraper_id: int,
        source_url: str,
        author_name: str,
        review_date: str,
    ) -> PersistedReview | None:
        review = self._reviews.find_by_identity(
            scraper_id=scraper_id,
            source_url=source_url,
            author_name=author_name,
            review_date=review_date,
        )
        return review_to_domain(review) if review is not None else None

    def create_review(self, fields: dict[str, Any]) -> PersistedReview:
        review = self._write(lambda: self._reviews.create_review(dict(fields)))
        return review_to_domain(review)

    def update_review(self, review_id: int, fields: dict[str, Any]) -> PersistedReview:
        review = self._write(lambda: self._reviews.update_review(review_id, dict(fields)))
        if review is None:
            raise LookupError(f"Review not found: {review_id}")
        return review_to_domain(review)

    def start_scraping_job(self, scraper_id: int) -> ScrapingJobRecord:
        job = self._write(lambda: self._jobs.create_job(scraper_id=scraper_id))
        return job_to_domain(job)

    def finish_scraping_job(
        self,
        job_id: int,
        *,
        status: str,
        reviews_scraped: int = 0,
        error_message: str | None = None,
    ) -> ScrapingJobRecord | None:
        def _finish() -> ScrapingJob | None:
            job = self._jobs.mark_finished(
                job_id=job_id,
                status=status,
                reviews_scraped=reviews_scraped,
                error_message=error_message,
            )
            if job is not None and status != ScrapingJobStatus.CANCELLED:
                self._jobs.refresh_success_rate(scraper_id=job.scraper_id)
            return job

        job = self._write(_finish)
        return job_to_domain(job) if job is not None else None

    def list_scraping_jobs(self, scraper_id: int, *, limit: int = 10) -> list[ScrapingJobRecord]:
        return [job_to_domain(job) for job in self._jobs.list_jobs(scraper_id=scraper_id, limit=limit)]

    def _write(self, operation: Callable[[], T]) -> T:
        try:
            result = operation()
            self._session.commit()
            return result
        except SQLAlchemyError:
            self._session.rollback()
            raise
