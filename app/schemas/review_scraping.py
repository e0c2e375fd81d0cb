"""
app/schemas/review_scraping.py

Request/response schemas for review scraper operations.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.review_scraping import PersistedReview, RunResult, ScrapingJobRecord


class ReviewResponse(BaseModel):
    id: int
    scraper_id: int
    platform: str
    author_name: str
    author_location: str | None = None
    rating: float
    title: str
    content: str
    review_date: str
    verified_purchase: bool = False
    helpful_votes: int = Field(default=0, ge=0)
    source_url: str
    scraped_at: datetime | None = None
    sentiment: str | None = None
    keywords: list[str] | None = None

    @classmethod
    def from_domain(cls, review: PersistedReview) -> "ReviewResponse":
        return cls(
            id=review.id,
            scraper_id=review.scraper_id,
            platform=review.platform,
            author_name=review.author_name,
            author_location=review.author_location,
            rating=review.rating,
            title=review.title,
            content=review.content,
            review_date=review.review_date,
            verified_purchase=review.verified_purchase,
            helpful_votes=review.helpful_votes,
            source_url=review.source_url,
            scraped_at=review.scraped_at,
            sentiment=review.sentiment,
            keywords=review.keywords,
        )


class ReviewStatsResponse(BaseModel):
    total_scraped: int = Field(..., ge=0)
    new_count: int = Field(..., ge=0)
    updated_count: int = Field(..., ge=0)


class RunResultResponse(BaseModel):
    """
    API response model for one scraper run.
    """

    success: bool
    scraper_id: int
    job_id: int | None = None
    reviews: list[ReviewResponse] = Field(default_factory=list)
    stats: ReviewStatsResponse
    error: str | None = None
    error_message: str | None = None

    @classmethod
    def from_domain(cls, result: RunResult) -> "RunResultResponse":
        return cls(
            success=result.success,
            scraper_id=result.scraper_id,
            job_id=result.job_id,
            reviews=[ReviewResponse.from_domain(review) for review in result.reviews],
            stats=ReviewStatsResponse(
                total_scraped=result.stats.total_scraped,
                new_count=result.stats.new_count,
                updated_count=result.stats.updated_count,
            ),
            error=result.error,
            error_message=result.error_message,
        )


class StopScraperResponse(BaseModel):
    scraper_id: int
    status: str
    signalled: bool = Field(
        ...,
        description="True when an in-flight run was asked to stop before its next page.",
    )


class ScrapingJobResponse(BaseModel):
    id: int
    scraper_id: int
    status: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    reviews_scraped: int = Field(default=0, ge=0)
    execution_time_ms: int | None = None

    @classmethod
    def from_domain(cls, job: ScrapingJobRecord) -> "ScrapingJobResponse":
        return cls(
            id=job.id,
            scraper_id=job.scraper_id,
            status=job.status,
            started_at=job.started_at,
            completed_at=job.completed_at,
            error_message=job.error_message,
            reviews_scraped=job.reviews_scraped,
            execution_time_ms=job.execution_time_ms,
        )
