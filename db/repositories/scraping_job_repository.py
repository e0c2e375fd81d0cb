"""
Repository for scraping run history and success-rate bookkeeping.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from db.models.scraper import Scraper
from db.models.scraping_job import ScrapingJob, ScrapingJobStatus


class ScrapingJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_job(self, *, scraper_id: int) -> ScrapingJob:
        job = ScrapingJob(
            scraper_id=scraper_id,
            status=ScrapingJobStatus.RUNNING,
            started_at=datetime.now(timezone.utc),
            reviews_scraped=0,
        )
        self._session.add(job)
        self._session.flush()
        self._session.refresh(job)
        return job

    def get_job(self, job_id: int) -> ScrapingJob | None:
        return self._session.get(ScrapingJob, job_id)

    def list_jobs(self, *, scraper_id: int, limit: int = 10) -> list[ScrapingJob]:
        stmt: Select[tuple[ScrapingJob]] = (
            select(ScrapingJob)
            .where(ScrapingJob.scraper_id == scraper_id)
            .order_by(ScrapingJob.id.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def mark_finished(
        self,
        *,
        job_id: int,
        status: str,
        reviews_scraped: int = 0,
        error_message: str | None = None,
    ) -> ScrapingJob | None:
        job = self.get_job(job_id)
        if job is None:
            return None
        completed_at = datetime.now(timezone.utc)
        job.status = status
        job.completed_at = completed_at
        job.reviews_scraped = reviews_scraped
        job.error_message = error_message
        if job.started_at is not None:
            started_at = job.started_at
            if started_at.tzinfo is None:
                started_at = started_at.replace(tzinfo=timezone.utc)
            job.execution_time_ms = int((completed_at - started_at).total_seconds() * 1000)
        return job

    def refresh_success_rate(self, *, scraper_id: int) -> Decimal | None:
        """
        Recompute scraper.success_rate as the percentage of finished runs that completed.

        Cancelled and still-running jobs are not counted.
        """

        scraper = self._session.get(Scraper, scraper_id)
        if scraper is None:
            return None

        self._session.flush()
        counted = (ScrapingJobStatus.COMPLETED, ScrapingJobStatus.FAILED)
        rows = self._session.execute(
            select(ScrapingJob.status, func.count(ScrapingJob.id))
            .where(ScrapingJob.scraper_id == scraper_id, ScrapingJob.status.in_(counted))
            .group_by(ScrapingJob.status)
        ).all()
        counts = {status: count for status, count in rows}
        finished = sum(counts.values())
        if finished == 0:
            return scraper.success_rate

        rate = Decimal(counts.get(ScrapingJobStatus.COMPLETED, 0) * 100) / Decimal(finished)
        scraper.success_rate = rate.quantize(Decimal("0.01"))
        return scraper.success_rate
