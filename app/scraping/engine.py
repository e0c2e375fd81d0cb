"""
Review scraping engine: the per-scraper run entry point.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from app.domain.review_scraping import ReviewStats, RunResult, ScraperConfig
from app.scraping.backup import BackupSidecar, build_backup_payload
from app.scraping.controller import RunController
from app.scraping.coordination import CancellationToken, RunCoordinator
from app.scraping.errors import RunAlreadyInFlight, RunCancelled, ScraperNotFound, ScrapingError
from app.scraping.logging_utils import log_event
from app.scraping.reconciliation import ReconciliationEngine
from app.scraping.storage import ReviewStore
from app.scraping.types import ReconciliationOutcome
from db.models.scraper import ScraperStatus
from db.models.scraping_job import ScrapingJobStatus

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_CODE = "UnexpectedError"


def error_code(exc: BaseException) -> str:
    if isinstance(exc, ScrapingError):
        return exc.code
    return UNEXPECTED_ERROR_CODE


class ReviewScrapingEngine:
    """
    Orchestrates one scraper run: status transitions, scraping,
    reconciliation, run history and backup dispatch.

    Failures are returned as unsuccessful RunResults and never raised.
    Store and reconciliation calls run in a worker thread, one at a time,
    so database I/O never blocks the event loop.
    """

    def __init__(
        self,
        *,
        store: ReviewStore,
        controller: RunController,
        coordinator: RunCoordinator | None = None,
        backup: BackupSidecar | None = None,
        reconciler: ReconciliationEngine | None = None,
    ) -> None:
        self._store = store
        self._controller = controller
        self._coordinator = coordinator or RunCoordinator()
        self._backup = backup
        self._reconciler = reconciler or ReconciliationEngine(store=store)

    async def execute(self, scraper_id: int) -> RunResult:
        try:
            token = self._coordinator.acquire(scraper_id)
        except RunAlreadyInFlight as exc:
            log_event(logger, logging.WARNING, "scrape_run_rejected", scraper_id=scraper_id, error=str(exc))
            return self._failed_result(scraper_id, exc)

        try:
            return await self._run(scraper_id, token)
        finally:
            self._coordinator.release(scraper_id)

    def stop(self, scraper_id: int) -> bool:
        """
        Pause the scraper and signal its in-flight run, if any.

        Returns True when a running scrape was signalled. The signal is
        honoured before the next page fetch.
        """

        if not self._store.update_scraper_status(scraper_id, ScraperStatus.PAUSED):
            raise ScraperNotFound(scraper_id)
        signalled = self._coordinator.cancel(scraper_id)
        log_event(
            logger,
            logging.INFO,
            "scraper_stop_requested",
            scraper_id=scraper_id,
            signalled=signalled,
        )
        return signalled

    async def _run(self, scraper_id: int, token: CancellationToken) -> RunResult:
        try:
            config = await asyncio.to_thread(self._store.find_scraper_by_id, scraper_id)
        except Exception as exc:
            log_event(logger, logging.ERROR, "scrape_run_failed", scraper_id=scraper_id, error=str(exc))
            return self._failed_result(scraper_id, exc)
        if config is None:
            exc = ScraperNotFound(scraper_id)
            log_event(logger, logging.WARNING, "scrape_run_failed", scraper_id=scraper_id, error=str(exc))
            return self._failed_result(scraper_id, exc)

        started = time.monotonic()
        job_id: int | None = None
        try:
            # A stop that landed while the scraper was being loaded must not
            # be overwritten by the active status.
            token.raise_if_cancelled()
            await asyncio.to_thread(self._store.update_scraper_status, scraper_id, ScraperStatus.ACTIVE)
            job = await asyncio.to_thread(self._store.start_scraping_job, scraper_id)
            job_id = job.id
            log_event(
                logger,
                logging.INFO,
                "scrape_run_started",
                scraper_id=scraper_id,
                platform=config.platform,
                job_id=job_id,
            )

            raw_records = await self._controller.execute(config, cancel_token=token)
            outcome = await asyncio.to_thread(
                self._reconciler.reconcile,
                scraper_id=config.id,
                owner_id=config.owner_id,
                raw_records=raw_records,
            )

            # A stop that arrived after the last page leaves the scraper paused.
            final_status = ScraperStatus.PAUSED if token.cancelled else ScraperStatus.COMPLETED
            await asyncio.to_thread(
                self._store.update_scraper_run_metadata,
                scraper_id,
                last_run=datetime.now(timezone.utc),
                total_reviews=config.total_reviews + outcome.stats.new_count,
                status=final_status,
            )
            await asyncio.to_thread(
                self._store.finish_scraping_job,
                job_id,
                status=ScrapingJobStatus.COMPLETED,
                reviews_scraped=outcome.stats.total_scraped,
            )
        except RunCancelled as exc:
            await self._record_failure(
                config=config,
                job_id=job_id,
                exc=exc,
                job_status=ScrapingJobStatus.CANCELLED,
                scraper_status=ScraperStatus.PAUSED,
                event="scrape_run_cancelled",
            )
            return self._failed_result(scraper_id, exc, job_id=job_id)
        except Exception as exc:
            await self._record_failure(
                config=config,
                job_id=job_id,
                exc=exc,
                job_status=ScrapingJobStatus.FAILED,
                scraper_status=ScraperStatus.ERROR,
                event="scrape_run_failed",
            )
            return self._failed_result(scraper_id, exc, job_id=job_id)

        self._dispatch_backup(config=config, outcome=outcome, job_id=job_id)
        log_event(
            logger,
            logging.INFO,
            "scrape_run_completed",
            scraper_id=scraper_id,
            job_id=job_id,
            total_scraped=outcome.stats.total_scraped,
            new_count=outcome.stats.new_count,
            updated_count=outcome.stats.updated_count,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return RunResult(
            success=True,
            scraper_id=scraper_id,
            reviews=list(outcome.saved_records),
            stats=outcome.stats,
            job_id=job_id,
        )

    async def _record_failure(
        self,
        *,
        config: ScraperConfig,
        job_id: int | None,
        exc: BaseException,
        job_status: str,
        scraper_status: str,
        event: str,
    ) -> None:
        log_event(
            logger,
            logging.ERROR if scraper_status == ScraperStatus.ERROR else logging.INFO,
            event,
            scraper_id=config.id,
            platform=config.platform,
            job_id=job_id,
            error_type=error_code(exc),
            error=str(exc),
        )
        try:
            await asyncio.to_thread(self._store.update_scraper_status, config.id, scraper_status)
            if job_id is not None:
                await asyncio.to_thread(
                    self._store.finish_scraping_job,
                    job_id,
                    status=job_status,
                    error_message=str(exc),
                )
        except Exception:
            logger.exception("Failed to record run failure for scraper %s", config.id)

    def _dispatch_backup(
        self,
        *,
        config: ScraperConfig,
        outcome: ReconciliationOutcome,
        job_id: int | None,
    ) -> None:
        if self._backup is None or not self._backup.enabled:
            return
        try:
            payload = build_backup_payload(
                config=config,
                reviews=outcome.saved_records,
                stats=outcome.stats,
                job_id=job_id,
            )
            self._backup.dispatch(scraper_id=config.id, owner_id=config.owner_id, payload=payload)
        except Exception as exc:
            log_event(logger, logging.WARNING, "backup_failed", scraper_id=config.id, error=str(exc))

    @staticmethod
    def _failed_result(
        scraper_id: int,
        exc: BaseException,
        *,
        job_id: int | None = None,
    ) -> RunResult:
        return RunResult(
            success=False,
            scraper_id=scraper_id,
            reviews=[],
            stats=ReviewStats(),
            error=error_code(exc),
            error_message=str(exc),
            job_id=job_id,
        )
