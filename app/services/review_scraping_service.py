"""
app/services/review_scraping_service.py

Service orchestration for review scraper runs.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.review_scraping import RunResult, ScrapingJobRecord
from app.scraping.backup import BackupSidecar, build_backup_storage
from app.scraping.browser import BrowserSessionFactory, PlaywrightSessionFactory
from app.scraping.config import ReviewScrapingSettings, get_review_scraping_settings
from app.scraping.controller import RunController
from app.scraping.coordination import RunCoordinator
from app.scraping.engine import ReviewScrapingEngine
from app.scraping.registry import AdapterRegistry
from app.scraping.storage import SQLAlchemyReviewStore


class ReviewScrapingService:
    """
    Builds a scraping engine per database session around process-wide
    run coordination and backup dispatch.
    """

    def __init__(
        self,
        *,
        settings: ReviewScrapingSettings | None = None,
        registry: AdapterRegistry | None = None,
        browser: BrowserSessionFactory | None = None,
        backup: BackupSidecar | None = None,
        coordinator: RunCoordinator | None = None,
    ) -> None:
        self._settings = settings or get_review_scraping_settings()
        self._registry = registry or AdapterRegistry()
        self._browser = browser or PlaywrightSessionFactory(
            headless=self._settings.headless,
            navigation_timeout_seconds=self._settings.navigation_timeout_seconds,
        )
        if backup is None:
            storage = build_backup_storage(self._settings) if self._settings.backup_enabled else None
            backup = BackupSidecar(storage=storage, enabled=self._settings.backup_enabled)
        self._backup = backup
        self._coordinator = coordinator or RunCoordinator()

    def build_engine(self, *, db: Session) -> ReviewScrapingEngine:
        store = SQLAlchemyReviewStore(
            session=db,
            default_max_pages=self._settings.default_max_pages,
        )
        controller = RunController(
            registry=self._registry,
            browser=self._browser,
            default_user_agent=self._settings.default_user_agent,
        )
        return ReviewScrapingEngine(
            store=store,
            controller=controller,
            coordinator=self._coordinator,
            backup=self._backup,
        )

    async def run_scraper(self, *, db: Session, scraper_id: int) -> RunResult:
        return await self.build_engine(db=db).execute(scraper_id)

    def stop_scraper(self, *, db: Session, scraper_id: int) -> bool:
        return self.build_engine(db=db).stop(scraper_id)

    def list_jobs(self, *, db: Session, scraper_id: int, limit: int = 10) -> list[ScrapingJobRecord]:
        store = SQLAlchemyReviewStore(session=db)
        return store.list_scraping_jobs(scraper_id, limit=limit)

    async def shutdown(self) -> None:
        await self._backup.drain()


@lru_cache(maxsize=1)
def get_review_scraping_service() -> ReviewScrapingService:
    """
    Build and cache the review scraping service.
    """

    return ReviewScrapingService()
