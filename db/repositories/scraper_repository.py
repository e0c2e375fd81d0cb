"""
Repository for scraper lookup and run-state updates.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from db.models.scraper import Scraper


class ScraperRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_scraper(self, scraper_id: int) -> Scraper | None:
        return self._session.get(Scraper, scraper_id)

    def set_status(self, *, scraper_id: int, status: str) -> Scraper | None:
        scraper = self.get_scraper(scraper_id)
        if scraper is None:
            return None
        scraper.status = status
        return scraper

    def set_run_metadata(
        self,
        *,
        scraper_id: int,
        last_run: datetime,
        total_reviews: int,
        status: str,
    ) -> Scraper | None:
        scraper = self.get_scraper(scraper_id)
        if scraper is None:
            return None
        scraper.last_run = last_run
        scraper.total_reviews = total_reviews
        scraper.status = status
        return scraper
