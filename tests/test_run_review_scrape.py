from __future__ import annotations

import contextlib
import json

import pytest

from app.domain.review_scraping import ReviewStats, RunResult
from app.scraping.errors import ScraperNotFound
from scripts import run_review_scrape


class StubService:
    def __init__(self) -> None:
        self.known_scrapers = {1}
        self.shutdowns = 0

    def stop_scraper(self, *, db, scraper_id: int) -> bool:
        if scraper_id not in self.known_scrapers:
            raise ScraperNotFound(scraper_id)
        return False

    async def run_scraper(self, *, db, scraper_id: int) -> RunResult:
        return RunResult(
            success=True,
            scraper_id=scraper_id,
            stats=ReviewStats(total_scraped=2, new_count=2, updated_count=0),
            job_id=4,
        )

    async def shutdown(self) -> None:
        self.shutdowns += 1


@pytest.fixture()
def service(monkeypatch: pytest.MonkeyPatch) -> StubService:
    stub = StubService()
    monkeypatch.setattr(run_review_scrape, "ReviewScrapingService", lambda: stub)
    monkeypatch.setattr(run_review_scrape, "SessionLocal", contextlib.nullcontext)
    return stub


def test_stop_known_scraper(service: StubService, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_review_scrape.main(["--scraper-id", "1", "--stop"]) == 0

    assert json.loads(capsys.readouterr().out) == {"scraper_id": 1, "status": "paused", "signalled": False}


def test_stop_unknown_scraper_prints_error(service: StubService, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_review_scrape.main(["--scraper-id", "99", "--stop"]) == 1

    body = json.loads(capsys.readouterr().out)
    assert body["scraper_id"] == 99
    assert body["error"] == "ScraperNotFound"
    assert "99" in body["error_message"]


def test_run_prints_result(service: StubService, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_review_scrape.main(["--scraper-id", "1"]) == 0

    body = json.loads(capsys.readouterr().out)
    assert body["success"] is True
    assert body["job_id"] == 4
    assert body["stats"]["new_count"] == 2
    assert service.shutdowns == 1
