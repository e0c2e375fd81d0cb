from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import scrapers_router
from app.domain.review_scraping import PersistedReview, ReviewStats, RunResult, ScrapingJobRecord
from app.scraping.errors import ScraperNotFound
from app.services.review_scraping_service import get_review_scraping_service
from db.session import get_db
from tests.fakes import AMAZON_URL


class StubScrapingService:
    def __init__(self) -> None:
        self.results: dict[int, RunResult] = {}
        self.known_scrapers = {1}
        self.running = {1}
        self.jobs: list[ScrapingJobRecord] = []
        self.list_limits: list[int] = []

    async def run_scraper(self, *, db, scraper_id: int) -> RunResult:
        return self.results[scraper_id]

    def stop_scraper(self, *, db, scraper_id: int) -> bool:
        if scraper_id not in self.known_scrapers:
            raise ScraperNotFound(scraper_id)
        return scraper_id in self.running

    def list_jobs(self, *, db, scraper_id: int, limit: int = 10) -> list[ScrapingJobRecord]:
        self.list_limits.append(limit)
        return [job for job in self.jobs if job.scraper_id == scraper_id][:limit]


@pytest.fixture()
def service() -> StubScrapingService:
    return StubScrapingService()


@pytest.fixture()
def client(service: StubScrapingService) -> TestClient:
    application = FastAPI()
    application.include_router(scrapers_router)
    application.dependency_overrides[get_db] = lambda: None
    application.dependency_overrides[get_review_scraping_service] = lambda: service
    return TestClient(application)


def test_run_success_returns_reviews_and_stats(client: TestClient, service: StubScrapingService) -> None:
    review = PersistedReview(
        id=100,
        scraper_id=1,
        owner_id=7,
        platform="amazon",
        author_name="Jane Doe",
        rating=4.0,
        title="Solid kettle",
        content="Boils fast.",
        review_date="March 3, 2024",
        source_url=AMAZON_URL,
        helpful_votes=12,
    )
    service.results[1] = RunResult(
        success=True,
        scraper_id=1,
        reviews=[review],
        stats=ReviewStats(total_scraped=3, new_count=1, updated_count=2),
        job_id=5,
    )

    response = client.post("/scrapers/1/run")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["job_id"] == 5
    assert body["stats"] == {"total_scraped": 3, "new_count": 1, "updated_count": 2}
    assert body["reviews"][0]["author_name"] == "Jane Doe"
    assert body["reviews"][0]["helpful_votes"] == 12


def test_run_failure_is_reported_in_body(client: TestClient, service: StubScrapingService) -> None:
    service.results[1] = RunResult(
        success=False,
        scraper_id=1,
        error="AdapterFailure",
        error_message="amazon scrape failed: TimeoutError: navigation timeout",
        job_id=6,
    )

    response = client.post("/scrapers/1/run")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "AdapterFailure"
    assert body["reviews"] == []


@pytest.mark.parametrize(
    ("error", "status_code"),
    [("ScraperNotFound", 404), ("RunAlreadyInFlight", 409)],
)
def test_run_maps_errors_to_status_codes(
    client: TestClient,
    service: StubScrapingService,
    error: str,
    status_code: int,
) -> None:
    service.results[1] = RunResult(success=False, scraper_id=1, error=error, error_message="nope")

    response = client.post("/scrapers/1/run")

    assert response.status_code == status_code
    assert response.json()["detail"] == "nope"


def test_stop_reports_signal(client: TestClient) -> None:
    response = client.post("/scrapers/1/stop")

    assert response.status_code == 200
    assert response.json() == {"scraper_id": 1, "status": "paused", "signalled": True}


def test_stop_unknown_scraper_is_404(client: TestClient) -> None:
    response = client.post("/scrapers/2/stop")

    assert response.status_code == 404
    assert "2" in response.json()["detail"]


def test_list_jobs(client: TestClient, service: StubScrapingService) -> None:
    started = datetime(2024, 3, 3, 12, 0, tzinfo=timezone.utc)
    service.jobs = [
        ScrapingJobRecord(id=2, scraper_id=1, status="failed", started_at=started, error_message="boom"),
        ScrapingJobRecord(id=1, scraper_id=1, status="completed", started_at=started, reviews_scraped=4),
    ]

    response = client.get("/scrapers/1/jobs", params={"limit": 5})

    assert response.status_code == 200
    assert [job["id"] for job in response.json()] == [2, 1]
    assert response.json()[1]["reviews_scraped"] == 4
    assert service.list_limits == [5]


def test_list_jobs_rejects_out_of_range_limit(client: TestClient) -> None:
    assert client.get("/scrapers/1/jobs", params={"limit": 0}).status_code == 422
    assert client.get("/scrapers/1/jobs", params={"limit": 101}).status_code == 422
