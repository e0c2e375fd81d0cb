"""
app/api/routers/scrapers.py

Review scraper run and stop endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.review_scraping import RunResultResponse, ScrapingJobResponse, StopScraperResponse
from app.scraping.errors import RunAlreadyInFlight, ScraperNotFound
from app.services.review_scraping_service import (
    ReviewScrapingService,
    get_review_scraping_service,
)
from db.models.scraper import ScraperStatus
from db.session import get_db

router = APIRouter(prefix="/scrapers", tags=["review-scraping"])


@router.post("/{scraper_id}/run", response_model=RunResultResponse)
async def run_scraper(
    scraper_id: int,
    db: Session = Depends(get_db),
    scraping_service: ReviewScrapingService = Depends(get_review_scraping_service),
) -> RunResultResponse:
    """
    Run one scraper now and return its outcome.

    Scrape failures are reported in the body with success=false.
    """

    result = await scraping_service.run_scraper(db=db, scraper_id=scraper_id)
    if result.error == ScraperNotFound.code:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error_message)
    if result.error == RunAlreadyInFlight.code:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.error_message)
    return RunResultResponse.from_domain(result)


@router.post("/{scraper_id}/stop", response_model=StopScraperResponse)
def stop_scraper(
    scraper_id: int,
    db: Session = Depends(get_db),
    scraping_service: ReviewScrapingService = Depends(get_review_scraping_service),
) -> StopScraperResponse:
    """
    Pause a scraper and ask any in-flight run to stop before its next page.
    """

    try:
        signalled = scraping_service.stop_scraper(db=db, scraper_id=scraper_id)
    except ScraperNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return StopScraperResponse(
        scraper_id=scraper_id,
        status=ScraperStatus.PAUSED,
        signalled=signalled,
    )


@router.get("/{scraper_id}/jobs", response_model=list[ScrapingJobResponse])
def list_scraper_jobs(
    scraper_id: int,
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    scraping_service: ReviewScrapingService = Depends(get_review_scraping_service),
) -> list[ScrapingJobResponse]:
    """
    Most recent runs for one scraper, newest first.
    """

    jobs = scraping_service.list_jobs(db=db, scraper_id=scraper_id, limit=limit)
    return [ScrapingJobResponse.from_domain(job) for job in jobs]
