"""
Run or stop one review scraper from the CLI.
"""

from __future__ import annotations

import argparse
import asyncio
import json

from app.domain.review_scraping import RunResult
from app.scraping.errors import ScraperNotFound
from app.scraping.logging_utils import configure_logging
from app.services.review_scraping_service import ReviewScrapingService
from db.session import SessionLocal


def _result_payload(result: RunResult) -> dict[str, object]:
    return {
        "success": result.success,
        "scraper_id": result.scraper_id,
        "job_id": result.job_id,
        "stats": {
            "total_scraped": result.stats.total_scraped,
            "new_count": result.stats.new_count,
            "updated_count": result.stats.updated_count,
        },
        "new_review_ids": [review.id for review in result.reviews],
        "error": result.error,
        "error_message": result.error_message,
    }


async def _run(service: ReviewScrapingService, scraper_id: int) -> RunResult:
    with SessionLocal() as db:
        result = await service.run_scraper(db=db, scraper_id=scraper_id)
    await service.shutdown()
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one review scraper.")
    parser.add_argument("--scraper-id", dest="scraper_id", type=int, required=True)
    parser.add_argument(
        "--stop",
        action="store_true",
        help="Pause the scraper instead of running it.",
    )
    parser.add_argument("--log-level", dest="log_level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    service = ReviewScrapingService()

    if args.stop:
        try:
            with SessionLocal() as db:
                signalled = service.stop_scraper(db=db, scraper_id=args.scraper_id)
        except ScraperNotFound as exc:
            print(json.dumps({"scraper_id": args.scraper_id, "error": exc.code, "error_message": str(exc)}))
            return 1
        print(json.dumps({"scraper_id": args.scraper_id, "status": "paused", "signalled": signalled}))
        return 0

    result = asyncio.run(_run(service, args.scraper_id))
    print(json.dumps(_result_payload(result), indent=2, default=str))
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
