"""
Reconciliation of freshly scraped reviews against stored reviews.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.domain.review_scraping import PersistedReview, ReviewStats
from app.scraping.errors import ReconciliationFailure
from app.scraping.logging_utils import log_event
from app.scraping.storage import ReviewStore
from app.scraping.types import RawReviewRecord, ReconciliationOutcome

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Decides create vs update for each scraped review.

    Records are processed in adapter order and the identity lookup runs
    again for every record, so a review repeated within one batch updates
    the row created for its first occurrence. Writes that succeeded before
    a failure stay committed.
    """

    def __init__(self, *, store: ReviewStore) -> None:
        self._store = store

    def reconcile(
        self,
        *,
        scraper_id: int,
        owner_id: int,
        raw_records: Sequence[RawReviewRecord],
    ) -> ReconciliationOutcome:
        saved: list[PersistedReview] = []
        new_count = 0
        updated_count = 0

        for position, record in enumerate(raw_records):
            try:
                existing = self._store.find_review_by_identity(
                    scraper_id,
                    record.source_url,
                    record.author_name,
                    record.review_date,
                )
                fields = {**record.as_fields(), "scraper_id": scraper_id}
                if existing is not None:
                    self._store.update_review(existing.id, fields)
                    updated_count += 1
                else:
                    created = self._store.create_review({**fields, "user_id": owner_id})
                    saved.append(created)
                    new_count += 1
            except Exception as exc:
                raise ReconciliationFailure(
                    f"Failed to persist review {position + 1}/{len(raw_records)} "
                    f"for scraper {scraper_id}: {exc}"
                ) from exc

        stats = ReviewStats(
            total_scraped=len(raw_records),
            new_count=new_count,
            updated_count=updated_count,
        )
        log_event(
            logger,
            logging.INFO,
            "review_reconciled",
            scraper_id=scraper_id,
            total_scraped=stats.total_scraped,
            new_count=stats.new_count,
            updated_count=stats.updated_count,
        )
        return ReconciliationOutcome(saved_records=saved, stats=stats)
