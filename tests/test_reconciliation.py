from __future__ import annotations

import pytest

from app.scraping.errors import ReconciliationFailure
from app.scraping.reconciliation import ReconciliationEngine
from app.scraping.types import RawReviewRecord
from tests.fakes import AMAZON_URL, InMemoryReviewStore, make_config

REVIEW_DATE = "Reviewed in the United States on March 3, 2024"


def record(**overrides) -> RawReviewRecord:
    fields = {
        "author_name": "Jane Doe",
        "rating": 4.0,
        "title": "Solid kettle",
        "content": "Boils fast.",
        "review_date": REVIEW_DATE,
        "source_url": AMAZON_URL,
        "platform": "amazon",
        "verified_purchase": True,
        "helpful_votes": 12,
    }
    fields.update(overrides)
    return RawReviewRecord(**fields)


def test_new_reviews_are_created_with_owner() -> None:
    store = InMemoryReviewStore([make_config()])
    engine = ReconciliationEngine(store=store)

    outcome = engine.reconcile(
        scraper_id=1,
        owner_id=7,
        raw_records=[record(), record(author_name="Bo")],
    )

    assert outcome.stats.total_scraped == 2
    assert outcome.stats.new_count == 2
    assert outcome.stats.updated_count == 0
    assert [review.author_name for review in outcome.saved_records] == ["Jane Doe", "Bo"]
    assert all(review.owner_id == 7 and review.scraper_id == 1 for review in outcome.saved_records)


def test_existing_identity_is_updated_not_duplicated() -> None:
    store = InMemoryReviewStore([make_config()])
    existing = store.seed_review(sentiment="positive", keywords=["kettle"])
    engine = ReconciliationEngine(store=store)

    outcome = engine.reconcile(scraper_id=1, owner_id=7, raw_records=[record(rating=2.0, content="Broke after a week.")])

    assert outcome.stats.new_count == 0
    assert outcome.stats.updated_count == 1
    assert outcome.saved_records == []
    assert len(store.reviews_for(1)) == 1

    updated = store.reviews[existing.id]
    assert updated.rating == 2.0
    assert updated.content == "Broke after a week."
    assert updated.helpful_votes == 12
    # enrichment fields are left alone
    assert updated.sentiment == "positive"
    assert updated.keywords == ["kettle"]


def test_identity_is_scoped_to_scraper() -> None:
    store = InMemoryReviewStore([make_config(), make_config(scraper_id=2)])
    store.seed_review(scraper_id=2)
    engine = ReconciliationEngine(store=store)

    outcome = engine.reconcile(scraper_id=1, owner_id=7, raw_records=[record()])

    assert outcome.stats.new_count == 1
    assert len(store.reviews_for(1)) == 1
    assert len(store.reviews_for(2)) == 1


@pytest.mark.parametrize(
    "changed",
    [
        {"author_name": "Janet Doe"},
        {"review_date": "Reviewed in the United States on March 4, 2024"},
        {"source_url": f"{AMAZON_URL}&pageNumber=2"},
    ],
)
def test_any_identity_change_creates_new_review(changed: dict) -> None:
    store = InMemoryReviewStore([make_config()])
    store.seed_review()
    engine = ReconciliationEngine(store=store)

    outcome = engine.reconcile(scraper_id=1, owner_id=7, raw_records=[record(**changed)])

    assert outcome.stats.new_count == 1
    assert len(store.reviews_for(1)) == 2


def test_duplicate_within_batch_updates_first_occurrence() -> None:
    store = InMemoryReviewStore([make_config()])
    engine = ReconciliationEngine(store=store)

    outcome = engine.reconcile(
        scraper_id=1,
        owner_id=7,
        raw_records=[record(rating=5.0), record(rating=3.0)],
    )

    assert outcome.stats.total_scraped == 2
    assert outcome.stats.new_count == 1
    assert outcome.stats.updated_count == 1
    assert len(store.reviews_for(1)) == 1
    assert store.reviews_for(1)[0].rating == 3.0


def test_empty_batch() -> None:
    store = InMemoryReviewStore([make_config()])

    outcome = ReconciliationEngine(store=store).reconcile(scraper_id=1, owner_id=7, raw_records=[])

    assert outcome.stats.total_scraped == 0
    assert outcome.saved_records == []
    assert store.review_writes() == []


def test_write_failure_keeps_earlier_writes() -> None:
    store = InMemoryReviewStore([make_config()], fail_on_create_at=2)
    engine = ReconciliationEngine(store=store)

    with pytest.raises(ReconciliationFailure) as ctx:
        engine.reconcile(
            scraper_id=1,
            owner_id=7,
            raw_records=[record(author_name="A"), record(author_name="B"), record(author_name="C")],
        )

    assert "2/3" in str(ctx.value)
    assert isinstance(ctx.value.__cause__, RuntimeError)
    assert [review.author_name for review in store.reviews_for(1)] == ["A"]
