"""
Repository for scraped review persistence.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.review import Review

UPDATABLE_FIELDS = frozenset(
    {
        "platform",
        "author_name",
        "author_location",
        "rating",
        "title",
        "content",
        "review_date",
        "verified_purchase",
        "helpful_votes",
        "source_url",
    }
)


class ReviewRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_review(self, review_id: int) -> Review | None:
        return self._session.get(Review, review_id)

    def find_by_identity(
        self,
        *,
        scraper_id: int,
        source_url: str,
        author_name: str,
        review_date: str,
    ) -> Review | None:
        stmt = (
            select(Review)
            .where(
                Review.scraper_id == scraper_id,
                Review.source_url == source_url,
                Review.author_name == author_name,
                Review.review_date == review_date,
            )
            .order_by(Review.id)
            .limit(1)
        )
        return self._session.scalars(stmt).first()

    def list_for_scraper(self, scraper_id: int) -> list[Review]:
        stmt = select(Review).where(Review.scraper_id == scraper_id).order_by(Review.id)
        return list(self._session.scalars(stmt).all())

    def create_review(self, fields: dict[str, Any]) -> Review:
        review = Review(**fields)
        self._session.add(review)
        self._session.flush()
        self._session.refresh(review)
        return review

    def update_review(self, review_id: int, fields: dict[str, Any]) -> Review | None:
        review = self.get_review(review_id)
        if review is None:
            return None
        for key, value in fields.items():
            if key in UPDATABLE_FIELDS:
                setattr(review, key, value)
        self._session.flush()
        return review
