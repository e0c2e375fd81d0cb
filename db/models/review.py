"""
db/models/review.py

Review model: one scraped customer review.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, JSONType

if TYPE_CHECKING:
    from db.models.scraper import Scraper


class Review(Base):
    """
    A review as extracted from the source page.

    (source_url, author_name, review_date) identifies the same logical review
    across runs of one scraper. sentiment and keywords are filled in by the
    enrichment service and never written by scraping runs.
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scraper_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("scrapers.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    platform: Mapped[str] = mapped_column(String(100), nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    review_date: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Date text exactly as shown on the platform",
    )
    scraped_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    verified_purchase: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    helpful_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    sentiment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    keywords: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)

    scraper: Mapped["Scraper"] = relationship("Scraper", back_populates="reviews")

    __table_args__ = (
        Index("ix_reviews_scraper_id", "scraper_id"),
        Index("ix_reviews_platform", "platform"),
        Index("ix_reviews_identity", "scraper_id", "source_url", "author_name", "review_date"),
    )
