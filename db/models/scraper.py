"""
db/models/scraper.py

Scraper model: one configured review source owned by a user.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, JSONType, TimestampMixin

if TYPE_CHECKING:
    from db.models.review import Review
    from db.models.scraping_job import ScrapingJob


class ScraperStatus:
    ACTIVE = "active"
    PAUSED = "paused"
    ERROR = "error"
    COMPLETED = "completed"

    ALL = frozenset({ACTIVE, PAUSED, ERROR, COMPLETED})


class Scraper(Base, TimestampMixin):
    """
    Review scraper configuration and latest run state.

    configuration holds {"selectors": {...}, "settings": {...}} as supplied
    by the owner; status, last_run and total_reviews are maintained by runs.
    """

    __tablename__ = "scrapers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Owning user id (users table is managed by the auth service)",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    platform: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="amazon, google, yelp",
    )
    target_url: Mapped[str] = mapped_column(Text, nullable=False)
    configuration: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="Selector map and run settings",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ScraperStatus.PAUSED,
    )
    last_run: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    success_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="scraper",
        cascade="all, delete-orphan",
        lazy="select",
    )
    jobs: Mapped[list["ScrapingJob"]] = relationship(
        "ScrapingJob",
        back_populates="scraper",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_scrapers_user_id", "user_id"),
        Index("ix_scrapers_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Scraper id={self.id} platform={self.platform!r} status={self.status!r}>"
