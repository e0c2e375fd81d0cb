"""
Google local reviews adapter.
"""

from __future__ import annotations

from collections.abc import Mapping

from bs4 import Tag

from app.scraping.base import PlatformAdapter
from app.scraping.parsing import parse_rating
from app.scraping.types import RawReviewRecord


class GoogleReviewAdapter(PlatformAdapter):
    """
    Google local reviews. Single page; Google shows no purchase badge or vote count.
    """

    platform = "google"
    paginated = False
    default_selectors = {
        "reviewContainer": ".gws-localreviews__review",
        "author": ".gws-localreviews__author-name",
        "location": ".gws-localreviews__author-location",
        "rating": ".gws-localreviews__star-rating span",
        "title": ".gws-localreviews__title",
        "content": ".gws-localreviews__review-text",
        "date": ".gws-localreviews__review-date",
    }

    def extract_review(
        self,
        *,
        element: Tag,
        selectors: Mapping[str, str],
        source_url: str,
    ) -> RawReviewRecord:
        return RawReviewRecord(
            author_name=self.text(element, selectors, "author") or "Anonymous",
            author_location=self.text(element, selectors, "location") or None,
            rating=parse_rating(self.text(element, selectors, "rating")),
            title=self.text(element, selectors, "title"),
            content=self.text(element, selectors, "content"),
            review_date=self.text(element, selectors, "date"),
            verified_purchase=False,
            helpful_votes=0,
            source_url=source_url,
            platform=self.platform,
        )
