"""
Amazon product review adapter.
"""

from __future__ import annotations

from collections.abc import Mapping

from bs4 import Tag

from app.scraping.base import PlatformAdapter, with_query_param
from app.scraping.parsing import parse_helpful_votes, parse_rating
from app.scraping.types import RawReviewRecord


class AmazonReviewAdapter(PlatformAdapter):
    """
    Amazon review pages, paginated through the pageNumber query parameter.
    """

    platform = "amazon"
    default_selectors = {
        "reviewContainer": '[data-hook="review"]',
        "author": '[data-hook="review-author"] .a-profile-name',
        "location": '[data-hook="review-author"] .a-size-base',
        "rating": '[data-hook="review-star-rating"] .a-icon-alt',
        "title": '[data-hook="review-title"]',
        "content": '[data-hook="review-body"]',
        "date": '[data-hook="review-date"]',
        "verified": '[data-hook="avp-badge"]',
        "helpful": '[data-hook="helpful-vote-statement"]',
        "nextPage": '[data-hook="pagination-bar"] .a-last a',
    }

    def page_url(self, target_url: str, page_number: int) -> str:
        if page_number <= 1:
            return target_url
        return with_query_param(target_url, "pageNumber", page_number)

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
            verified_purchase=self.text(element, selectors, "verified") != "",
            helpful_votes=parse_helpful_votes(self.text(element, selectors, "helpful")),
            source_url=source_url,
            platform=self.platform,
        )
