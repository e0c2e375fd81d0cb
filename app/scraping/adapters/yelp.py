"""
Yelp business review adapter.
"""

from __future__ import annotations

from collections.abc import Mapping

from bs4 import Tag

from app.scraping.base import PlatformAdapter, with_query_param
from app.scraping.parsing import parse_helpful_votes, parse_rating
from app.scraping.types import RawReviewRecord

RESULTS_PER_PAGE = 20
RATING_FALLBACK_SELECTOR = '[role="img"]'


class YelpReviewAdapter(PlatformAdapter):
    """
    Yelp review pages, paginated through the start offset parameter.

    Star ratings are rendered as images, so the value is read from the
    rating element's aria-label or title.
    """

    platform = "yelp"
    default_selectors = {
        "reviewContainer": ".review__09f24__oHr9C",
        "author": ".user-passport-info__09f24__yST7t a",
        "location": ".user-passport-info__09f24__yST7t .text__09f24__f8Jnf",
        "rating": ".i-stars__09f24__1T0Uu",
        "title": ".raw__09f24__T4Ezm",
        "content": ".raw__09f24__T4Ezm",
        "date": ".margin-t1__09f24__w96jn .text__09f24__f8Jnf",
        "helpful": ".useful__09f24__oH5wP",
        "nextPage": ".next-link",
    }

    def page_url(self, target_url: str, page_number: int) -> str:
        if page_number <= 1:
            return target_url
        return with_query_param(target_url, "start", (page_number - 1) * RESULTS_PER_PAGE)

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
            rating=parse_rating(self._rating_label(element, selectors)),
            title=self.text(element, selectors, "title"),
            content=self.text(element, selectors, "content"),
            review_date=self.text(element, selectors, "date"),
            verified_purchase=False,
            helpful_votes=parse_helpful_votes(self.text(element, selectors, "helpful")),
            source_url=source_url,
            platform=self.platform,
        )

    def _rating_label(self, element: Tag, selectors: Mapping[str, str]) -> str:
        rating_selector = selectors.get("rating")
        if not self.parser.has_match(element, rating_selector):
            rating_selector = RATING_FALLBACK_SELECTOR
        return self.parser.select_attribute(
            element, rating_selector, "aria-label"
        ) or self.parser.select_attribute(element, rating_selector, "title")
