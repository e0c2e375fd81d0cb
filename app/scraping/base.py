"""
Base platform adapter for browser-driven review scraping.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import ClassVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

from app.domain.review_scraping import ScraperSettings
from app.scraping.browser import BrowserSessionFactory
from app.scraping.coordination import CancellationToken
from app.scraping.errors import AdapterFailure, RunCancelled
from app.scraping.logging_utils import log_event
from app.scraping.parsing import ReviewHTMLParser
from app.scraping.types import RawReviewRecord

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def with_query_param(url: str, name: str, value: str | int) -> str:
    """
    Return url with one query parameter set, replacing any existing value.
    """

    parts = urlsplit(url)
    query = [(key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True) if key != name]
    query.append((name, str(value)))
    return urlunsplit(parts._replace(query=urlencode(query)))


class PlatformAdapter(ABC):
    """
    Drives one browser session over a platform's review pages.

    Pages are fetched strictly in order; page N+1 is requested only after
    page N has been extracted and shows a next-page control. Any failure
    discards everything gathered so far.
    """

    platform: ClassVar[str]
    default_selectors: ClassVar[Mapping[str, str]]
    paginated: ClassVar[bool] = True

    def __init__(
        self,
        *,
        browser: BrowserSessionFactory,
        default_user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.browser = browser
        self.default_user_agent = default_user_agent
        self.parser = ReviewHTMLParser()

    async def scrape(
        self,
        target_url: str,
        selectors: Mapping[str, str] | None,
        settings: ScraperSettings,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[RawReviewRecord]:
        """
        Scrape up to settings.max_pages pages and return every extracted review.
        """

        resolved = self.resolve_selectors(selectors)
        max_pages = max(1, settings.max_pages) if self.paginated else 1
        user_agent = settings.user_agent or self.default_user_agent

        reviews: list[RawReviewRecord] = []
        page_number = 0
        try:
            async with self.browser.open_page(user_agent=user_agent) as page:
                for page_number in range(1, max_pages + 1):
                    if page_number > 1 and settings.delay_ms:
                        await asyncio.sleep(settings.delay_ms / 1000)
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    await page.goto(self.page_url(target_url, page_number), wait_until="domcontentloaded")
                    await page.wait_for_selector(resolved["reviewContainer"])
                    soup = self.parser.to_soup(await page.content())
                    page_reviews = self.parse_page(soup=soup, selectors=resolved, source_url=page.url)
                    reviews.extend(page_reviews)
                    log_event(
                        logger,
                        logging.INFO,
                        "scrape_page_fetched",
                        platform=self.platform,
                        page_number=page_number,
                        reviews_on_page=len(page_reviews),
                    )

                    if not self.has_next_page(soup=soup, selectors=resolved):
                        break
        except RunCancelled:
            raise
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "scrape_adapter_failed",
                platform=self.platform,
                page_number=page_number,
                discarded_reviews=len(reviews),
                error=str(exc),
            )
            raise AdapterFailure(self.platform, exc) from exc

        return reviews

    def resolve_selectors(self, selectors: Mapping[str, str] | None) -> dict[str, str]:
        resolved = dict(self.default_selectors)
        for key, value in (selectors or {}).items():
            if value:
                resolved[key] = value
        return resolved

    def page_url(self, target_url: str, page_number: int) -> str:
        return target_url

    def has_next_page(self, *, soup: BeautifulSoup, selectors: Mapping[str, str]) -> bool:
        if not self.paginated:
            return False
        return self.parser.has_match(soup, selectors.get("nextPage"))

    def parse_page(
        self,
        *,
        soup: BeautifulSoup,
        selectors: Mapping[str, str],
        source_url: str,
    ) -> list[RawReviewRecord]:
        containers = self.parser.select_containers(soup, selectors["reviewContainer"])
        return [
            self.extract_review(element=element, selectors=selectors, source_url=source_url)
            for element in containers
        ]

    @abstractmethod
    def extract_review(
        self,
        *,
        element: Tag,
        selectors: Mapping[str, str],
        source_url: str,
    ) -> RawReviewRecord:
        """
        Extract one review from its container element.
        """

    def text(self, element: Tag, selectors: Mapping[str, str], key: str) -> str:
        return self.parser.select_text(element, selectors.get(key))
