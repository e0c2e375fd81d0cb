"""
Run controller: resolves the platform adapter for one scraper and runs it.
"""

from __future__ import annotations

from app.domain.review_scraping import ScraperConfig
from app.scraping.base import DEFAULT_USER_AGENT
from app.scraping.browser import BrowserSessionFactory
from app.scraping.coordination import CancellationToken
from app.scraping.registry import AdapterRegistry
from app.scraping.types import RawReviewRecord


class RunController:
    """
    Owns adapter selection and invocation for a single run. Never retries.
    """

    def __init__(
        self,
        *,
        registry: AdapterRegistry,
        browser: BrowserSessionFactory,
        default_user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._registry = registry
        self._browser = browser
        self._default_user_agent = default_user_agent

    async def execute(
        self,
        config: ScraperConfig,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[RawReviewRecord]:
        adapter = self._registry.create_adapter(
            platform=config.platform,
            browser=self._browser,
            default_user_agent=self._default_user_agent,
        )
        return await adapter.scrape(
            config.target_url,
            config.selectors,
            config.settings,
            cancel_token=cancel_token,
        )
