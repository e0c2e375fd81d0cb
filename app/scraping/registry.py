"""
Platform adapter registry and factory.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping

from app.scraping.adapters import AmazonReviewAdapter, GoogleReviewAdapter, YelpReviewAdapter
from app.scraping.base import DEFAULT_USER_AGENT, PlatformAdapter
from app.scraping.browser import BrowserSessionFactory
from app.scraping.errors import UnsupportedPlatform


class AdapterRegistry:
    """
    Maps platform identifiers to adapter classes.

    Adapters are instantiated per run; the registry only holds classes.
    """

    def __init__(self, registrations: Mapping[str, type[PlatformAdapter]] | None = None) -> None:
        builtins: dict[str, type[PlatformAdapter]] = {
            AmazonReviewAdapter.platform: AmazonReviewAdapter,
            GoogleReviewAdapter.platform: GoogleReviewAdapter,
            YelpReviewAdapter.platform: YelpReviewAdapter,
        }
        if registrations:
            builtins.update({key.strip().lower(): value for key, value in registrations.items()})
        self._registrations = builtins

    def register(self, *, platform: str, adapter_class: type[PlatformAdapter]) -> None:
        self._registrations[platform.strip().lower()] = adapter_class

    def register_path(self, *, platform: str, path: str) -> None:
        """
        Register an adapter given as 'module.path:ClassName'.
        """

        self.register(platform=platform, adapter_class=self._load_dynamic_class(path))

    def platforms(self) -> list[str]:
        return sorted(self._registrations.keys())

    def is_supported(self, platform: str) -> bool:
        return self._normalize(platform) in self._registrations

    def create_adapter(
        self,
        *,
        platform: str,
        browser: BrowserSessionFactory,
        default_user_agent: str = DEFAULT_USER_AGENT,
    ) -> PlatformAdapter:
        adapter_class = self._registrations.get(self._normalize(platform))
        if adapter_class is None:
            raise UnsupportedPlatform(platform, allowed=self.platforms())
        return adapter_class(browser=browser, default_user_agent=default_user_agent)

    @staticmethod
    def _normalize(platform: str) -> str:
        return (platform or "").strip().lower()

    @staticmethod
    def _load_dynamic_class(path: str) -> type[PlatformAdapter]:
        if ":" not in path:
            raise ValueError(f"Invalid adapter path '{path}'. Use 'module.path:ClassName'.")

        module_path, class_name = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, class_name, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve adapter class '{path}'.")
        if not isinstance(loaded, type) or not issubclass(loaded, PlatformAdapter):
            raise ValueError(f"Class '{path}' must inherit from PlatformAdapter.")
        return loaded
