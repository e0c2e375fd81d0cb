"""
Per-scraper run slots and cancellation tokens.
"""

from __future__ import annotations

import threading

from app.scraping.errors import RunAlreadyInFlight, RunCancelled


class CancellationToken:
    """
    Cooperative stop signal checked by adapters between page fetches.
    """

    def __init__(self, scraper_id: int | None = None) -> None:
        self._scraper_id = scraper_id
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelled(self._scraper_id)


class RunCoordinator:
    """
    Tracks in-flight runs so one scraper never runs twice at the same time.

    State is process-local; each API worker process holds its own coordinator.
    """

    def __init__(self) -> None:
        self._tokens: dict[int, CancellationToken] = {}
        self._lock = threading.Lock()

    def acquire(self, scraper_id: int) -> CancellationToken:
        with self._lock:
            if scraper_id in self._tokens:
                raise RunAlreadyInFlight(scraper_id)
            token = CancellationToken(scraper_id)
            self._tokens[scraper_id] = token
            return token

    def release(self, scraper_id: int) -> None:
        with self._lock:
            self._tokens.pop(scraper_id, None)

    def cancel(self, scraper_id: int) -> bool:
        """
        Signal the in-flight run for scraper_id. Returns False when nothing is running.
        """

        with self._lock:
            token = self._tokens.get(scraper_id)
        if token is None:
            return False
        token.cancel()
        return True

    def is_running(self, scraper_id: int) -> bool:
        with self._lock:
            return scraper_id in self._tokens
