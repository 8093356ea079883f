"""Exchange rate provider with periodic background refresh.

The provider owns the process-wide rate table. A refresh either replaces
the whole table or leaves it untouched; readers always see the latest
complete table.
"""

import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

import requests

from tourbook.domain.models import RateTable
from tourbook.integrations.bank_rates import DEFAULT_TIMEOUT, fetch_rate_records, parse_rate_records
from tourbook.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_REFRESH_SECONDS = 30 * 60

RateListener = Callable[[RateTable], None]
RecordFetcher = Callable[[str, float], list[dict[str, Any]]]


class ExchangeRateProvider:
    """Holds the current rate table and refreshes it from the bank endpoint."""

    def __init__(
        self,
        url: str,
        initial: RateTable,
        interval_seconds: float = DEFAULT_REFRESH_SECONDS,
        timeout: float = DEFAULT_TIMEOUT,
        fetcher: RecordFetcher = fetch_rate_records,
    ) -> None:
        self.url = url
        self.interval_seconds = interval_seconds
        self.timeout = timeout
        self._fetcher = fetcher
        self._table: RateTable = dict(initial)
        self._lock = threading.Lock()
        self._listeners: list[RateListener] = []
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        # Bumped by stop(); a refresh started under an older generation is dropped
        self._generation = 0

    @property
    def table(self) -> RateTable:
        with self._lock:
            return dict(self._table)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def subscribe(self, listener: RateListener) -> None:
        """Call listener with the new table after every successful refresh."""
        self._listeners.append(listener)

    def refresh(self) -> bool:
        """Fetch rates once and replace the table on success.

        Returns:
            True if the table was replaced. False if the fetch or parse failed,
            or the provider was stopped while the fetch was in flight; the
            previous table is kept in both cases.
        """
        with self._lock:
            generation = self._generation

        try:
            records = self._fetcher(self.url, self.timeout)
            table = parse_rate_records(records, datetime.now())
        except requests.RequestException as e:
            logger.warning("Rate refresh failed, keeping previous rates: %s", e)
            return False
        except ValueError as e:
            logger.warning("Rate response rejected, keeping previous rates: %s", e)
            return False

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping rates fetched before provider was stopped")
                return False
            self._table = table

        logger.info("Exchange rates updated: %s", ", ".join(f"{r.currency}={r.rate:.4f}" for r in table.values()))
        for listener in self._listeners:
            listener(table)
        return True

    def start(self) -> None:
        """Refresh now and then every interval_seconds on a daemon thread."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="rate-refresh", daemon=True)
        self._thread.start()
        logger.debug("Started rate refresh every %.0f seconds", self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        """Cancel the refresh loop. A fetch still in flight is discarded."""
        with self._lock:
            self._generation += 1
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Stopped rate refresh")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stop() is called. Returns True if stopped."""
        return self._stop_event.wait(timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.refresh()
            if self._stop_event.wait(self.interval_seconds):
                break

    def __enter__(self) -> "ExchangeRateProvider":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
