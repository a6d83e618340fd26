"""Exchange rates: fetching from the public API, caching and refreshing."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import httpx

from semstore.cache import CacheError, ExchangeCache, ExchangeRatesData
from semstore.config import DefaultRatesConfig

RATES_API_URL = "https://www.cbr-xml-daily.ru/latest.js"
REFRESH_AFTER_SECONDS = 5
DAY_OFF_REFRESH_SECONDS = 12 * 3600
EMPTY_CACHE_RETRY_SECONDS = 1.0
HTTP_TIMEOUT_SECONDS = 30.0

log = logging.getLogger(__name__)


class RateError(Exception):
    """Raised when a rate cannot be obtained; ``fallback`` holds the best value available."""

    def __init__(self, message: str, fallback: float = 0.0) -> None:
        super().__init__(message)
        self.fallback = fallback


@dataclass(frozen=True)
class ApiRates:
    """Rates as published by the API: units of each currency per one rouble."""

    timestamp: int
    rates: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_json(cls, text: str | bytes) -> ApiRates:
        data = ExchangeRatesData.from_json(text)
        return cls(timestamp=data.timestamp, rates=data.rates)


def fetch_latest_rates(client: httpx.Client) -> ApiRates:
    """Download and decode the latest rates."""
    try:
        body = client.get(RATES_API_URL).content
    except httpx.HTTPError as exc:
        raise RateError(f"failed to fetch rates: {exc}") from exc
    try:
        return ApiRates.from_json(body)
    except (ValueError, TypeError) as exc:
        raise RateError(f"failed to decode rates: {exc}") from exc


def is_day_off(timestamp: int) -> bool:
    """True if the local date of ``timestamp`` is a Saturday or Sunday."""
    return datetime.fromtimestamp(timestamp).weekday() >= 5


class ExchangeService:
    """Serves exchange rates from the cache, refreshing them from the API."""

    def __init__(
        self,
        cache: ExchangeCache,
        default_rates: DefaultRatesConfig,
        *,
        fetcher: Callable[[], ApiRates] | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cache = cache
        self._defaults = {"CNY": default_rates.rub_cny, "EUR": default_rates.rub_eur}
        if fetcher is None:
            http = httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)

            def fetcher() -> ApiRates:
                return fetch_latest_rates(http)

        self._fetch = fetcher
        self._clock = clock
        self._sleep = sleep
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _is_stale(self, data: ExchangeRatesData | None) -> bool:
        if data is None:
            return True
        if is_day_off(data.timestamp):
            return False
        return int(self._clock()) > data.timestamp + REFRESH_AFTER_SECONDS

    def get_rate(self, currency: str) -> float:
        """Units of ``currency`` per one rouble."""
        try:
            data = self._cache.get_rates()
        except CacheError as exc:
            fallback = self._defaults.get(currency, 0.0)
            log.warning("Failed to get rates from Redis: %s", exc)
            log.warning("Using default rate for %s: %.2f", currency, fallback)
            raise RateError(str(exc), fallback=fallback) from exc

        if self._is_stale(data):
            log.info("Rates missing or expired. Updating now...")
            try:
                self.update_rates()
            except (RateError, CacheError) as exc:
                log.warning("Failed to update rates, fallback: %s", exc)
                if data is not None and currency in data.rates:
                    value = data.rates[currency]
                    log.warning("Using stale cached rate for %s: %.2f", currency, value)
                    return value
                if currency in self._defaults:
                    return self._defaults[currency]
                raise RateError(f"no rate available for {currency}") from exc
            try:
                data = self._cache.get_rates()
            except CacheError:
                data = None

        if data is not None and currency in data.rates:
            return data.rates[currency]
        raise RateError(f"currency {currency} not found")

    def update_rates(self) -> None:
        """Fetch rates, retrying once after a delay, and store them."""
        try:
            body = self._fetch()
        except RateError:
            try:
                _, delay = self._cache.record_failure()
                pause = delay.total_seconds()
            except CacheError:
                pause = 0.0
            self._sleep(pause)
            try:
                body = self._fetch()
            except RateError as exc:
                raise RateError(f"failed 2 times to fetch API: {exc}") from exc
        try:
            self._cache.reset_failures()
        except CacheError as exc:
            log.warning("%s", exc)
        self._cache.save_rates(
            ExchangeRatesData(
                timestamp=body.timestamp,
                rates=dict(body.rates),
                updated_at=datetime.now().astimezone(),
            )
        )

    def _next_delay(self) -> float:
        try:
            data = self._cache.get_rates()
        except CacheError:
            data = None
        if data is None:
            return EMPTY_CACHE_RETRY_SECONDS
        if is_day_off(data.timestamp):
            return float(DAY_OFF_REFRESH_SECONDS)
        return max(data.timestamp + REFRESH_AFTER_SECONDS - self._clock(), 0.0)

    def _refresh_loop(self) -> None:
        while not self._stop.wait(self._next_delay()):
            try:
                self.update_rates()
            except (RateError, CacheError) as exc:
                log.warning("Background rate refresh failed: %s", exc)

    def start_auto_refresh(self) -> None:
        """Refresh rates in a background thread until stopped."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._refresh_loop, name="exchange-refresh", daemon=True
        )
        self._thread.start()

    def stop_auto_refresh(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None