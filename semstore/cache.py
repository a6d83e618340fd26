"""Redis-backed storage of exchange rates and of API failure counts."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import redis

EXCHANGE_RATES_KEY = "exchange:rates"
FAILURES_COUNT_KEY = "exchange:failures"
MAX_RETRY_DELAY_SECONDS = 300
FAILURES_TTL_SECONDS = 3600
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379

_CLIENT_ERRORS = (redis.RedisError, OSError)
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|z|[+-]\d{2}:\d{2})\Z"
)

log = logging.getLogger(__name__)


class CacheError(Exception):
    """Raised when the rates store cannot be read or written."""


class RedisLike(Protocol):
    def get(self, name: str) -> Any: ...

    def set(self, name: str, value: Any) -> Any: ...

    def delete(self, *names: str) -> Any: ...

    def incr(self, name: str) -> int: ...

    def expire(self, name: str, time: int) -> Any: ...


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _parse_time(text: str) -> datetime:
    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"invalid time {text!r}")
    year, month, day, hour, minute, second, frac, zone = match.groups()
    microsecond = int((frac or "0")[:6].ljust(6, "0"))
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = zone[1:].split(":")
        tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second), microsecond, tzinfo=tz,
    )


def _parse_timestamp(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"timestamp must be an integer, got {value!r}")
    return value


def _parse_rates(value: Any) -> dict[str, float]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("rates must be an object")
    rates: dict[str, float] = {}
    for currency, rate in value.items():
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise ValueError(f"rate for {currency} must be a number, got {rate!r}")
        rates[currency] = float(rate)
    return rates


@dataclass
class ExchangeRatesData:
    """Rates as stored in the cache: source timestamp, rates, and time of saving."""

    timestamp: int
    rates: dict[str, float]
    updated_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def to_json(self) -> str:
        """Serialise to the stored JSON document; raises ValueError on NaN or infinite rates."""
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "rates": self.rates,
                "updatedAt": _format_time(self.updated_at),
            },
            allow_nan=False,
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ExchangeRatesData:
        """Parse a stored JSON document; missing fields take zero values."""
        obj = json.loads(text)
        if obj is None:
            obj = {}
        if not isinstance(obj, dict):
            raise ValueError("rates document must be an object")
        updated = obj.get("updatedAt")
        if updated is None:
            updated_at = _ZERO_TIME
        elif isinstance(updated, str):
            updated_at = _parse_time(updated)
        else:
            raise ValueError("updatedAt must be a string")
        return cls(
            timestamp=_parse_timestamp(obj.get("timestamp")),
            rates=_parse_rates(obj.get("rates")),
            updated_at=updated_at,
        )


class ExchangeCache:
    """Keeps the latest exchange rates and the API failure counter in Redis."""

    def __init__(self, client: RedisLike) -> None:
        self._client = client

    def save_rates(self, data: ExchangeRatesData) -> None:
        try:
            payload = data.to_json()
        except (ValueError, TypeError) as exc:
            raise CacheError(f"failed to marshal rates: {exc}") from exc
        try:
            self._client.set(EXCHANGE_RATES_KEY, payload)
        except _CLIENT_ERRORS as exc:
            raise CacheError(f"failed to save rates: {exc}") from exc
        log.info(
            "Saved exchange rates (timestamp=%d, currencies=%d)",
            data.timestamp,
            len(data.rates),
        )

    def get_rates(self) -> ExchangeRatesData | None:
        """Return the stored rates, or None when nothing is stored."""
        try:
            raw = self._client.get(EXCHANGE_RATES_KEY)
        except _CLIENT_ERRORS as exc:
            raise CacheError(f"failed to get rates: {exc}") from exc
        if raw is None:
            return None
        try:
            return ExchangeRatesData.from_json(raw)
        except (ValueError, TypeError) as exc:
            raise CacheError(f"failed to unmarshal rates: {exc}") from exc

    def record_failure(self) -> tuple[int, timedelta]:
        """Count one more API failure; return the count and the delay before retrying."""
        try:
            failures = int(self._client.incr(FAILURES_COUNT_KEY))
        except _CLIENT_ERRORS as exc:
            raise CacheError(f"failed to record failure: {exc}") from exc
        delay = timedelta(seconds=min(failures, MAX_RETRY_DELAY_SECONDS))
        try:
            self._client.expire(FAILURES_COUNT_KEY, FAILURES_TTL_SECONDS)
        except _CLIENT_ERRORS:
            pass
        log.info("API failure recorded (attempt %d), next retry in %s", failures, delay)
        return failures, delay

    def reset_failures(self) -> None:
        try:
            self._client.delete(FAILURES_COUNT_KEY)
        except _CLIENT_ERRORS as exc:
            raise CacheError(f"failed to reset failures count: {exc}") from exc


def create_redis_client(addr: str, password: str) -> redis.Redis:
    """Create a Redis client for a ``host:port`` address; empty parts take defaults."""
    host, sep, port_text = (addr or "").rpartition(":")
    if not sep:
        host, port_text = port_text, ""
    host = host.strip("[]") or DEFAULT_REDIS_HOST
    try:
        port = int(port_text) if port_text else DEFAULT_REDIS_PORT
    except ValueError as exc:
        raise CacheError(f"invalid redis address {addr!r}") from exc
    if not 0 < port < 65536 or math.isnan(port):
        raise CacheError(f"invalid redis address {addr!r}")
    return redis.Redis(host=host, port=port, password=password or None)