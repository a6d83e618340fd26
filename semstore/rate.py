"""Conversion of cached exchange rates into roubles per unit of currency."""

from __future__ import annotations

import math
from typing import Protocol

from semstore.exchange import RateError

CNY_MARKUP = 0.7


class _RateSource(Protocol):
    def get_rate(self, currency: str) -> float: ...


def _round_cents(value: float) -> float:
    scaled = value * 100
    if not math.isfinite(scaled):
        return scaled
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / 100


def _rubles_per_unit(raw: float) -> float:
    if raw == 0:
        return math.copysign(math.inf, raw)
    return _round_cents(1 / raw)


class RateProvider:
    """Rouble prices of foreign currencies, as shown to customers."""

    def __init__(self, service: _RateSource) -> None:
        self._service = service

    def get_rate(self, currency: str) -> float:
        """Roubles for one unit of ``currency``, rounded to kopecks; CNY carries a markup.

        On failure raises RateError whose ``fallback`` is the rate computed from
        the best value the service had.
        """
        error: RateError | None = None
        try:
            raw = self._service.get_rate(currency)
        except RateError as exc:
            raw = exc.fallback
            error = exc
        rate = _rubles_per_unit(raw)
        if currency == "CNY":
            rate += CNY_MARKUP
        if error is not None:
            raise RateError(str(error), fallback=rate) from error
        return rate

    def get_rub_eur(self) -> float:
        """Euros for one rouble, as stored."""
        return self._service.get_rate("EUR")