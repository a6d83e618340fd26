"""Price calculation for items ordered in yuan and delivered to Russia."""

from __future__ import annotations

import logging
import math
import re
import threading
from dataclasses import dataclass
from typing import Protocol

from semstore.config import CommissionConfig, ShippingCostConfig
from semstore.constants import OVER_TWO_HUNDRED_EUR_TEXT, PRICE_OUTPUT
from semstore.exchange import RateError
from semstore.formatting import format_number_with_dots

DUTY_FREE_LIMIT_EUR = 200
DUTY_RATE = 0.15
DUTY_FEE_RUB = 500
MIN_PRICE = 20

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

log = logging.getLogger(__name__)


class ItemNotFoundError(KeyError):
    """Raised when an unknown item id is selected."""


class InvalidPriceError(ValueError):
    """Raised when a price entered by the user is not acceptable."""


class _Rates(Protocol):
    def get_rate(self, currency: str) -> float: ...

    def get_rub_eur(self) -> float: ...


@dataclass(frozen=True)
class Item:
    """An item kind with the commission and shipping cost charged for it, in roubles."""

    name: str
    commission: int
    shipping_cost: int


def build_items(
    commission: CommissionConfig, shipping: ShippingCostConfig
) -> dict[str, Item]:
    """Return the catalogue of item kinds keyed by their callback id."""
    shoes = commission.shoes
    other = commission.other
    return {
        "sneakers": Item("Кроссовки", shoes, shipping.sneakers),
        "other_sneakers": Item("Кеды", shoes, shipping.other_sneakers),
        "boots": Item("Ботинки", shoes, shipping.boots),
        "heels": Item("Туфли", shoes, shipping.heels),
        "slippers": Item("Тапки", shoes, shipping.slippers),
        "sandals": Item("Сандали", shoes, shipping.sandals),
        "shirts": Item("Футболка/Рубашка", other, shipping.tshirt),
        "hoodies": Item("Толстовка/Худи", other, shipping.hoodie),
        "coats": Item("Пуховик/Пальто", other, shipping.coat),
        "jackets": Item("Жилетка/Куртка", other, shipping.jacket),
        "pants": Item("Штаны", other, shipping.pants),
        "shorts": Item("Шорты", other, shipping.shorts),
        "hats": Item("Шапка/Кепка", other, shipping.hats),
        "socks": Item("Носки", other, shipping.socks),
        "glasses": Item("Очки", other, shipping.glasses),
        "watches": Item("Часы", other, shipping.watches),
        "jewelry": Item("Украшение", other, shipping.jewelry),
        "belts": Item("Ремень", other, shipping.belt),
        "gloves": Item("Перчатки", other, shipping.gloves),
        "headdress": Item("Головной убор", other, shipping.headdress),
        "bags": Item("Рюкзак/Сумка", other, shipping.bag),
        "continue": Item("Другое", 0, 0),
    }


class PendingItems:
    """Thread-safe record of the item each chat is currently pricing."""

    def __init__(self, items: dict[str, Item]) -> None:
        self._items = dict(items)
        self._lock = threading.Lock()
        self._sessions: dict[int, Item] = {}

    def set(self, chat_id: int, item_id: str) -> Item:
        """Mark ``item_id`` as pending for the chat; raises ItemNotFoundError if unknown."""
        with self._lock:
            try:
                item = self._items[item_id]
            except KeyError:
                raise ItemNotFoundError(item_id) from None
            self._sessions[chat_id] = item
            return item

    def get(self, chat_id: int) -> Item | None:
        with self._lock:
            return self._sessions.get(chat_id)

    def clear(self, chat_id: int) -> None:
        with self._lock:
            self._sessions.pop(chat_id, None)


def _rate_or_fallback(fetch, *args) -> float:
    try:
        return fetch(*args)
    except RateError as exc:
        return exc.fallback


def compute(item: Item, price: int, rates: _Rates) -> tuple[float, str]:
    """Return the total price in roubles and the message describing it.

    Rate failures are tolerated: the best fallback value is used instead.
    """
    cny_rub = _rate_or_fallback(rates.get_rate, "CNY")
    eur_rub = _rate_or_fallback(rates.get_rate, "EUR")
    rub_eur = _rate_or_fallback(rates.get_rub_eur)

    price_rub = cny_rub * price
    price_eur = price_rub * rub_eur
    log.info("price in CNY = %s", price)
    log.info("price in EUR = %s", price_eur)

    duty = 0.0
    duty_text = ""
    if price_eur > DUTY_FREE_LIMIT_EUR:
        duty = (price_eur - DUTY_FREE_LIMIT_EUR) * DUTY_RATE * eur_rub + DUTY_FEE_RUB
        duty_text = OVER_TWO_HUNDRED_EUR_TEXT % format_number_with_dots(math.ceil(duty))

    total = price_rub + item.commission + item.shipping_cost + duty
    total_text = format_number_with_dots(math.ceil(total))
    total_text = total_text[:-2] + "90"
    text = PRICE_OUTPUT % (
        item.name,
        format_number_with_dots(price),
        total_text,
        duty_text,
    )
    return total, text


def parse_price(text: str) -> int:
    """Parse a price in yuan; it must be an integer of at least 20."""
    if _INT_RE.fullmatch(text):
        value = int(text)
        if _INT64_MIN <= value <= _INT64_MAX and value >= MIN_PRICE:
            return value
    raise InvalidPriceError(
        "некорректная сумма: введите положительное целое число"
    )