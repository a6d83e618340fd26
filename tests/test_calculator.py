import dataclasses

import pytest

from semstore.calculator import (
    InvalidPriceError,
    Item,
    ItemNotFoundError,
    PendingItems,
    build_items,
    compute,
    parse_price,
)
from semstore.config import CommissionConfig, ShippingCostConfig
from semstore.exchange import RateError


def _shipping() -> ShippingCostConfig:
    names = [f.name for f in dataclasses.fields(ShippingCostConfig)]
    return ShippingCostConfig(**{name: 100 + i for i, name in enumerate(names)})


COMMISSION = CommissionConfig(shoes=1500, other=1000)


class FakeRates:
    def __init__(self, cny, eur, rub_eur, fail=False):
        self.values = {"CNY": cny, "EUR": eur}
        self.rub_eur = rub_eur
        self.fail = fail

    def get_rate(self, currency):
        if self.fail:
            raise RateError("down", fallback=self.values[currency])
        return self.values[currency]

    def get_rub_eur(self):
        if self.fail:
            raise RateError("down", fallback=self.rub_eur)
        return self.rub_eur


def test_build_items_uses_config_values():
    shipping = _shipping()
    items = build_items(COMMISSION, shipping)
    assert items["sneakers"] == Item("Кроссовки", COMMISSION.shoes, shipping.sneakers)
    assert items["jewelry"].shipping_cost == shipping.jewelry
    assert items["bags"].commission == COMMISSION.other
    assert items["continue"] == Item("Другое", 0, 0)


def test_shoes_use_shoe_commission_others_do_not():
    items = build_items(COMMISSION, _shipping())
    shoes = {"sneakers", "other_sneakers", "boots", "heels", "slippers", "sandals"}
    for key, item in items.items():
        if key in shoes:
            assert item.commission == COMMISSION.shoes
        elif key != "continue":
            assert item.commission == COMMISSION.other


def test_pending_set_get_clear():
    items = build_items(COMMISSION, _shipping())
    pending = PendingItems(items)
    assert pending.get(7) is None
    pending.set(7, "boots")
    assert pending.get(7) == items["boots"]
    pending.clear(7)
    assert pending.get(7) is None


def test_pending_unknown_item_raises():
    pending = PendingItems(build_items(COMMISSION, _shipping()))
    with pytest.raises(ItemNotFoundError):
        pending.set(1, "spaceship")
    assert pending.get(1) is None


def test_compute_without_duty():
    item = Item("Штаны", 1000, 500)
    total, text = compute(item, 100, FakeRates(11.0, 100.0, 0.01))
    assert total == pytest.approx(2600.0)
    assert "<b>2.690 ₽</b>" in text
    assert "<b>Штаны</b>" in text
    assert "<b>100 ¥</b>" in text
    assert "<i>Стоимость товара превысила" not in text


def test_compute_with_duty_adds_text():
    item = Item("Другое", 0, 0)
    total, text = compute(item, 3000, FakeRates(10.0, 100.0, 0.01))
    assert "Таможенная пошлина на ваш товар" in text
    assert "2.000₽" in text
    assert "15% от суммы" in text
    assert total > 30000


def test_compute_total_ends_with_90():
    item = Item("Носки", 250, 300)
    for price in (20, 137, 999, 12345):
        _, text = compute(item, price, FakeRates(12.3, 95.5, 0.0105))
        assert "90 ₽</b> ✅" in text


def test_compute_uses_fallback_on_rate_errors():
    item = Item("Часы", 1000, 700)
    ok = compute(item, 500, FakeRates(11.5, 98.0, 0.0102))
    failed = compute(item, 500, FakeRates(11.5, 98.0, 0.0102, fail=True))
    assert ok == failed


@pytest.mark.parametrize("text,expected", [("20", 20), ("+25", 25), ("0100", 100)])
def test_parse_price_accepts(text, expected):
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["19", "0", "-50", "abc", "", " 25", "25.5", "9" * 30])
def test_parse_price_rejects(text):
    with pytest.raises(InvalidPriceError):
        parse_price(text)