import dataclasses

import pytest

from semstore.config import (
    ConfigError,
    ShippingCostConfig,
    load_config,
)

SHIPPING_KEYS = [
    "TSHIRT_SHIPPING_COST",
    "HOODIE_SHIPPING_COST",
    "JACKET_SHIPPING_COST",
    "COAT_SHIPPING_COST",
    "PANTS_SHIPPING_COST",
    "SHORTS_SHIPPING_COST",
    "SOCKS_SHIPPING_COST",
    "HATS_SHIPPING_COST",
    "SNEAKERS_SHIPPING_COST",
    "OTHER_SNEAKERS_SHIPPING_COST",
    "BOOTS_SHIPPING_COST",
    "HEELS_SHIPPING_COST",
    "SLIPPERS_SHIPPING_COST",
    "SANDALS_SHIPPING_COST",
    "GLASSES_SHIPPING_COST",
    "GLOVES_SHIPPING_COST",
    "JEWERLY_SHIPPING_COST",
    "WATCHES_SHIPPING_COST",
    "BELT_SHIPPING_COST",
    "HEADDRESS_SHIPPING_COST",
    "BAG_SHIPPING_COST",
]


@pytest.fixture
def environ():
    env = {
        "TELEGRAM_BOT_TOKEN": "token",
        "REDIS_URL": "localhost:6379",
        "REDIS_PASSWORD": "password",
        "COMMISSION_FOR_SHOES": "1500",
        "COMMISSION_FOR_OTHER": "1000",
        "RUB_CNY_DEFAULT_RATE": "0.0875",
        "RUB_EUR_DEFAULT_RATE": "0.0105",
    }
    for number, key in enumerate(SHIPPING_KEYS, start=1):
        env[key] = str(number * 100)
    return env


def test_loads_all_values(environ):
    config = load_config(environ)
    assert config.telegram_bot_token == environ["TELEGRAM_BOT_TOKEN"]
    assert config.redis.addr == environ["REDIS_URL"]
    assert config.redis.password == environ["REDIS_PASSWORD"]
    assert config.commission.shoes == int(environ["COMMISSION_FOR_SHOES"])
    assert config.commission.other == int(environ["COMMISSION_FOR_OTHER"])
    assert config.default_rates.rub_cny == float(environ["RUB_CNY_DEFAULT_RATE"])
    assert config.default_rates.rub_eur == float(environ["RUB_EUR_DEFAULT_RATE"])


def test_shipping_fields_follow_env_order(environ):
    shipping = load_config(environ).shipping
    values = [getattr(shipping, f.name) for f in dataclasses.fields(ShippingCostConfig)]
    assert values == [int(environ[key]) for key in SHIPPING_KEYS]


def test_jewelry_reads_misspelled_key(environ):
    environ["JEWERLY_SHIPPING_COST"] = "4321"
    assert load_config(environ).shipping.jewelry == 4321


def test_optional_strings_default_to_empty(environ):
    for key in ("TELEGRAM_BOT_TOKEN", "REDIS_URL", "REDIS_PASSWORD"):
        del environ[key]
    config = load_config(environ)
    assert config.telegram_bot_token == ""
    assert config.redis.addr == ""
    assert config.redis.password == ""


@pytest.mark.parametrize(
    "key", ["COMMISSION_FOR_SHOES", "RUB_EUR_DEFAULT_RATE", "BAG_SHIPPING_COST"]
)
def test_missing_variable_raises(environ, key):
    del environ[key]
    with pytest.raises(ConfigError) as info:
        load_config(environ)
    assert key in str(info.value)


@pytest.mark.parametrize("bad", ["abc", " 12", "12.5", "", "1_000"])
def test_malformed_int_raises(environ, bad):
    environ["COMMISSION_FOR_OTHER"] = bad
    with pytest.raises(ConfigError) as info:
        load_config(environ)
    assert "COMMISSION_FOR_OTHER" in str(info.value)


@pytest.mark.parametrize("bad", ["x1", "1.0 ", "", "1,5"])
def test_malformed_float_raises(environ, bad):
    environ["RUB_CNY_DEFAULT_RATE"] = bad
    with pytest.raises(ConfigError) as info:
        load_config(environ)
    assert "RUB_CNY_DEFAULT_RATE" in str(info.value)


def test_signed_int_accepted(environ):
    environ["COMMISSION_FOR_SHOES"] = "-5"
    assert load_config(environ).commission.shoes == -5


def test_first_failing_key_is_reported(environ):
    del environ["COMMISSION_FOR_SHOES"]
    del environ["TSHIRT_SHIPPING_COST"]
    with pytest.raises(ConfigError) as info:
        load_config(environ)
    assert "COMMISSION_FOR_SHOES" in str(info.value)
    assert "TSHIRT_SHIPPING_COST" not in str(info.value)


def test_config_is_immutable(environ):
    config = load_config(environ)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.telegram_bot_token = "other"
    assert config.telegram_bot_token == "token"