"""Configuration loaded from environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping

from semstore.constants import ENV_VARIABLES_ERROR_OUTPUT


class ConfigError(Exception):
    """Raised when a required environment variable is missing or malformed."""


@dataclass(frozen=True)
class RedisConfig:
    addr: str
    password: str


@dataclass(frozen=True)
class CommissionConfig:
    shoes: int
    other: int


@dataclass(frozen=True)
class DefaultRatesConfig:
    rub_cny: float
    rub_eur: float


@dataclass(frozen=True)
class ShippingCostConfig:
    tshirt: int
    hoodie: int
    jacket: int
    coat: int
    pants: int
    shorts: int
    socks: int
    hats: int
    sneakers: int
    other_sneakers: int
    boots: int
    heels: int
    slippers: int
    sandals: int
    glasses: int
    gloves: int
    jewelry: int
    watches: int
    belt: int
    headdress: int
    bag: int


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    redis: RedisConfig
    commission: CommissionConfig
    default_rates: DefaultRatesConfig
    shipping: ShippingCostConfig


_SHIPPING_ENV = {
    "tshirt": "TSHIRT_SHIPPING_COST",
    "hoodie": "HOODIE_SHIPPING_COST",
    "jacket": "JACKET_SHIPPING_COST",
    "coat": "COAT_SHIPPING_COST",
    "pants": "PANTS_SHIPPING_COST",
    "shorts": "SHORTS_SHIPPING_COST",
    "socks": "SOCKS_SHIPPING_COST",
    "hats": "HATS_SHIPPING_COST",
    "sneakers": "SNEAKERS_SHIPPING_COST",
    "other_sneakers": "OTHER_SNEAKERS_SHIPPING_COST",
    "boots": "BOOTS_SHIPPING_COST",
    "heels": "HEELS_SHIPPING_COST",
    "slippers": "SLIPPERS_SHIPPING_COST",
    "sandals": "SANDALS_SHIPPING_COST",
    "glasses": "GLASSES_SHIPPING_COST",
    "gloves": "GLOVES_SHIPPING_COST",
    "jewelry": "JEWERLY_SHIPPING_COST",
    "watches": "WATCHES_SHIPPING_COST",
    "belt": "BELT_SHIPPING_COST",
    "headdress": "HEADDRESS_SHIPPING_COST",
    "bag": "BAG_SHIPPING_COST",
}

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?"
    r"|inf|infinity|nan)",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?[0-9]+", re.IGNORECASE
)


def _missing(key: str) -> ConfigError:
    return ConfigError(ENV_VARIABLES_ERROR_OUTPUT % key)


def _env_int(environ: Mapping[str, str], key: str) -> int:
    raw = environ.get(key, "")
    if not _INT_RE.fullmatch(raw):
        raise _missing(key)
    return int(raw)


def _env_float(environ: Mapping[str, str], key: str) -> float:
    raw = environ.get(key, "")
    if _FLOAT_RE.fullmatch(raw):
        return float(raw)
    if _HEX_FLOAT_RE.fullmatch(raw):
        return float.fromhex(raw)
    raise _missing(key)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the configuration from ``environ`` (the process environment by default)."""
    env = os.environ if environ is None else environ

    shoes_commission = _env_int(env, "COMMISSION_FOR_SHOES")
    other_commission = _env_int(env, "COMMISSION_FOR_OTHER")

    rub_cny = _env_float(env, "RUB_CNY_DEFAULT_RATE")
    rub_eur = _env_float(env, "RUB_EUR_DEFAULT_RATE")

    redis = RedisConfig(
        addr=env.get("REDIS_URL", ""),
        password=env.get("REDIS_PASSWORD", ""),
    )

    shipping = ShippingCostConfig(
        **{field: _env_int(env, key) for field, key in _SHIPPING_ENV.items()}
    )

    return Config(
        telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN", ""),
        redis=redis,
        commission=CommissionConfig(shoes=shoes_commission, other=other_commission),
        default_rates=DefaultRatesConfig(rub_cny=rub_cny, rub_eur=rub_eur),
        shipping=shipping,
    )