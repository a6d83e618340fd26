# semstore

A Telegram bot for a resale shop that orders goods from Chinese marketplaces.
A customer picks an item category, enters a price in yuan, and the bot replies
with the final cost in roubles. That cost is the converted price plus the shop's
commission, shipping to Russia and, when the goods are over the 200 € duty-free
limit, customs duty (15 % of the excess plus a 500 ₽ fee). The final price is
rounded up and its last two digits are replaced with `90`.

Exchange rates come from a public daily feed and are cached in Redis. A
background thread keeps them fresh. After a failed download the bot waits one
second per recorded failure, up to 300 seconds, and then tries once more. When
no fresh rate can be had it uses the last cached rate, and failing that the
configured default.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Everything is read from environment variables. If a numeric variable is missing
or malformed, `semstore.config.load_config` raises `ConfigError` naming it, and
the `semstore` command exits with status 1.

| Variable | Meaning |
| --- | --- |
| `TELEGRAM_BOT_TOKEN` | Bot API token; if it is empty the command exits with status 1 |
| `REDIS_URL` | Redis address, `host:port`; when host or port is left out, `localhost` and `6379` are used |
| `REDIS_PASSWORD` | Redis password (may be empty) |
| `COMMISSION_FOR_SHOES` | Commission in roubles for footwear |
| `COMMISSION_FOR_OTHER` | Commission in roubles for everything else |
| `RUB_CNY_DEFAULT_RATE` | Fallback rate: yuan per rouble |
| `RUB_EUR_DEFAULT_RATE` | Fallback rate: euro per rouble |

Each category has its own shipping cost, in roubles:
`TSHIRT_SHIPPING_COST`, `HOODIE_SHIPPING_COST`, `JACKET_SHIPPING_COST`,
`COAT_SHIPPING_COST`, `PANTS_SHIPPING_COST`, `SHORTS_SHIPPING_COST`,
`SOCKS_SHIPPING_COST`, `HATS_SHIPPING_COST`, `SNEAKERS_SHIPPING_COST`,
`OTHER_SNEAKERS_SHIPPING_COST`, `BOOTS_SHIPPING_COST`, `HEELS_SHIPPING_COST`,
`SLIPPERS_SHIPPING_COST`, `SANDALS_SHIPPING_COST`, `GLASSES_SHIPPING_COST`,
`GLOVES_SHIPPING_COST`, `JEWERLY_SHIPPING_COST`, `WATCHES_SHIPPING_COST`,
`BELT_SHIPPING_COST`, `HEADDRESS_SHIPPING_COST`, `BAG_SHIPPING_COST`.

## Running

```
semstore
```

The command fetches rates once at startup, starts the background refresh,
registers the bot's `/start` command and long-polls Telegram for updates. It
stops cleanly on Ctrl+C. Logs go to stderr, one line per record, in the form
`YYYY/MM/DD HH:MM:SS level message`.

## Using the pieces directly

The calculation works without Telegram or Redis. Any object with
`get_rate(currency)` and `get_rub_eur()` methods can supply the rates:

```python
from semstore.calculator import build_items, compute, parse_price
from semstore.config import load_config

config = load_config()
items = build_items(config.commission, config.shipping)
price = parse_price("350")          # InvalidPriceError if not an integer >= 20
total, text = compute(items["sneakers"], price, rates)
```

In the bot, `rates` is a `semstore.rate.RateProvider` over a
`semstore.exchange.ExchangeService`. `RateProvider.get_rate` returns roubles for
one unit of the currency, rounded to kopecks, and adds a 0.7 ₽ markup for `CNY`.

`semstore.formatting.format_number_with_dots` groups digits the way the bot
prints prices, so `format_number_with_dots(1234567)` gives `"1.234.567"`.

## Limitations

- The bot only long-polls. It has no webhook mode.
- The "where to get the link" screen sends the picture
  `images/way_to_link.jpg`, relative to the working directory. The package does
  not ship that picture. Without it the bot logs an error and leaves the
  message unchanged.
- The contact and how-to-order links in `semstore/constants.py`
  (`ADMIN_ACCOUNT`, `POIZON_GUIDE`) are placeholders. Set them to the shop's
  own links.
- Pending calculations and last-menu records are kept in memory only, so a
  restart forgets them.