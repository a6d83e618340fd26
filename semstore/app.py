"""Bot entry point: wiring of services and update routes."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from semstore.cache import CacheError, ExchangeCache, create_redis_client
from semstore.calculation import CalculationHandlers
from semstore.calculator import PendingItems, build_items
from semstore.config import ConfigError, load_config
from semstore.exchange import ExchangeService, RateError
from semstore.logsetup import configure_logging
from semstore.menus import MenuHandlers
from semstore.rate import RateProvider
from semstore.state import MenuMessages
from semstore.telegram import BOT_COMMANDS, Dispatcher, TelegramAPI, TelegramError

log = logging.getLogger(__name__)


def register_handlers(
    dispatcher: Dispatcher, menus: MenuHandlers, calculation: CalculationHandlers
) -> None:
    """Attach every command, callback and price-input handler to ``dispatcher``."""
    dispatcher.register_text("/start", menus.start)
    dispatcher.register_callback("back_to_main", menus.back_to_main)
    dispatcher.register_callback("order", menus.order)
    dispatcher.register_callback("rate", menus.rate)
    dispatcher.register_callback("way_to_link", menus.way_to_link)
    dispatcher.register_callback("back_from_photo", menus.back_from_photo)
    dispatcher.register_callback("calculate", menus.item_type)
    dispatcher.register_callback("back_to_item_type", menus.item_type)
    dispatcher.register_callback("shoes", menus.shoes_type)
    dispatcher.register_callback("clothes", menus.clothes_type)
    dispatcher.register_callback("accessories", menus.accessories_type)
    dispatcher.register_callback("other_item", menus.other_item_type)
    dispatcher.register_callback("back_to_category:", menus.back_to_category, prefix=True)
    dispatcher.register_callback("item:", calculation.item_selected, prefix=True)
    dispatcher.register_match(calculation.is_awaiting_price, calculation.price_input)


def _run_bot(api: TelegramAPI, menus_state: MenuMessages, rates: RateProvider,
             pending: PendingItems) -> None:
    dispatcher = Dispatcher(api)
    menus = MenuHandlers(api, menus_state, rates)
    calculation = CalculationHandlers(api, pending, rates, start=menus.start)
    register_handlers(dispatcher, menus, calculation)

    try:
        api.set_my_commands(BOT_COMMANDS)
    except TelegramError as exc:
        log.error("failed to set commands: %s", exc)

    stop = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda *_: stop.set())
    try:
        log.info("Starting bot....")
        dispatcher.run_polling(stop)
        log.info("Bot stopped")
    finally:
        signal.signal(signal.SIGINT, previous)


def main(argv: list[str] | None = None) -> int:
    """Run the bot until interrupted; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="semstore", description="Telegram bot that prices orders in yuan."
    )
    parser.parse_args(argv)

    configure_logging()

    try:
        config = load_config()
    except ConfigError as exc:
        log.critical("%s", exc)
        return 1

    pending = PendingItems(build_items(config.commission, config.shipping))

    try:
        redis_client = create_redis_client(config.redis.addr, config.redis.password)
    except CacheError as exc:
        log.critical("%s", exc)
        return 1

    service = ExchangeService(ExchangeCache(redis_client), config.default_rates)
    rates = RateProvider(service)

    try:
        service.update_rates()
    except (RateError, CacheError) as exc:
        log.warning("Failed to update rates at startup: %s", exc)

    service.start_auto_refresh()
    try:
        try:
            api = TelegramAPI(config.telegram_bot_token)
        except TelegramError as exc:
            log.critical("Failed to create bot: %s", exc)
            return 1
        with api:
            _run_bot(api, MenuMessages(), rates, pending)
    finally:
        service.stop_auto_refresh()
    return 0