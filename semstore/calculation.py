"""Handlers for the price calculation dialogue: item selection and price input."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from semstore import keyboards
from semstore.calculator import (
    InvalidPriceError,
    ItemNotFoundError,
    PendingItems,
    compute,
    parse_price,
)
from semstore.constants import ENTER_PRICE
from semstore.telegram import PARSE_MODE_HTML, TelegramError

UNKNOWN_ITEM_TEXT = "Произошла ошибка: неизвестный товар."
INVALID_PRICE_TEXT = (
    "Неверный формат. Введите, пожалуйста, положительное целое число, большее 20"
)

Update = dict[str, Any]

log = logging.getLogger(__name__)


class _Rates(Protocol):
    def get_rate(self, currency: str) -> float: ...

    def get_rub_eur(self) -> float: ...


class CalculationHandlers:
    """Update handlers that ask for an item's price and report the total cost."""

    def __init__(
        self,
        api: Any,
        pending: PendingItems,
        rates: _Rates,
        *,
        start: Callable[[Update], None] | None = None,
    ) -> None:
        self._api = api
        self._pending = pending
        self._rates = rates
        self._start = start

    def item_selected(self, update: Update) -> None:
        """Remember the chosen item and ask for its price in yuan."""
        query = update.get("callback_query") or {}
        data = query.get("data") or ""
        if not data:
            return
        parts = data.split(":", 2)
        if len(parts) != 3:
            return
        _, category, item_id = parts

        try:
            self._api.answer_callback_query(query["id"])
        except TelegramError as exc:
            log.debug("failed to answer callback query: %s", exc)

        message = query["message"]
        chat_id = message["chat"]["id"]
        message_id = message["message_id"]

        try:
            self._pending.set(chat_id, item_id)
        except ItemNotFoundError:
            log.error("unknown item selected: %s", item_id)
            try:
                self._api.send_message(chat_id, UNKNOWN_ITEM_TEXT)
            except TelegramError as exc:
                log.error("failed to send unknown item message: %s", exc)
            return

        try:
            self._api.edit_message_text(
                chat_id,
                message_id,
                ENTER_PRICE,
                reply_markup=keyboards.back_to_category_keyboard(category),
                parse_mode=PARSE_MODE_HTML,
            )
        except TelegramError as exc:
            log.debug("failed to edit message: %s", exc)

    def price_input(self, update: Update) -> None:
        """Compute the total for the pending item and show the main menu again."""
        message = update.get("message")
        if not message or not message.get("from"):
            return
        chat_id = message["chat"]["id"]
        text = (message.get("text") or "").strip()

        item = self._pending.get(chat_id)
        if item is None:
            return

        try:
            price = parse_price(text)
        except InvalidPriceError:
            try:
                self._api.send_message(chat_id, INVALID_PRICE_TEXT)
            except TelegramError as exc:
                log.error("failed to send parse error: %s", exc)
            return

        _, result_text = compute(item, price, self._rates)
        try:
            self._api.send_message(chat_id, result_text, parse_mode=PARSE_MODE_HTML)
        except TelegramError as exc:
            log.error("failed to send calc result: %s", exc)

        if self._start is not None:
            self._start(update)
        self._pending.clear(chat_id)

    def is_awaiting_price(self, update: Update) -> bool:
        """True for a text message in a chat that has an item waiting for its price."""
        if not update:
            return False
        message = update.get("message")
        if not isinstance(message, dict) or not message.get("text"):
            return False
        return self._pending.get(message["chat"]["id"]) is not None