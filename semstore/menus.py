"""Handlers for the bot's menus: start, order, rate and item category screens."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from semstore import keyboards
from semstore.constants import (
    CHOOSE_ACCESSORIES_TYPE,
    CHOOSE_CLOTHES_TYPE,
    CHOOSE_ITEM_TYPE,
    CHOOSE_SHOES_TYPE,
    GREETING,
    OTHER_ITEM_TYPE_TEXT,
    RATE_ERROR_OUTPUT,
    RATE_OUTPUT,
    STEPS_TO_MAKE_ORDER,
    WAY_TO_LINK,
)
from semstore.exchange import RateError
from semstore.state import MenuMessages
from semstore.telegram import PARSE_MODE_HTML, TelegramError

WAY_TO_LINK_IMAGE = "images/way_to_link.jpg"

Update = dict[str, Any]

log = logging.getLogger(__name__)

_CATEGORY_SCREENS: dict[str, tuple[str, Callable[[], dict]]] = {
    "itemType": (CHOOSE_ITEM_TYPE, keyboards.item_type_keyboard),
    "shoesType": (CHOOSE_SHOES_TYPE, keyboards.shoes_type_keyboard),
    "clothesType": (CHOOSE_CLOTHES_TYPE, keyboards.clothes_type_keyboard),
    "accessoriesType": (CHOOSE_ACCESSORIES_TYPE, keyboards.accessories_type_keyboard),
    "otherType": (OTHER_ITEM_TYPE_TEXT, keyboards.other_type_keyboard),
}


class _Rates(Protocol):
    def get_rate(self, currency: str) -> float: ...


class MenuHandlers:
    """Update handlers that show and switch between menu screens."""

    def __init__(
        self,
        api: Any,
        menu_messages: MenuMessages,
        rates: _Rates,
        *,
        way_to_link_image: str = WAY_TO_LINK_IMAGE,
    ) -> None:
        self._api = api
        self._menus = menu_messages
        self._rates = rates
        self._image = way_to_link_image

    def _open_callback(self, update: Update) -> tuple[int, int]:
        """Acknowledge the callback query and return its chat and message ids."""
        query = update["callback_query"]
        try:
            self._api.answer_callback_query(query["id"])
        except TelegramError as exc:
            log.debug("failed to answer callback query: %s", exc)
        message = query["message"]
        return message["chat"]["id"], message["message_id"]

    def _edit(self, chat_id: int, message_id: int, text: str, keyboard: dict) -> None:
        try:
            self._api.edit_message_text(
                chat_id, message_id, text, reply_markup=keyboard, parse_mode=PARSE_MODE_HTML
            )
        except TelegramError as exc:
            log.debug("failed to edit message: %s", exc)

    def _show(self, update: Update, text: str, keyboard: dict) -> None:
        chat_id, message_id = self._open_callback(update)
        self._edit(chat_id, message_id, text, keyboard)

    def _remember(self, chat_id: int, sent: Any) -> None:
        sent_id = sent.get("message_id", 0) if isinstance(sent, dict) else 0
        if sent_id:
            self._menus.set(chat_id, sent_id)

    def start(self, update: Update) -> None:
        """Send the main menu, replacing the previous one in the chat."""
        message = update.get("message") if update else None
        if not message:
            return
        user = message.get("from") or {}
        chat_id = message["chat"]["id"]
        log.info(
            "User: %s %s (ID: %d)",
            user.get("first_name", ""),
            user.get("last_name", ""),
            user.get("id", 0),
        )

        previous = self._menus.get(chat_id)
        if previous:
            try:
                self._api.delete_message(chat_id, previous)
            except TelegramError:
                pass
            self._menus.clear(chat_id)

        try:
            sent = self._api.send_message(
                chat_id, GREETING, reply_markup=keyboards.main_keyboard()
            )
        except TelegramError as exc:
            log.error("failed to send start message: %s", exc)
            return
        self._remember(chat_id, sent)

    def order(self, update: Update) -> None:
        self._show(update, STEPS_TO_MAKE_ORDER, keyboards.order_keyboard())

    def item_type(self, update: Update) -> None:
        self._show(update, CHOOSE_ITEM_TYPE, keyboards.item_type_keyboard())

    def rate(self, update: Update) -> None:
        """Show today's yuan rate, or an apology if it is unavailable."""
        chat_id, message_id = self._open_callback(update)
        try:
            text = RATE_OUTPUT % self._rates.get_rate("CNY")
        except RateError as exc:
            log.error("failed to fetch CNY exchange rate: %s", exc)
            text = RATE_ERROR_OUTPUT
        self._edit(chat_id, message_id, text, keyboards.back_to_home_keyboard())

    def back_to_main(self, update: Update) -> None:
        self._show(update, GREETING, keyboards.main_keyboard())

    def way_to_link(self, update: Update) -> None:
        """Replace the order menu with a picture explaining how to copy a link."""
        chat_id, message_id = self._open_callback(update)
        try:
            self._api.edit_message_photo(
                chat_id,
                message_id,
                self._image,
                WAY_TO_LINK,
                keyboards.back_to_order_keyboard(),
            )
        except (OSError, TelegramError):
            log.error("image %s have not been uploaded", self._image)

    def back_from_photo(self, update: Update) -> None:
        """Delete the picture message and send the order menu anew."""
        chat_id, message_id = self._open_callback(update)
        try:
            self._api.delete_message(chat_id, message_id)
        except TelegramError as exc:
            log.error("failed to delete image message: %s", exc)
        try:
            sent = self._api.send_message(
                chat_id, STEPS_TO_MAKE_ORDER, reply_markup=keyboards.order_keyboard()
            )
        except TelegramError as exc:
            log.error("failed to send order menu: %s", exc)
            return
        self._remember(chat_id, sent)

    def shoes_type(self, update: Update) -> None:
        self._show(update, CHOOSE_SHOES_TYPE, keyboards.shoes_type_keyboard())

    def clothes_type(self, update: Update) -> None:
        self._show(update, CHOOSE_CLOTHES_TYPE, keyboards.clothes_type_keyboard())

    def accessories_type(self, update: Update) -> None:
        self._show(update, CHOOSE_ACCESSORIES_TYPE, keyboards.accessories_type_keyboard())

    def other_item_type(self, update: Update) -> None:
        self._show(update, OTHER_ITEM_TYPE_TEXT, keyboards.other_type_keyboard())

    def back_to_category(self, update: Update) -> None:
        """Return to the category named after ``back_to_category:`` in the callback data."""
        chat_id, message_id = self._open_callback(update)
        parts = (update["callback_query"].get("data") or "").split(":")
        category = parts[1] if len(parts) > 1 else ""
        screen = _CATEGORY_SCREENS.get(category)
        if screen is None:
            log.warning("unknown item category: %s", category)
            return
        text, keyboard = screen
        self._edit(chat_id, message_id, text, keyboard())