import pytest

from semstore import keyboards
from semstore.calculation import (
    INVALID_PRICE_TEXT,
    UNKNOWN_ITEM_TEXT,
    CalculationHandlers,
)
from semstore.calculator import Item, PendingItems, compute
from semstore.constants import ENTER_PRICE
from semstore.telegram import PARSE_MODE_HTML

CHAT = 42
MESSAGE = 7


class FakeAPI:
    def __init__(self):
        self.calls = []

    def answer_callback_query(self, callback_query_id):
        self.calls.append(("answer", callback_query_id))
        return True

    def send_message(self, chat_id, text, reply_markup=None, parse_mode=None):
        self.calls.append(("send", chat_id, text, reply_markup, parse_mode))
        return {"message_id": 100}

    def edit_message_text(self, chat_id, message_id, text, reply_markup=None, parse_mode=None):
        self.calls.append(("edit", chat_id, message_id, text, reply_markup, parse_mode))
        return True


class FakeRates:
    def get_rate(self, currency):
        return {"CNY": 12.0, "EUR": 100.0}[currency]

    def get_rub_eur(self):
        return 0.01


ITEMS = {
    "boots": Item("Ботинки", 1000, 2000),
    "continue": Item("Другое", 0, 0),
}


def callback(data):
    return {
        "update_id": 1,
        "callback_query": {
            "id": "q1",
            "data": data,
            "message": {"message_id": MESSAGE, "chat": {"id": CHAT}},
        },
    }


def text_message(text, sender=True):
    message = {"message_id": 5, "chat": {"id": CHAT}, "text": text}
    if sender:
        message["from"] = {"id": 1, "first_name": "Ann"}
    return {"update_id": 2, "message": message}


@pytest.fixture
def setup():
    api = FakeAPI()
    pending = PendingItems(ITEMS)
    started = []
    handlers = CalculationHandlers(api, pending, FakeRates(), start=started.append)
    return api, pending, handlers, started


def test_item_selected_sets_pending_and_asks_price(setup):
    api, pending, handlers, _ = setup
    handlers.item_selected(callback("item:shoesType:boots"))
    assert pending.get(CHAT) == ITEMS["boots"]
    assert api.calls[0] == ("answer", "q1")
    assert api.calls[1] == (
        "edit",
        CHAT,
        MESSAGE,
        ENTER_PRICE,
        keyboards.back_to_category_keyboard("shoesType"),
        PARSE_MODE_HTML,
    )


def test_item_selected_unknown_item(setup):
    api, pending, handlers, _ = setup
    handlers.item_selected(callback("item:shoesType:rocket"))
    assert pending.get(CHAT) is None
    assert api.calls[-1][:3] == ("send", CHAT, UNKNOWN_ITEM_TEXT)


@pytest.mark.parametrize("data", ["item:shoesType", "", "item"])
def test_item_selected_malformed_data_is_ignored(setup, data):
    api, pending, handlers, _ = setup
    handlers.item_selected(callback(data))
    assert api.calls == []
    assert pending.get(CHAT) is None


def test_price_input_invalid_keeps_pending(setup):
    api, pending, handlers, started = setup
    pending.set(CHAT, "boots")
    handlers.price_input(text_message("abc"))
    assert api.calls == [("send", CHAT, INVALID_PRICE_TEXT, None, None)]
    assert pending.get(CHAT) == ITEMS["boots"]
    assert started == []


def test_price_input_below_minimum_rejected(setup):
    api, pending, handlers, _ = setup
    pending.set(CHAT, "boots")
    handlers.price_input(text_message("19"))
    assert api.calls[0][2] == INVALID_PRICE_TEXT


def test_price_input_sends_result_and_restarts(setup):
    api, pending, handlers, started = setup
    pending.set(CHAT, "boots")
    update = text_message("  150  ")
    handlers.price_input(update)
    _, expected = compute(ITEMS["boots"], 150, FakeRates())
    assert api.calls == [("send", CHAT, expected, None, PARSE_MODE_HTML)]
    assert started == [update]
    assert pending.get(CHAT) is None


def test_price_input_without_pending_does_nothing(setup):
    api, _, handlers, started = setup
    handlers.price_input(text_message("150"))
    assert api.calls == []
    assert started == []


def test_price_input_without_sender_does_nothing(setup):
    api, pending, handlers, _ = setup
    pending.set(CHAT, "boots")
    handlers.price_input(text_message("150", sender=False))
    assert api.calls == []
    assert pending.get(CHAT) == ITEMS["boots"]


def test_is_awaiting_price(setup):
    _, pending, handlers, _ = setup
    assert handlers.is_awaiting_price(text_message("150")) is False
    pending.set(CHAT, "continue")
    assert handlers.is_awaiting_price(text_message("150")) is True
    assert handlers.is_awaiting_price(text_message("")) is False
    assert handlers.is_awaiting_price(callback("item:x:y")) is False
    assert handlers.is_awaiting_price({}) is False