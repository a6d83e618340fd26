"""Inline keyboards, as Telegram ``InlineKeyboardMarkup`` objects."""

from __future__ import annotations

from semstore.constants import ADMIN_ACCOUNT, POIZON_GUIDE

Keyboard = dict[str, list[list[dict[str, str]]]]

BACK_TO_ITEM_TYPE_TEXT = "🔙 Вернуться назад"


def _button(text: str, *, data: str | None = None, url: str | None = None) -> dict[str, str]:
    button = {"text": text}
    if data is not None:
        button["callback_data"] = data
    if url is not None:
        button["url"] = url
    return button


def _markup(*rows: list[dict[str, str]]) -> Keyboard:
    return {"inline_keyboard": [list(row) for row in rows]}


def back_to_home_keyboard() -> Keyboard:
    return _markup([_button("🔙 Назад в меню", data="back_to_main")])


def back_to_category_keyboard(item_category: str) -> Keyboard:
    return _markup([_button("🔙 Назад", data=f"back_to_category:{item_category}")])


def item_type_keyboard() -> Keyboard:
    return _markup(
        [_button("👟 Обувь", data="shoes"), _button("👕 Одежда", data="clothes")],
        [
            _button("🕶 Аксессуар", data="accessories"),
            _button("👜 Рюкзак/Сумка", data="item:itemType:bags"),
        ],
        [_button("Другое", data="other_item")],
        [_button("🔙 Назад в меню", data="back_to_main")],
    )


def shoes_type_keyboard() -> Keyboard:
    return _markup(
        [
            _button("👟 Кроссовки", data="item:shoesType:sneakers"),
            _button("👟 Кеды", data="item:shoesType:other_sneakers"),
        ],
        [
            _button("🥾 Ботинки", data="item:shoesType:boots"),
            _button("👠 Туфли", data="item:shoesType:heels"),
        ],
        [
            _button("🩴 Тапки", data="item:shoesType:slippers"),
            _button("👡 Сандали", data="item:shoesType:sandals"),
        ],
        [_button(BACK_TO_ITEM_TYPE_TEXT, data="back_to_item_type")],
    )


def clothes_type_keyboard() -> Keyboard:
    return _markup(
        [
            _button("👕 Футболка/Рубашка", data="item:clothesType:shirts"),
            _button("👘 Толстовка/Худи", data="item:clothesType:hoodies"),
        ],
        [
            _button("🧥 Пуховик/Пальто", data="item:clothesType:coats"),
            _button("🦺 Жилетка/Куртка", data="item:clothesType:jackets"),
        ],
        [
            _button("👖 Штаны", data="item:clothesType:pants"),
            _button("🩳 Шорты", data="item:clothesType:shorts"),
        ],
        [
            _button("🧢 Шапка/Кепка", data="item:clothesType:hats"),
            _button("🧦 Носки", data="item:clothesType:socks"),
        ],
        [_button(BACK_TO_ITEM_TYPE_TEXT, data="back_to_item_type")],
    )


def accessories_type_keyboard() -> Keyboard:
    return _markup(
        [
            _button("👓 Очки", data="item:accessoriesType:glasses"),
            _button("⌚️ Часы", data="item:accessoriesType:watches"),
        ],
        [
            _button("💍 Украшение", data="item:accessoriesType:jewelry"),
            _button("👖 Ремень", data="item:accessoriesType:belts"),
        ],
        [
            _button("🧤 Перчатки", data="item:accessoriesType:gloves"),
            _button("🧢 Головной убор", data="item:accessoriesType:headdress"),
        ],
        [_button(BACK_TO_ITEM_TYPE_TEXT, data="back_to_item_type")],
    )


def other_type_keyboard() -> Keyboard:
    return _markup(
        [_button("Продолжить", data="item:otherType:continue")],
        [_button(BACK_TO_ITEM_TYPE_TEXT, data="back_to_item_type")],
    )


def main_keyboard() -> Keyboard:
    return _markup(
        [_button("Заказать 📦", data="order")],
        [
            _button("Посчитать заказ 💸", data="calculate"),
            _button("Задать вопрос", url=ADMIN_ACCOUNT),
        ],
        [
            _button("Актуальный курс 💹", data="rate"),
            _button("Как заказать❓", url=POIZON_GUIDE),
        ],
    )


def order_keyboard() -> Keyboard:
    return _markup(
        [
            _button("Написать s3mmm_7", url=ADMIN_ACCOUNT),
            _button("Где взять ссылку❓", data="way_to_link"),
        ],
        [_button("🔙 Назад в меню", data="back_to_main")],
    )


def back_to_order_keyboard() -> Keyboard:
    return _markup([_button("🔙 Назад к заказу", data="back_from_photo")])