"""User-facing texts and fixed links used by the bot."""

LOAD_ENV_ERROR_OUTPUT = "Could not load env file %s: %s"
ENV_VARIABLES_ERROR_OUTPUT = (
    "Something wrong with .env file. At least one variable is missing:\n  %s"
)
GREETING = "Доброго времени суток! Чем я могу Вам помочь?"
ADMIN_ACCOUNT = "https://example.com/contact"
STEPS_TO_MAKE_ORDER = (
    "Для заказа отправьте @s3mmm_7 в лс:\n\n"
    "1️⃣Ссылку на товар\n"
    "2️⃣Укажите размер товара\n"
    "3️⃣При необходимости цвет товара"
)
POIZON_GUIDE = "https://example.com/how-to-order"
WAY_TO_LINK = (
    "На странице выбранной Вами вещи нажимаем на кнопку поделиться "
    "(вместо нее иногда бывает зеленый значок) справа вверху, затем на кнопку "
    "скопировать ссылку во всплывающем окне"
)
CHOOSE_ITEM_TYPE = "Выберите тип вещи"
CHOOSE_SHOES_TYPE = "Выберите тип обуви"
CHOOSE_CLOTHES_TYPE = "Выберите тип одежды"
CHOOSE_ACCESSORIES_TYPE = "Выберите тип аксессуара"
OTHER_ITEM_TYPE_TEXT = (
    "❗️В этой категории вы можете посчитать стоимость товара "
    "БЕЗ учета доставки до России"
)
OVER_TWO_HUNDRED_EUR_TEXT = (
    "<i>Стоимость товара превысила беспошлинный лимит в 200 €. "
    "Таможенная пошлина составляет 15%% от суммы, превышающей 200 €\n\n"
    "Таможенная пошлина на ваш товар (Уже включена в итоговую стоимость): %s₽</i>\n\n"
)
ENTER_PRICE = (
    "Напишите стоимость товара в юанях\n\n"
    "❗️<i>Минимальная стоимость товара для заказа 20¥</i>"
)
PRICE_OUTPUT = (
    "Вы выбрали: <b>%s</b>\n\n"
    "Стоимость вашего товара: <b>%s ¥</b>\n\n"
    "Итоговая стоимость c учётом доставки до России: <b>%s ₽</b> ✅\n\n"
    "%s❗️<i>При заказе, к стоимости будет добавлена цена за доставку "
    "по России до вашего ПВЗ Boxberry</i>"
)
RATE_OUTPUT = "Курс на сегодня: %.2f₽ за 1¥"
RATE_ERROR_OUTPUT = (
    "Не удалось получить информацию о текущем курсе юаня к рублю. "
    "Обратитесь к @s3mmm_7 для уточнения курса на сегодня."
)