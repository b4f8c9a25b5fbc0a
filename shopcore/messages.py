# Шаблоны сообщений для уведомлений (успех / ошибка)

PRODUCT_ADDED = "Товар добавлен."
PRODUCT_UPDATED = "Товар обновлён."
PRODUCT_DELETED = "Товар удалён."
COUPON_ADDED = "Купон добавлен."
COUPON_DELETED = "Купон удалён."
COUPON_APPLIED = "Купон применён."
ITEM_ADDED_TO_CART = "Товар добавлен в корзину"


def order_completed(order_number: str) -> str:
    return f"Заказ оформлен. Номер заказа: {order_number}"


STOCK_INSUFFICIENT = "Недостаточно товара на складе!"
QUANTITY_INVALID = "Количество должно быть больше 0"


def stock_exceeded(max_stock: int) -> str:
    return f"На складе только {max_stock} шт."


STOCK_BELOW_ZERO = "Остаток не может быть меньше 0"
STOCK_LIMIT_EXCEEDED = "Остаток не может превышать 9999 шт."
DISCOUNT_RATE_EXCEEDED = "Скидка не может превышать 100%"
DISCOUNT_RATE_BELOW_ZERO = "Скидка не может быть меньше 0%"
DISCOUNT_AMOUNT_EXCEEDED = "Сумма скидки не может превышать 100,000"
DISCOUNT_AMOUNT_BELOW_ZERO = "Сумма скидки не может быть меньше 0"
PRICE_BELOW_ZERO = "Цена должна быть больше 0"

COUPON_UNAVAILABLE = "Купон нельзя использовать."
COUPON_MIN_PURCHASE_REQUIRED = (
    "Процентный купон доступен при сумме заказа от 10,000."
)
COUPON_CODE_INVALID = "Код купона: 4-12 заглавных латинских букв или цифр"
COUPON_CODE_DUPLICATE = "Купон с таким кодом уже существует"
COUPON_TYPE_INVALID = "Неизвестный тип скидки купона"
COUPON_NAME_REQUIRED = "Укажите название купона"
COUPON_NOT_FOUND = "Купон не найден"
PRODUCT_NOT_FOUND = "Товар не найден"
PRODUCT_NAME_REQUIRED = "Укажите название товара"
