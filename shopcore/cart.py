import math
from functools import reduce
from typing import Iterable

from . import messages
from .discount import max_applicable_discount
from .domain import Cart, CartLine, Product
from .ftypes import Maybe, Result, ResultKind


def round_half_up(value: float) -> int:
    """Округление как Math.round: .5 всегда вверх (round() в Python банковский)"""
    return int(math.floor(value + 0.5))


# ============ Поиск и остатки ============


def find_line(cart: Cart, product_id: str) -> Maybe[CartLine]:
    found = next((line for line in cart if line.product.id == product_id), None)
    return Maybe.of(found)


def quantity_of(cart: Cart, product_id: str) -> int:
    return find_line(cart, product_id).map(lambda line: line.quantity).get_or_else(0)


def remaining_stock(product: Product, cart: Cart) -> int:
    """Остаток = склад - уже лежит в корзине (<= 0 значит добавить нельзя)"""
    return product.stock - quantity_of(cart, product.id)


def is_stock_exceeded(quantity: int, stock: int) -> bool:
    return quantity > stock


def total_item_count(cart: Cart) -> int:
    """Общее количество штук в корзине (для бейджа в шапке)"""
    return reduce(lambda acc, line: acc + line.quantity, cart, 0)


# ============ Операции над корзиной (чистые функции) ============


def add_line(cart: Cart, product: Product, qty: int = 1) -> Cart:
    """
    Возвращает новую корзину: если строка товара уже есть, увеличивает
    количество на месте, иначе дописывает строку в конец
    """
    if find_line(cart, product.id).is_some():
        return tuple(
            CartLine(line.product, line.quantity + qty)
            if line.product.id == product.id
            else line
            for line in cart
        )
    return cart + (CartLine(product, qty),)


def remove_line(cart: Cart, product_id: str) -> Cart:
    if find_line(cart, product_id).is_none():
        return cart
    return tuple(filter(lambda line: line.product.id != product_id, cart))


def set_line_quantity(cart: Cart, product_id: str, qty: int) -> Cart:
    """qty <= 0 удаляет строку; склад здесь не проверяется"""
    if qty <= 0:
        return remove_line(cart, product_id)
    return tuple(
        CartLine(line.product, qty) if line.product.id == product_id else line
        for line in cart
    )


def refresh_line_products(cart: Cart, products: Iterable[Product]) -> Cart:
    """
    Пересобирает снимки товаров в строках после правки каталога.
    Строки удалённых товаров выпадают, количество урезается до нового склада
    (строка с нулевым складом тоже выпадает)
    """
    by_id = {p.id: p for p in products}
    refreshed = (
        CartLine(by_id[line.product.id], min(line.quantity, by_id[line.product.id].stock))
        for line in cart
        if line.product.id in by_id
    )
    return tuple(line for line in refreshed if line.quantity > 0)


# ============ Суммы ============


def line_total(line: CartLine, all_lines: Cart) -> int:
    """Цена * количество * (1 - скидка), округление один раз в конце"""
    rate = max_applicable_discount(line, all_lines)
    return round_half_up(line.product.price * line.quantity * (1 - rate))


def subtotal(cart: Cart) -> int:
    """Сумма без скидок"""
    return round_half_up(
        reduce(lambda acc, line: acc + line.product.price * line.quantity, cart, 0)
    )


def discounted_total(cart: Cart) -> int:
    """Сумма после скидок по строкам, до купона"""
    return reduce(lambda acc, line: acc + line_total(line, cart), cart, 0)


# ============ Проверки склада на каждом изменении ============


def try_add_to_cart(cart: Cart, product: Product, qty: int = 1) -> Result[Cart]:
    """
    Добавление с проверкой склада:
    ошибки -> RANGE_INVALID (qty <= 0), STOCK_INSUFFICIENT (остатка нет)
    или STOCK_EXCEEDED (после добавления строка превысит склад);
    корзина при ошибке прежняя.
    Лишнее добавление к полностью выбранному складу - это STOCK_INSUFFICIENT,
    а не STOCK_EXCEEDED: остатка уже нет, превышать нечего
    """
    if qty <= 0:
        return Result.fail(ResultKind.RANGE_INVALID, messages.QUANTITY_INVALID, qty)
    if remaining_stock(product, cart) <= 0:
        return Result.fail(ResultKind.STOCK_INSUFFICIENT, messages.STOCK_INSUFFICIENT)

    new_cart = add_line(cart, product, qty)
    if is_stock_exceeded(quantity_of(new_cart, product.id), product.stock):
        return Result.fail(
            ResultKind.STOCK_EXCEEDED,
            messages.stock_exceeded(product.stock),
            product.stock,
        )
    return Result.ok(new_cart)


def try_update_quantity(cart: Cart, product: Product, qty: int) -> Result[Cart]:
    """Запрос сверх склада отклоняется целиком (не урезается до максимума)"""
    if qty <= 0:
        return Result.ok(remove_line(cart, product.id))
    if is_stock_exceeded(qty, product.stock):
        return Result.fail(
            ResultKind.STOCK_EXCEEDED,
            messages.stock_exceeded(product.stock),
            product.stock,
        )
    return Result.ok(set_line_quantity(cart, product.id, qty))
