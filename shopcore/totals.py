from functools import reduce
from typing import Optional

from .cart import discounted_total, round_half_up, subtotal
from .coupon import apply_coupon_discount
from .domain import Cart, CartTotals, Coupon


def pipe(*funcs):
    """pipe(f, g, h)(x) == h(g(f(x)))"""
    return reduce(lambda f, g: lambda x: g(f(x)), funcs)


def cart_totals(cart: Cart, selected_coupon: Optional[Coupon]) -> CartTotals:
    """
    Итоги корзины "до / после":
      до    = сумма без скидок
      после = скидки по строкам -> купон (если выбран)
    Чистая функция: одинаковый вход -> одинаковый выход
    """
    with_coupon = (
        (lambda total: apply_coupon_discount(total, selected_coupon))
        if selected_coupon is not None
        else (lambda total: total)
    )
    after_pipeline = pipe(discounted_total, with_coupon, round_half_up)

    return CartTotals(
        total_before_discount=round_half_up(subtotal(cart)),
        total_after_discount=after_pipeline(cart),
    )


def savings(totals: CartTotals) -> int:
    """Сколько покупатель сэкономил"""
    return totals.total_before_discount - totals.total_after_discount
