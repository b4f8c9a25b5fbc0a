from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from . import messages
from .cart import discounted_total, round_half_up
from .constants import AMOUNT, PERCENTAGE, PERCENTAGE_COUPON_MIN_TOTAL
from .domain import Cart, Coupon
from .ftypes import Maybe, Result, ResultKind


@dataclass(frozen=True)
class CouponCheck:
    valid: bool
    message: Optional[str] = None


# ============ Правила применения купона ============


def is_coupon_usable(current_discounted_total: int, discount_type: str) -> bool:
    """Процентный купон - только от 10,000 (после скидок по строкам)"""
    if discount_type == PERCENTAGE:
        return current_discounted_total >= PERCENTAGE_COUPON_MIN_TOTAL
    return True


def apply_coupon_discount(total: int, coupon: Coupon) -> int:
    if coupon.discount_type == AMOUNT:
        return max(0, total - coupon.discount_value)
    if coupon.discount_type == PERCENTAGE:
        return max(0, round_half_up(total * (1 - coupon.discount_value / 100)))
    return total


def validate_coupon_application(total: int, coupon: Coupon) -> CouponCheck:
    if is_coupon_usable(total, coupon.discount_type):
        return CouponCheck(valid=True)
    message = (
        messages.COUPON_MIN_PURCHASE_REQUIRED
        if coupon.discount_type == PERCENTAGE
        else messages.COUPON_UNAVAILABLE
    )
    return CouponCheck(valid=False, message=message)


def try_select_coupon(cart: Cart, coupon: Coupon) -> Result[Coupon]:
    """
    Выбор купона для корзины. Проверка идёт по сумме после скидок по строкам
    и только в момент выбора; при отказе выбранный купон не меняется
    """
    check = validate_coupon_application(discounted_total(cart), coupon)
    if not check.valid:
        return Result.fail(ResultKind.COUPON_UNUSABLE, check.message)
    return Result.ok(coupon, messages.COUPON_APPLIED)


# ============ Список купонов ============


def empty_coupon_form() -> Coupon:
    return Coupon(name="", code="", discount_type=AMOUNT, discount_value=0)


def find_coupon(coupons: Iterable[Coupon], code: str) -> Maybe[Coupon]:
    return Maybe.of(next((c for c in coupons if c.code == code), None))


def is_duplicate_code(coupons: Iterable[Coupon], code: str) -> bool:
    return any(c.code == code for c in coupons)


def add_coupon(coupons: Tuple[Coupon, ...], coupon: Coupon) -> Tuple[Coupon, ...]:
    return coupons + (coupon,)


def remove_coupon(coupons: Tuple[Coupon, ...], code: str) -> Tuple[Coupon, ...]:
    return tuple(filter(lambda c: c.code != code, coupons))
