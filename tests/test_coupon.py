import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from shopcore import messages
from shopcore.domain import CartLine, Coupon, Product
from shopcore.ftypes import ResultKind
from shopcore.coupon import (
    add_coupon,
    apply_coupon_discount,
    empty_coupon_form,
    find_coupon,
    is_coupon_usable,
    is_duplicate_code,
    remove_coupon,
    try_select_coupon,
    validate_coupon_application,
)


@pytest.fixture
def percent20():
    return Coupon(name="20%", code="PERCENT20", discount_type="percentage", discount_value=20)


@pytest.fixture
def amount_max():
    return Coupon(name="Max", code="AMOUNTMAX", discount_type="amount", discount_value=100000)


def test_percentage_coupon_needs_min_total():
    assert is_coupon_usable(15000, "percentage")
    assert is_coupon_usable(10000, "percentage")
    assert not is_coupon_usable(9999, "percentage")


def test_amount_coupon_always_usable():
    assert is_coupon_usable(0, "amount")
    assert is_coupon_usable(500, "amount")


def test_percentage_discount(percent20):
    assert apply_coupon_discount(15000, percent20) == 12000


def test_amount_discount_floors_at_zero(amount_max):
    assert apply_coupon_discount(50000, amount_max) == 0


def test_coupon_result_within_bounds(percent20, amount_max):
    small = Coupon(name="s", code="SMALL1", discount_type="amount", discount_value=300)
    full = Coupon(name="f", code="FULL100", discount_type="percentage", discount_value=100)
    for total in (0, 1, 299, 5000, 123457):
        for coupon in (percent20, amount_max, small, full):
            assert 0 <= apply_coupon_discount(total, coupon) <= total


def test_validate_coupon_application_messages(percent20, amount_max):
    ok = validate_coupon_application(15000, percent20)
    assert ok.valid and ok.message is None

    rejected = validate_coupon_application(5000, percent20)
    assert not rejected.valid
    assert rejected.message == messages.COUPON_MIN_PURCHASE_REQUIRED

    assert validate_coupon_application(0, amount_max).valid


def test_try_select_coupon_uses_discounted_total(percent20):
    """Порог считается после скидок по строкам: 10400 -> 9880 < 10000"""
    product = Product(id="p1", name="Bag", price=1040, stock=50)
    cart = (CartLine(product, 10),)  # 10 шт. -> оптовая скидка 5%
    result = try_select_coupon(cart, percent20)
    assert result.kind is ResultKind.COUPON_UNUSABLE
    assert result.message == messages.COUPON_MIN_PURCHASE_REQUIRED


def test_try_select_coupon_ok(percent20):
    product = Product(id="p1", name="Bag", price=15000, stock=5)
    result = try_select_coupon((CartLine(product, 1),), percent20)
    assert result.is_ok
    assert result.payload == percent20


def test_coupon_list_operations(percent20, amount_max):
    coupons = add_coupon((percent20,), amount_max)
    assert coupons == (percent20, amount_max)
    assert is_duplicate_code(coupons, "AMOUNTMAX")
    assert not is_duplicate_code(coupons, "OTHER")
    assert find_coupon(coupons, "PERCENT20").get_or_else(None) == percent20
    assert find_coupon(coupons, "NONE").is_none()
    assert remove_coupon(coupons, "PERCENT20") == (amount_max,)


def test_empty_coupon_form():
    form = empty_coupon_form()
    assert form.discount_type == "amount"
    assert form.discount_value == 0
    assert form.code == ""


def test_unknown_discount_type_leaves_total_unchanged():
    fixed = Coupon(name="x", code="WEIRD1", discount_type="fixed", discount_value=5000)
    assert apply_coupon_discount(10000, fixed) == 10000


def test_percentage_over_100_floors_at_zero():
    over = Coupon(name="x", code="OVER150", discount_type="percentage", discount_value=150)
    assert apply_coupon_discount(10000, over) == 0
