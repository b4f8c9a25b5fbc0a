import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from shopcore.domain import CartLine, CartTotals, Coupon, DiscountTier, Product
from shopcore.totals import cart_totals, pipe, savings


@pytest.fixture
def cart():
    phone = Product(
        id="p1", name="Phone", price=10000, stock=20,
        discounts=(DiscountTier(quantity=3, rate=0.1),),
    )
    case = Product(id="p2", name="Case", price=500, stock=50)
    return (CartLine(phone, 3), CartLine(case, 12))


def test_totals_without_coupon(cart):
    totals = cart_totals(cart, None)
    assert totals == CartTotals(total_before_discount=36000, total_after_discount=31200)


def test_totals_with_amount_coupon(cart):
    coupon = Coupon(name="5000", code="AMOUNT5000", discount_type="amount", discount_value=5000)
    assert cart_totals(cart, coupon).total_after_discount == 26200


def test_totals_with_percentage_coupon(cart):
    coupon = Coupon(name="10%", code="PERCENT10", discount_type="percentage", discount_value=10)
    assert cart_totals(cart, coupon).total_after_discount == 28080


def test_empty_cart_totals():
    assert cart_totals((), None) == CartTotals(0, 0)


def test_cart_totals_is_idempotent(cart):
    coupon = Coupon(name="10%", code="PERCENT10", discount_type="percentage", discount_value=10)
    assert cart_totals(cart, coupon) == cart_totals(cart, coupon)


def test_after_never_exceeds_before(cart):
    coupon = Coupon(name="Max", code="AMOUNTMAX", discount_type="amount", discount_value=100000)
    totals = cart_totals(cart, coupon)
    assert totals.total_after_discount == 0
    assert 0 <= totals.total_after_discount <= totals.total_before_discount
    assert savings(totals) == 36000


def test_pipe_order():
    assert pipe(lambda x: x + 1, lambda x: x * 2)(3) == 8
