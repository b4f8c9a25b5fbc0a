from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class DiscountTier:
    quantity: int  # минимальное количество в строке
    rate: float  # 0.1 == 10%


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int
    stock: int
    discounts: Tuple[DiscountTier, ...] = ()
    description: str = ""
    is_recommended: bool = False


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int


Cart = Tuple[CartLine, ...]


@dataclass(frozen=True)
class Coupon:
    name: str
    code: str
    discount_type: str  # "amount" | "percentage"
    discount_value: int


@dataclass(frozen=True)
class CartTotals:
    total_before_discount: int
    total_after_discount: int


@dataclass(frozen=True)
class ShopState:
    products: Tuple[Product, ...] = ()
    coupons: Tuple[Coupon, ...] = ()
    cart: Cart = ()
    selected_coupon: Optional[Coupon] = None


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    type: str  # "success" | "error" | "warning"


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: dict
