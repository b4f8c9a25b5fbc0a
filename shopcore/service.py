import logging
import time
from dataclasses import replace
from typing import Callable, Optional, Tuple

from . import messages
from .cart import (
    refresh_line_products,
    remaining_stock,
    remove_line,
    total_item_count,
    try_add_to_cart,
    try_update_quantity,
)
from .constants import DISCOUNT_TYPES
from .coupon import (
    add_coupon,
    find_coupon,
    is_duplicate_code,
    remove_coupon,
    try_select_coupon,
)
from .discount import filter_valid_tiers
from .domain import CartTotals, Coupon, DiscountTier, Notification, Product, ShopState
from .frp import (
    DISMISS,
    EventBus,
    create_event,
    create_notification_bus,
    initial_state,
    result_to_event,
)
from .ftypes import Result, ResultKind
from .storage import JsonStorage
from .totals import cart_totals
from .transforms import (
    by_search_term,
    cart_from_dicts,
    coupon_from_dict,
    create_product,
    find_product,
    generate_order_number,
    generate_product_id,
    load_seed,
    product_from_dict,
    remove_product,
    to_dict,
    update_product,
)
from .validators import (
    is_valid_coupon_code,
    safe_parse_int,
    validate_discount_value,
    validate_price,
    validate_stock,
)

logger = logging.getLogger(__name__)


def _restore(storage: JsonStorage, key: str, convert: Callable, fallback):
    """Снимок из хранилища; битая структура -> warning и fallback"""
    rows = storage.load(key, None)
    if rows is None:
        return fallback
    try:
        return convert(rows)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Ignoring stored %s: %s", key, e)
        return fallback


class CatalogService:
    """Фасад для чтения каталога"""

    def __init__(self, products: Tuple[Product, ...]):
        self.products = products

    def find(self, product_id: str) -> Optional[Product]:
        return find_product(self.products, product_id).get_or_else(None)

    def search(self, term: str) -> Tuple[Product, ...]:
        """Товары, у которых запрос встречается в названии или описании"""
        return self.filter_products(by_search_term(term))

    def filter_products(self, predicate) -> Tuple[Product, ...]:
        return tuple(filter(predicate, self.products))


class ShopSession:
    """
    Вызывающий слой над чистым ядром.

    Держит одно изменяемое значение ShopState и целиком подменяет его после
    каждого вызова редьюсера ядра. Каждая операция возвращает Result и
    публикует уведомление в шину (успех / ошибка).
    """

    def __init__(
        self,
        state: ShopState = ShopState(),
        storage: Optional[JsonStorage] = None,
        bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.state = state
        self.storage = storage
        self.bus = bus or create_notification_bus()
        self.events = initial_state()
        self.clock = clock or (lambda: int(time.time() * 1000))

    @classmethod
    def from_seed(
        cls, seed_path: str, storage: Optional[JsonStorage] = None, **kwargs
    ) -> "ShopSession":
        """Начальные данные из seed.json, поверх - сохранённый снимок, если есть"""
        products, coupons = load_seed(seed_path)
        cart = ()
        if storage is not None:
            products = _restore(
                storage, "products", lambda rows: tuple(map(product_from_dict, rows)), products
            )
            coupons = _restore(
                storage, "coupons", lambda rows: tuple(map(coupon_from_dict, rows)), coupons
            )
            cart = _restore(storage, "cart", cart_from_dicts, cart)
        state = ShopState(products=products, coupons=coupons, cart=cart)
        return cls(state, storage=storage, **kwargs)

    # ---------- служебное ----------

    @property
    def catalog(self) -> CatalogService:
        return CatalogService(self.state.products)

    @property
    def notifications(self) -> Tuple[Notification, ...]:
        return self.events["notifications"]

    def _commit(self, new_state: ShopState) -> None:
        self.state = new_state
        if self.storage is not None:
            self.storage.save("products", [to_dict(p) for p in new_state.products])
            self.storage.save("coupons", [to_dict(c) for c in new_state.coupons])
            self.storage.save("cart", [to_dict(line) for line in new_state.cart])

    def _report(self, result: Result, success_message: str = "") -> Result:
        if not result.is_ok:
            logger.info("Rejected (%s): %s", result.kind.value, result.message)
        elif not (success_message or result.message):
            return result
        self.events = self.bus.publish(
            result_to_event(result, success_message), self.events
        )
        return result

    def dismiss(self, notification_id: str) -> None:
        event = create_event(DISMISS, {"notification_id": notification_id})
        self.events = self.bus.publish(event, self.events)

    def drain_notifications(self) -> Tuple[Notification, ...]:
        """Отдаёт накопленные уведомления и сразу их снимает"""
        pending = self.notifications
        for n in pending:
            self.dismiss(n.id)
        return pending

    def _missing_product(self, product_id: str) -> Result:
        return Result.fail(ResultKind.NOT_FOUND, messages.PRODUCT_NOT_FOUND, product_id)

    # ---------- корзина ----------

    def add_to_cart(self, product_id: str, qty: int = 1) -> Result:
        product = self.catalog.find(product_id)
        if product is None:
            return self._report(self._missing_product(product_id))

        result = try_add_to_cart(self.state.cart, product, qty)
        if result.is_ok:
            self._commit(replace(self.state, cart=result.payload))
        return self._report(result, messages.ITEM_ADDED_TO_CART)

    def remove_from_cart(self, product_id: str) -> Result:
        new_cart = remove_line(self.state.cart, product_id)
        self._commit(replace(self.state, cart=new_cart))
        return Result.ok(new_cart)

    def update_quantity(self, product_id: str, qty: int) -> Result:
        if qty <= 0:
            return self.remove_from_cart(product_id)

        product = self.catalog.find(product_id)
        if product is None:
            return self._report(self._missing_product(product_id))

        result = try_update_quantity(self.state.cart, product, qty)
        if result.is_ok:
            self._commit(replace(self.state, cart=result.payload))
        return self._report(result)

    def remaining_stock(self, product_id: str) -> int:
        product = self.catalog.find(product_id)
        return remaining_stock(product, self.state.cart) if product else 0

    def totals(self) -> CartTotals:
        return cart_totals(self.state.cart, self.state.selected_coupon)

    def item_count(self) -> int:
        return total_item_count(self.state.cart)

    def complete_order(self, ts_ms: Optional[int] = None) -> Result:
        """Оформляет заказ: выдаёт номер, очищает корзину и выбранный купон"""
        order_number = generate_order_number(self.clock() if ts_ms is None else ts_ms)
        logger.info("Order %s completed, totals=%s", order_number, self.totals())
        self._commit(replace(self.state, cart=(), selected_coupon=None))
        return self._report(
            Result.ok(order_number), messages.order_completed(order_number)
        )

    # ---------- купоны ----------

    def apply_coupon(self, code: str) -> Result:
        coupon = find_coupon(self.state.coupons, code).get_or_else(None)
        if coupon is None:
            return self._report(
                Result.fail(ResultKind.NOT_FOUND, messages.COUPON_NOT_FOUND, code)
            )

        result = try_select_coupon(self.state.cart, coupon)
        if result.is_ok:
            self._commit(replace(self.state, selected_coupon=result.payload))
        return self._report(result)

    def clear_coupon(self) -> Result:
        self._commit(replace(self.state, selected_coupon=None))
        return Result.ok(None)

    def add_coupon(self, coupon: Coupon) -> Result:
        coupon = replace(coupon, code=coupon.code.strip().upper())

        if not coupon.name.strip():
            result = Result.fail(ResultKind.RANGE_INVALID, messages.COUPON_NAME_REQUIRED)
        elif not is_valid_coupon_code(coupon.code):
            result = Result.fail(ResultKind.RANGE_INVALID, messages.COUPON_CODE_INVALID)
        elif is_duplicate_code(self.state.coupons, coupon.code):
            result = Result.fail(ResultKind.DUPLICATE, messages.COUPON_CODE_DUPLICATE)
        elif coupon.discount_type not in DISCOUNT_TYPES:
            result = Result.fail(ResultKind.RANGE_INVALID, messages.COUPON_TYPE_INVALID)
        else:
            check = validate_discount_value(coupon.discount_value, coupon.discount_type)
            if not check.is_valid:
                result = Result.fail(
                    ResultKind.RANGE_INVALID, check.error, check.corrected_value
                )
            else:
                result = Result.ok(coupon)

        if result.is_ok:
            self._commit(
                replace(self.state, coupons=add_coupon(self.state.coupons, coupon))
            )
        return self._report(result, messages.COUPON_ADDED)

    def delete_coupon(self, code: str) -> Result:
        if find_coupon(self.state.coupons, code).is_none():
            return self._report(
                Result.fail(ResultKind.NOT_FOUND, messages.COUPON_NOT_FOUND, code)
            )

        selected = self.state.selected_coupon
        self._commit(
            replace(
                self.state,
                coupons=remove_coupon(self.state.coupons, code),
                selected_coupon=None
                if selected is not None and selected.code == code
                else selected,
            )
        )
        return self._report(Result.ok(code), messages.COUPON_DELETED)

    # ---------- товары ----------

    def _check_product_fields(self, changes: dict) -> Optional[Result]:
        """Первое нарушение диапазона цены / остатка, или None"""
        if "name" in changes and not str(changes["name"]).strip():
            return Result.fail(ResultKind.RANGE_INVALID, messages.PRODUCT_NAME_REQUIRED)
        if "price" in changes:
            check = validate_price(changes["price"])
            if not check.is_valid:
                return Result.fail(
                    ResultKind.RANGE_INVALID, check.error, check.corrected_value
                )
        if "stock" in changes:
            check = validate_stock(changes["stock"])
            if not check.is_valid:
                return Result.fail(
                    ResultKind.RANGE_INVALID, check.error, check.corrected_value
                )
        return None

    def add_product(
        self,
        name: str,
        price: int,
        stock: int,
        discounts: Tuple[DiscountTier, ...] = (),
        description: str = "",
        is_recommended: bool = False,
        ts_ms: Optional[int] = None,
    ) -> Result:
        error = self._check_product_fields({"name": name, "price": price, "stock": stock})
        if error is not None:
            return self._report(error)

        product = Product(
            id=generate_product_id(self.clock() if ts_ms is None else ts_ms),
            name=name.strip(),
            price=safe_parse_int(price),
            stock=safe_parse_int(stock),
            discounts=filter_valid_tiers(discounts),
            description=description,
            is_recommended=is_recommended,
        )
        self._commit(
            replace(self.state, products=create_product(self.state.products, product))
        )
        return self._report(Result.ok(product), messages.PRODUCT_ADDED)

    def update_product(self, product_id: str, **changes) -> Result:
        if self.catalog.find(product_id) is None:
            return self._report(self._missing_product(product_id))

        error = self._check_product_fields(changes)
        if error is not None:
            return self._report(error)

        for key in ("price", "stock"):
            if key in changes:
                changes[key] = safe_parse_int(changes[key])
        if "discounts" in changes:
            changes["discounts"] = filter_valid_tiers(changes["discounts"])
        products = update_product(self.state.products, product_id, **changes)
        self._commit(
            replace(
                self.state,
                products=products,
                cart=refresh_line_products(self.state.cart, products),
            )
        )
        return self._report(
            Result.ok(self.catalog.find(product_id)), messages.PRODUCT_UPDATED
        )

    def delete_product(self, product_id: str) -> Result:
        if self.catalog.find(product_id) is None:
            return self._report(self._missing_product(product_id))

        products = remove_product(self.state.products, product_id)
        self._commit(
            replace(
                self.state,
                products=products,
                cart=refresh_line_products(self.state.cart, products),
            )
        )
        return self._report(Result.ok(product_id), messages.PRODUCT_DELETED)
