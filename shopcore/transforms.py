import json
from dataclasses import asdict, replace
from typing import Callable, Iterable, Tuple

from .domain import Cart, CartLine, Coupon, DiscountTier, Product
from .ftypes import Maybe


# ============ Загрузка и (де)сериализация ============


def product_from_dict(data: dict) -> Product:
    return Product(
        id=str(data["id"]),
        name=str(data["name"]),
        price=int(data["price"]),
        stock=int(data["stock"]),
        discounts=tuple(
            DiscountTier(quantity=int(d["quantity"]), rate=float(d["rate"]))
            for d in data.get("discounts", [])
        ),
        description=str(data.get("description", "")),
        is_recommended=bool(data.get("is_recommended", False)),
    )


def coupon_from_dict(data: dict) -> Coupon:
    return Coupon(
        name=str(data["name"]),
        code=str(data["code"]),
        discount_type=str(data["discount_type"]),
        discount_value=int(data["discount_value"]),
    )


def cart_from_dicts(rows: Iterable[dict]) -> Cart:
    return tuple(
        CartLine(product=product_from_dict(r["product"]), quantity=int(r["quantity"]))
        for r in rows
    )


def to_dict(value) -> dict:
    """Product / Coupon / CartLine -> dict, пригодный для json.dump"""
    return asdict(value)


def load_seed(path: str) -> Tuple[Tuple[Product, ...], Tuple[Coupon, ...]]:
    """Загружает seed.json и возвращает кортежи иммутабельных товаров и купонов"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    products = tuple(map(product_from_dict, data.get("products", [])))
    coupons = tuple(map(coupon_from_dict, data.get("coupons", [])))
    return products, coupons


# ============ Идентификаторы ============


def generate_product_id(ts_ms: int) -> str:
    return f"p{ts_ms}"


def generate_order_number(ts_ms: int) -> str:
    """Номер заказа из метки времени; коллизии не обрабатываются"""
    return f"ORD-{ts_ms}"


# ============ Каталог (чистые функции) ============


def find_product(products: Iterable[Product], product_id: str) -> Maybe[Product]:
    """Безопасный поиск товара по ID"""
    return Maybe.of(next((p for p in products if p.id == product_id), None))


def create_product(
    products: Tuple[Product, ...], product: Product
) -> Tuple[Product, ...]:
    return products + (product,)


def update_product(
    products: Tuple[Product, ...], product_id: str, **changes
) -> Tuple[Product, ...]:
    """Возвращает новый каталог, где у товара product_id заменены поля changes"""
    return tuple(
        replace(p, **changes) if p.id == product_id else p for p in products
    )


def remove_product(
    products: Tuple[Product, ...], product_id: str
) -> Tuple[Product, ...]:
    return tuple(filter(lambda p: p.id != product_id, products))


# ============ Поиск (замыкания-фильтры) ============


def normalize_search_term(term: str) -> str:
    return term.lower().strip()


def by_search_term(term: str) -> Callable[[Product], bool]:
    """Фильтр по вхождению в название или описание; пустой запрос пропускает всё"""
    needle = normalize_search_term(term)
    if not needle:
        return lambda p: True
    return lambda p: needle in p.name.lower() or needle in p.description.lower()


def filter_products_by_search_term(
    products: Iterable[Product], term: str
) -> Tuple[Product, ...]:
    return tuple(filter(by_search_term(term), products))


def has_search_results(products: Iterable[Product], term: str) -> bool:
    if not term.strip():
        return True
    return len(filter_products_by_search_term(products, term)) > 0
