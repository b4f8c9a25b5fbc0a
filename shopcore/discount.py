from functools import reduce
from typing import Iterable, Optional, Tuple

from .constants import (
    BULK_BONUS,
    BULK_QUANTITY,
    DEFAULT_TIER_QUANTITY,
    DEFAULT_TIER_RATE,
    MAX_DISCOUNT_RATE,
)
from .domain import CartLine, DiscountTier


# ============ Максимальная скидка для строки корзины ============


def has_bulk_purchase(all_lines: Iterable[CartLine]) -> bool:
    """Есть ли в корзине хотя бы одна строка с количеством >= 10"""
    return any(line.quantity >= BULK_QUANTITY for line in all_lines)


def base_discount(line: CartLine) -> float:
    """Максимальная ставка среди ступеней, до которых дотянуло количество"""
    return reduce(
        lambda best, tier: (
            tier.rate if line.quantity >= tier.quantity and tier.rate > best else best
        ),
        line.product.discounts,
        0.0,
    )


def max_applicable_discount(line: CartLine, all_lines: Iterable[CartLine]) -> float:
    """
    Итоговая ставка скидки для строки:
    - лучшая подходящая ступень товара (0, если ни одна не подходит)
    - +5%, если ЛЮБАЯ строка корзины набрала 10+ штук
    - не больше 50% в любом случае
    """
    rate = base_discount(line)
    if has_bulk_purchase(all_lines):
        rate += BULK_BONUS
    return min(rate, MAX_DISCOUNT_RATE)


# ============ Редактирование списка ступеней (форма товара) ============


def default_tier() -> DiscountTier:
    return DiscountTier(quantity=DEFAULT_TIER_QUANTITY, rate=DEFAULT_TIER_RATE)


def add_tier(tiers: Tuple[DiscountTier, ...]) -> Tuple[DiscountTier, ...]:
    return tiers + (default_tier(),)


def remove_tier(
    tiers: Tuple[DiscountTier, ...], index: int
) -> Tuple[DiscountTier, ...]:
    return tuple(t for i, t in enumerate(tiers) if i != index)


def update_tier(
    tiers: Tuple[DiscountTier, ...],
    index: int,
    quantity: Optional[int] = None,
    rate: Optional[float] = None,
) -> Tuple[DiscountTier, ...]:
    """Меняет количество и/или ставку ступени по индексу, остальные не трогает"""

    def _patch(tier: DiscountTier) -> DiscountTier:
        return DiscountTier(
            quantity=tier.quantity if quantity is None else quantity,
            rate=tier.rate if rate is None else rate,
        )

    return tuple(_patch(t) if i == index else t for i, t in enumerate(tiers))


def is_valid_tier(tier: DiscountTier) -> bool:
    return tier.quantity > 0 and 0 < tier.rate <= 1


def filter_valid_tiers(tiers: Iterable[DiscountTier]) -> Tuple[DiscountTier, ...]:
    return tuple(filter(is_valid_tier, tiers))
