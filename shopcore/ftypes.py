# shopcore/ftypes.py
# Functional small types: Maybe for lookups and Result for business outcomes.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# Maybe (optional value)


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Простая Maybe-обёртка (Option) для поиска товара / строки / купона.
    Используем Maybe.some(value) или Maybe.nothing().
    """

    value: Optional[T]

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[None]":
        return Maybe(None)

    @staticmethod
    def of(value: Optional[T]) -> "Maybe[T]":
        return Maybe(value)

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        return Maybe.some(fn(self.value)) if self.is_some() else Maybe.nothing()

    def bind(self, fn: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        return fn(self.value) if self.is_some() else Maybe.nothing()

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default

    def __repr__(self) -> str:
        return f"Some({self.value})" if self.is_some() else "Nothing"


# Result (Ok | ошибка бизнес-правила)


class ResultKind(str, Enum):
    OK = "ok"
    STOCK_INSUFFICIENT = "stock_insufficient"
    STOCK_EXCEEDED = "stock_exceeded"
    COUPON_UNUSABLE = "coupon_unusable"
    RANGE_INVALID = "range_invalid"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Результат операции ядра: вид (kind) + полезная нагрузка.

    OK        -> payload = новое значение (корзина, купон, номер заказа)
    остальные -> payload = подсказка для UI (например, максимальный остаток),
                 message = готовый текст для уведомления

    Ядро никогда не бросает исключения для корректных входных данных,
    вызывающий слой сопоставляет kind и решает, что показать.
    """

    kind: ResultKind
    payload: Any = None
    message: Optional[str] = None

    @staticmethod
    def ok(payload: T, message: Optional[str] = None) -> "Result[T]":
        return Result(ResultKind.OK, payload, message)

    @staticmethod
    def fail(kind: ResultKind, message: str, payload: Any = None) -> "Result[Any]":
        if kind is ResultKind.OK:
            raise ValueError("Result.fail requires an error kind")
        return Result(kind, payload, message)

    @property
    def is_ok(self) -> bool:
        return self.kind is ResultKind.OK

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        return Result(self.kind, fn(self.payload), self.message) if self.is_ok else self

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        return fn(self.payload) if self.is_ok else self

    def get_or_else(self, default: U) -> T | U:
        return self.payload if self.is_ok else default

    def __repr__(self) -> str:
        if self.is_ok:
            return f"Ok({self.payload!r})"
        return f"{self.kind.name}({self.message!r})"
