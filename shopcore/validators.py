import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from . import messages
from .constants import (
    AMOUNT_MAX,
    COUPON_CODE_PATTERN,
    IN_STOCK,
    LOW_STOCK,
    LOW_STOCK_STATUS,
    PERCENTAGE,
    PERCENTAGE_MAX,
    SOLD_OUT,
    STOCK_MAX,
)

FormValue = Union[int, float, str]

_COUPON_CODE_RE = re.compile(COUPON_CODE_PATTERN)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ValidationResult:
    """
    is_valid        - прошло ли значение проверку
    corrected_value - ближайшая допустимая граница, UI подставляет её в форму
    error           - текст ошибки (None для валидного или пустого поля)
    """

    is_valid: bool
    corrected_value: int
    error: Optional[str] = None


# ============ Разбор ввода формы ============


def safe_parse_int(value: FormValue, default: int = 0) -> int:
    """Целое из числа или строки ("12abc" -> 12), иначе default"""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else default
    if not isinstance(value, str):
        return default
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else default


def extract_numbers(value: str) -> str:
    return re.sub(r"[^0-9]", "", value)


def filter_numeric_input(value: str) -> Tuple[bool, int]:
    """(нужно ли обновлять поле, разобранное значение) - маска только для цифр"""
    should_update = value == "" or value == extract_numbers(value)
    return should_update, safe_parse_int(value)


def _is_blank(value: FormValue) -> bool:
    """Пустое поле или строка без числа в начале ("abc") - как NaN у parseInt"""
    return isinstance(value, str) and _LEADING_INT_RE.match(value) is None


# ============ Диапазоны ============


def validate_price(value: FormValue) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult(False, 0)
    price = safe_parse_int(value)
    if price <= 0:
        return ValidationResult(False, 0, messages.PRICE_BELOW_ZERO)
    return ValidationResult(True, price)


def validate_stock(value: FormValue) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult(False, 0)
    stock = safe_parse_int(value)
    if stock < 0:
        return ValidationResult(False, 0, messages.STOCK_BELOW_ZERO)
    if stock > STOCK_MAX:
        return ValidationResult(False, STOCK_MAX, messages.STOCK_LIMIT_EXCEEDED)
    return ValidationResult(True, stock)


def _validate_percentage(value: int) -> ValidationResult:
    if value > PERCENTAGE_MAX:
        return ValidationResult(False, PERCENTAGE_MAX, messages.DISCOUNT_RATE_EXCEEDED)
    if value < 0:
        return ValidationResult(False, 0, messages.DISCOUNT_RATE_BELOW_ZERO)
    return ValidationResult(True, value)


def _validate_amount(value: int) -> ValidationResult:
    if value > AMOUNT_MAX:
        return ValidationResult(False, AMOUNT_MAX, messages.DISCOUNT_AMOUNT_EXCEEDED)
    if value < 0:
        return ValidationResult(False, 0, messages.DISCOUNT_AMOUNT_BELOW_ZERO)
    return ValidationResult(True, value)


def validate_discount_value(value: FormValue, discount_type: str) -> ValidationResult:
    """Процент: [0, 100], сумма: [0, 100000]"""
    if _is_blank(value):
        return ValidationResult(False, 0)
    parsed = safe_parse_int(value)
    if discount_type == PERCENTAGE:
        return _validate_percentage(parsed)
    return _validate_amount(parsed)


# ============ Прочие проверки ============


def is_valid_coupon_code(code: str) -> bool:
    """4-12 символов: заглавные латинские буквы и цифры"""
    return bool(_COUPON_CODE_RE.fullmatch(code))


def stock_status(stock: int) -> str:
    if stock <= 0:
        return SOLD_OUT
    if stock <= LOW_STOCK:
        return LOW_STOCK_STATUS
    return IN_STOCK
