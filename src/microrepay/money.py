"""Decimal helpers for cent-precise money arithmetic."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

from .exceptions import InvalidInput

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MONTHS_PER_YEAR = Decimal(12)


def _to_decimal(value: Any, *, field: str) -> Decimal:
    """Coerce ints, strings, floats and Decimals into a finite Decimal."""

    if value is None or isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number, got {value!r}", field=field, value=value)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidInput(f"{field} is not a number: {value!r}", field=field, value=value) from exc
    elif isinstance(value, float):
        # repr() gives the shortest round-tripping form, so 0.1 stays 0.1.
        number = Decimal(repr(value))
    else:
        raise InvalidInput(f"{field} must be a number, got {type(value).__name__}", field=field, value=value)

    if not number.is_finite():
        raise InvalidInput(f"{field} must be finite, got {value!r}", field=field, value=value)
    return number


def round_money(value: Decimal) -> Decimal:
    """Round a computed amount to the nearest cent, ties to even."""

    return value.quantize(CENT, rounding=ROUND_HALF_EVEN)


def to_money(value: Any, *, field: str = "amount", allow_negative: bool = True) -> Decimal:
    """Return *value* as a cent-quantized Decimal.

    With ``allow_negative=False`` the sign is checked before rounding, so
    sub-cent negatives such as ``-0.004`` are rejected instead of becoming
    ``-0.00``.
    """

    number = _to_decimal(value, field=field)
    if not allow_negative and number < 0:
        raise InvalidInput(f"{field} must not be negative, got {value!r}", field=field, value=value)
    return round_money(number)


def to_rate(value: Any, *, field: str = "interest_rate") -> Decimal:
    """Return an annual rate fraction as an unrounded Decimal."""

    return _to_decimal(value, field=field)


def monthly_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """One month of interest on *balance*, rounded to cents."""

    return round_money(balance * annual_rate / MONTHS_PER_YEAR)
