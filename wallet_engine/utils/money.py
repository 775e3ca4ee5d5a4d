"""Decimal money helpers"""

import math
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Union

from wallet_engine.domain.exceptions import InvalidAmountError

Amount = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Amount) -> Decimal:
    """Convert caller input to Decimal; floats go through str to avoid binary noise"""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmountError("Amount cannot be NaN or infinite")
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidAmountError(f"Amount is not a number: {value!r}")

    if not result.is_finite():
        raise InvalidAmountError("Amount cannot be NaN or infinite")
    return result


def require_positive(value: Amount) -> Decimal:
    amount = to_decimal(value)
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than 0")
    return amount


def round_money(value: Decimal) -> Decimal:
    """Round to minor units, half-up"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_money_down(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_DOWN)
