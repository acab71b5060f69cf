"""Decimal coercion for amounts arriving from stored JSON"""

from decimal import Decimal, InvalidOperation
from typing import Any

from loan_ledger.domain.exceptions import InvalidAmountError

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a stored numeric value to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    None and empty strings count as zero, matching how the devices omit
    unset amounts.

    Raises:
        InvalidAmountError: For booleans, non-numeric strings and NaN/Infinity
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise InvalidAmountError(f"Boolean is not an amount: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise InvalidAmountError(f"Not a number: {value!r}") from e
    else:
        raise InvalidAmountError(f"Unsupported amount type: {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {value!r}")
    return result


def is_number(value: Any) -> bool:
    """True for finite int/float/Decimal values (booleans excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return Decimal(str(value)).is_finite()
