# services/_helpers.py

"""Input normalization shared by the services."""

from decimal import Decimal, InvalidOperation
from typing import Any

from ..errors import ValidationError
from ..rules.allocation_rules import to_money


def normalize_currency(code: Any) -> str:
    """ISO-4217 style code: three letters, upper-cased."""
    value = str(code or "").strip().upper()
    if len(value) != 3 or not value.isalpha():
        raise ValidationError(f"Invalid currency code {code!r}. Expected a 3-letter code such as 'USD'.")
    return value


def require_positive(value: Any, field: str = "amount") -> Decimal:
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"{field} must be a number, got {value!r}.") from exc
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0.")
    return amount


def require_non_negative(value: Any, field: str) -> Decimal:
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"{field} must be a number, got {value!r}.") from exc
    if amount < 0:
        raise ValidationError(f"{field} must not be negative.")
    return amount
