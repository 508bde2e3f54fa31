"""Re-validation of primitive form values handed to the ledger.

Callers may pass already-typed values or the raw strings a form submitted;
either way the ledger parses them again and rejects anything malformed with a
``ValidationError`` naming the offending field.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

from .errors import ValidationError

# Largest value a SQLite INTEGER column can hold.
MAX_KEY = 2**63 - 1
# Per-record cap that keeps summed stock well inside MAX_KEY.
MAX_QUANTITY = 2**31 - 1


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def require_text(field: str, value: object) -> str:
    if value is None:
        raise ValidationError(field, "is required")
    text = str(value).strip()
    if not text:
        raise ValidationError(field, "is required")
    return text


def parse_int(
    field: str,
    value: object,
    *,
    minimum: int | None = None,
    maximum: int | None = MAX_KEY,
) -> int:
    """Parse whole numbers, rejecting booleans, fractions and stray characters."""

    if value is None or isinstance(value, bool):
        raise ValidationError(field, "must be a whole number")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(field, "must be a whole number")
        number = int(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        try:
            number = int(cleaned)
        except ValueError as exc:
            raise ValidationError(field, "must be a whole number") from exc
    else:
        raise ValidationError(field, "must be a whole number")
    if minimum is not None and number < minimum:
        raise ValidationError(field, f"must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(field, f"must be at most {maximum}")
    return number


def require_int(
    field: str,
    value: object,
    *,
    minimum: int | None = None,
    maximum: int | None = MAX_KEY,
) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, "is required")
    return parse_int(field, value, minimum=minimum, maximum=maximum)


def parse_amount(field: str, value: object, *, positive: bool = True) -> float:
    """Convert currency input (``"1,250.00"``, ``"$20"``, ``20``) to a float."""

    if value is None or isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    if isinstance(value, Decimal) and not value.is_finite():
        raise ValidationError(field, "must be a finite number")
    if isinstance(value, (int, float, Decimal)):
        amount = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace(",", "")
        if not cleaned:
            raise ValidationError(field, "is required")
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValidationError(field, "must be a number") from exc
        if not parsed.is_finite():
            raise ValidationError(field, "must be a finite number")
        amount = float(parsed)
    else:
        raise ValidationError(field, "must be a number")
    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError(field, "must be a finite number")
    if positive and amount <= 0:
        raise ValidationError(field, "must be greater than zero")
    if amount < 0:
        raise ValidationError(field, "must not be negative")
    return amount


def parse_date(field: str, value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = require_text(field, value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValidationError(field, "must be a date in YYYY-MM-DD format") from exc


def parse_flag(value: object) -> bool:
    """Interpret checkbox-style values (``"on"``, ``"true"``, ``1``) as booleans."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().casefold() in {"on", "true", "1", "yes", "y"}
    return False
