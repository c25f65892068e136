"""Decimal helpers shared by the tax engine.

Every numeric value that enters the engine passes through ``to_decimal`` once,
at the point a record is built. After that the engine works purely in
``Decimal`` and never re-checks for missing or malformed numbers.

Example:
    >>> to_decimal("$1,250.50")
    Decimal('1250.50')
    >>> to_decimal(float("nan"))
    Decimal('0')
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0")
ONE = Decimal("1")
CENTS = Decimal("0.01")

_TRUE_STRINGS = {"true", "yes", "y", "1", "on", "checked", "x"}


def to_decimal(value: object) -> Decimal:
    """Coerce an untrusted value to a finite Decimal, defaulting to 0.

    Accepts Decimal, int, float and numeric strings (currency symbols, commas
    and whitespace are stripped; parentheses mean a negative amount). Missing,
    empty, non-numeric, NaN and infinite values all become ``Decimal("0")``.

    Args:
        value: Raw value from a form field or extracted document.

    Returns:
        Finite Decimal.
    """
    if value is None:
        return ZERO

    if isinstance(value, bool):
        return ONE if value else ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return ZERO
        # str() keeps the shortest repr, avoiding binary float noise
        return Decimal(str(value))

    if isinstance(value, str):
        text = value.strip().replace(",", "").replace("$", "").replace(" ", "")
        negative = text.startswith("(") and text.endswith(")")
        if negative:
            text = text[1:-1]
        if not text:
            return ZERO
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return ZERO
        if not parsed.is_finite():
            return ZERO
        return -parsed if negative else parsed

    return ZERO


def to_optional_decimal(value: object) -> Decimal | None:
    """Like ``to_decimal`` but keeps "not provided" distinct from zero."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    return to_decimal(value)


def to_bool(value: object) -> bool:
    """Coerce checkbox-style input to a bool ("yes", "1", 1, True -> True)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float, Decimal)):
        return to_decimal(value) != ZERO
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def to_int(value: object) -> int:
    """Coerce to a whole number, truncating fractions; bad input becomes 0."""
    return int(to_decimal(value))


def to_text(value: object) -> str:
    """Coerce to a stripped string; None becomes empty."""
    return "" if value is None else str(value).strip()


def to_date(value: object) -> date | None:
    """Parse an ISO-8601 date (or datetime) string; unparseable values become None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def phaseout_factor(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    """Linear phaseout multiplier.

    Returns 1 at or below ``lower``, 0 at or above ``upper`` and falls
    linearly in between.

    Example:
        >>> phaseout_factor(Decimal("85000"), Decimal("80000"), Decimal("90000"))
        Decimal('0.5')
    """
    if value <= lower:
        return ONE
    if value >= upper:
        return ZERO
    return ONE - (value - lower) / (upper - lower)


def round_money(value: Decimal) -> Decimal:
    """Round to cents using ROUND_HALF_UP (presentation only).

    Precision is widened to hold every integer digit plus cents.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
