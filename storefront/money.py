"""Fixed-point currency helpers.

Amounts are carried as :class:`~decimal.Decimal` and rounded half-up at the
paise boundary, matching how printed GST invoices are totalled.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ROUND = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Coerce ``value`` to ``Decimal``; ``None`` and junk become zero."""

    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return ZERO
    return result if result.is_finite() else ZERO


def round2(amount: object) -> Decimal:
    """Round ``amount`` to two decimal places using ROUND_HALF_UP."""

    value = to_decimal(amount)
    with localcontext() as ctx:
        # Room for every integer digit plus the two paise digits.
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(ROUND, rounding=ROUND_HALF_UP)


def format2(amount: object) -> str:
    """Return ``amount`` as a plain two-decimal string, e.g. ``"123.40"``."""

    return f"{round2(amount):.2f}"
