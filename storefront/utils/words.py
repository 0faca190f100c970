"""Amount-in-words rendering using the Indian numbering system."""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from ..money import to_decimal

UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# Largest group first; the remainder below a hundred is handled separately.
GROUPS = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
    (100, "Hundred"),
]


def _below_hundred(n: int) -> str:
    if n < 10:
        return UNITS[n]
    if n < 20:
        return TEENS[n - 10]
    tens, units = divmod(n, 10)
    return TENS[tens] + (f" {UNITS[units]}" if units else "")


def int_to_words(n: int) -> str:
    """Spell a non-negative integer, e.g. ``100000`` -> ``"One Lakh"``."""

    if n == 0:
        return "Zero"
    parts: list[str] = []
    for size, label in GROUPS:
        count, n = divmod(n, size)
        if count:
            # Counts above 99 only happen for crores (one thousand crore...).
            parts.append(f"{int_to_words(count)} {label}")
    if n:
        parts.append(_below_hundred(n))
    return " ".join(parts)


def split_amount(amount: object) -> tuple[int, int]:
    """Split ``amount`` into whole rupees and rounded paise."""

    value = max(to_decimal(amount), Decimal("0"))
    rupees = value.to_integral_value(rounding=ROUND_FLOOR)
    paise = ((value - rupees) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    rupees, paise = int(rupees), int(paise)
    if paise == 100:
        rupees, paise = rupees + 1, 0
    return rupees, paise


def to_words(amount: object) -> str:
    """Return ``amount`` in words, e.g. ``"One Hundred Rupees and Fifty Paise"``.

    The paise clause is only present when the paise part is non-zero.
    """

    rupees, paise = split_amount(amount)
    words = f"{int_to_words(rupees)} Rupees"
    if paise:
        words += f" and {int_to_words(paise)} Paise"
    return words
