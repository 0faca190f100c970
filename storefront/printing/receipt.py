"""Fixed-width text layout of an invoice for 80mm thermal rolls."""

from __future__ import annotations

import textwrap
from typing import List

from ..invoice import InvoiceDocument
from ..money import format2

# Font A on an 80mm roll prints 48 characters per line.
COLUMNS = 48
CURRENCY = "Rs."


def _lr(left: str, right: str, width: int) -> str:
    """Left and right aligned text on one line, truncating ``left`` if needed."""

    room = width - len(right) - 1
    if len(left) > room:
        left = left[: max(room, 0)]
    return f"{left}{' ' * (width - len(left) - len(right))}{right}"


def _money(amount) -> str:
    return f"{CURRENCY}{format2(amount)}"


def _wrap(text: str, width: int, indent: str = "") -> List[str]:
    return textwrap.wrap(
        text, width=width, initial_indent=indent, subsequent_indent=indent
    ) or [indent.rstrip()]


def _centered(text: str, width: int) -> List[str]:
    return [line.center(width).rstrip() for line in _wrap(text, width)]


def render_receipt(document: InvoiceDocument, columns: int = COLUMNS) -> List[str]:
    """Return the receipt for ``document`` as lines of at most ``columns`` chars."""

    rule = "-" * columns
    lines: List[str] = []

    header = document.header
    lines.extend(_centered(header.name.upper(), columns))
    if header.tagline:
        lines.extend(_centered(header.tagline, columns))
    if header.gstin:
        lines.extend(_centered(f"GSTIN: {header.gstin}", columns))
    lines.append(rule)

    meta = document.meta
    lines.append(f"INV#: {meta.invoice_number}"[:columns])
    lines.append(_lr(f"Date: {meta.date}", f"Time: {meta.time}", columns))
    lines.append(_lr("TXN ID:", document.transaction.short, columns))
    lines.append(rule)

    customer = document.customer
    if customer is not None:
        lines.append("SHIP TO:")
        if customer.name:
            lines.extend(_wrap(customer.name, columns, "  "))
        lines.extend(_wrap(f"Ph: {customer.phone}", columns, "  "))
        if customer.street:
            lines.extend(_wrap(customer.street, columns, "  "))
        if customer.locality:
            lines.extend(_wrap(customer.locality, columns, "  "))
        if customer.zipcode:
            lines.append(f"  PIN: {customer.zipcode}")
        lines.append(rule)

    lines.append(_lr("#  Item", "Total", columns))
    lines.append(rule)
    for row in document.items:
        lines.append(f"{row.index:>2} {row.display_name}"[:columns])
        lines.append(
            _lr(
                f"   {row.quantity} x {format2(row.unit_price)}",
                format2(row.total),
                columns,
            )
        )
        lines.append(f"   GST {row.tax_rate}%: {format2(row.tax_amount)}"[:columns])
    lines.append(rule)

    totals = document.totals
    lines.append(
        _lr(f"Subtotal ({totals.item_count} items):", _money(totals.subtotal), columns)
    )
    for tax in totals.tax_lines:
        lines.append(_lr(f"  {tax.label}:", _money(tax.amount), columns))
    lines.append(_lr("Total GST:", _money(totals.total_tax), columns))
    shipping = totals.shipping_label
    lines.append(
        _lr("Shipping:", shipping if shipping == "FREE" else f"{CURRENCY}{shipping}", columns)
    )
    lines.append("=" * columns)
    lines.append(_lr("TOTAL:", _money(totals.grand_total), columns))
    lines.append("=" * columns)
    lines.extend(_wrap(f"Amount: {totals.amount_in_words} only", columns))
    lines.append(rule)

    payment = document.payment
    lines.append(_lr("Payment:", payment.status, columns))
    lines.append(_lr("Mode:", payment.method, columns))
    lines.append(rule)

    footer = document.footer
    if footer.phone:
        lines.extend(_centered(f"Ph: {footer.phone}", columns))
    ids = " | ".join(
        part
        for part in (
            f"PAN: {footer.pan}" if footer.pan else "",
            f"GST: {footer.gstin}" if footer.gstin else "",
        )
        if part
    )
    if ids:
        lines.extend(_centered(ids, columns))
    for term in footer.terms:
        lines.extend(_wrap(f"* {term}", columns))
    if footer.thank_you:
        lines.extend(_centered(footer.thank_you, columns))
    return lines


def render_receipt_text(document: InvoiceDocument, columns: int = COLUMNS) -> str:
    return "\n".join(render_receipt(document, columns))
