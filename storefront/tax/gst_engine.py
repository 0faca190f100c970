from __future__ import annotations

"""GST and shipping calculation for order line items.

Tax is charged per line item at the product's GST rate on top of the unit
price; shipping is a flat per-unit charge. Order totals are aggregated from
unrounded line values and rounded once per figure so that the printed tax
breakdown always adds up to the printed total tax.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping

from ..money import ZERO, round2, to_decimal
from ..schemas import Order, OrderItem

DEFAULT_GST_PERCENT = Decimal("5")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LineItem:
    """Pricing inputs for one product line."""

    unit_price: Decimal = ZERO
    quantity: int = 1
    tax_rate_percent: Decimal = DEFAULT_GST_PERCENT
    shipping_charge_per_unit: Decimal = ZERO

    @classmethod
    def from_values(
        cls,
        unit_price: object = None,
        quantity: object = None,
        tax_rate_percent: object = None,
        shipping_charge_per_unit: object = None,
    ) -> "LineItem":
        """Build a line item, replacing missing values with safe defaults."""

        try:
            qty = int(quantity) if quantity is not None else 1
        except (TypeError, ValueError):
            qty = 1
        rate = (
            DEFAULT_GST_PERCENT
            if tax_rate_percent is None
            else to_decimal(tax_rate_percent)
        )
        return cls(
            unit_price=to_decimal(unit_price),
            quantity=max(qty, 1),
            tax_rate_percent=rate,
            shipping_charge_per_unit=to_decimal(shipping_charge_per_unit),
        )

    @classmethod
    def from_order_item(cls, item: OrderItem) -> "LineItem":
        """Resolve pricing from the product captured on an order item.

        The offer price wins over the list price unless it is missing or zero.
        """

        product = item.resolved_product
        price = product.offer_price or product.price
        return cls.from_values(
            unit_price=price,
            quantity=item.quantity,
            tax_rate_percent=product.gst_percentage,
            shipping_charge_per_unit=product.shipping_charges,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "LineItem":
        """Build from a cart-style mapping (``price``/``qty``/``gst``/``shipping``)."""

        return cls.from_values(
            unit_price=data.get("price"),
            quantity=data.get("qty"),
            tax_rate_percent=data.get("gst"),
            shipping_charge_per_unit=data.get("shipping"),
        )


@dataclass(frozen=True)
class LineItemTotals:
    item: LineItem
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    total: Decimal
    # Unrounded figures feed the order aggregation.
    raw_subtotal: Decimal = field(default=ZERO, repr=False, compare=False)
    raw_tax: Decimal = field(default=ZERO, repr=False, compare=False)
    raw_shipping: Decimal = field(default=ZERO, repr=False, compare=False)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal = ZERO
    tax_by_rate: dict[Decimal, Decimal] = field(default_factory=dict)
    total_tax: Decimal = ZERO
    total_shipping: Decimal = ZERO
    grand_total: Decimal = ZERO
    lines: tuple[LineItemTotals, ...] = ()

    def sorted_tax_lines(self) -> list[tuple[Decimal, Decimal]]:
        """Return ``(rate, amount)`` pairs ordered by ascending rate."""

        return sorted(self.tax_by_rate.items())

    def as_dict(self) -> dict:
        """JSON friendly view with two-decimal floats."""

        return {
            "subtotal": float(self.subtotal),
            "tax_by_rate": {
                rate_label(rate): float(amount)
                for rate, amount in self.sorted_tax_lines()
            },
            "total_tax": float(self.total_tax),
            "total_shipping": float(self.total_shipping),
            "grand_total": float(self.grand_total),
            "items": [
                {
                    "quantity": line.item.quantity,
                    "unit_price": float(round2(line.item.unit_price)),
                    "tax_rate": rate_label(line.item.tax_rate_percent),
                    "subtotal": float(line.subtotal),
                    "tax_amount": float(line.tax_amount),
                    "shipping_amount": float(line.shipping_amount),
                    "total": float(line.total),
                }
                for line in self.lines
            ],
        }


def rate_label(rate: Decimal) -> str:
    """Render a GST rate without trailing zeros, e.g. ``5`` or ``5.5``."""

    return format(rate.normalize(), "f")


def compute_line_item(item: LineItem) -> LineItemTotals:
    """Compute subtotal, GST, shipping and total for ``item``.

    >>> t = compute_line_item(LineItem.from_values(100, 2, 5, 0))
    >>> (t.subtotal, t.tax_amount, t.shipping_amount, t.total)
    (Decimal('200.00'), Decimal('10.00'), Decimal('0.00'), Decimal('210.00'))
    """

    qty = Decimal(item.quantity)
    subtotal = item.unit_price * qty
    tax = subtotal * item.tax_rate_percent / HUNDRED
    shipping = item.shipping_charge_per_unit * qty

    subtotal_r = round2(subtotal)
    tax_r = round2(tax)
    shipping_r = round2(shipping)
    return LineItemTotals(
        item=item,
        subtotal=subtotal_r,
        tax_amount=tax_r,
        shipping_amount=shipping_r,
        total=subtotal_r + tax_r + shipping_r,
        raw_subtotal=subtotal,
        raw_tax=tax,
        raw_shipping=shipping,
    )


def compute_order_totals(items: Iterable[LineItem]) -> OrderTotals:
    """Aggregate ``items`` into order level totals.

    Tax is grouped by exact rate. Each rate bucket, the subtotal and the
    shipping total are rounded once; ``total_tax`` is the sum of the rounded
    buckets and ``grand_total`` the sum of the rounded parts. An empty
    iterable yields all-zero totals.

    >>> a = LineItem.from_values(50, 1, 5, 0)
    >>> b = LineItem.from_values(200, 1, 12, 20)
    >>> compute_order_totals([a, b]).grand_total
    Decimal('296.50')
    """

    subtotal = ZERO
    shipping = ZERO
    tax_acc: defaultdict[Decimal, Decimal] = defaultdict(lambda: ZERO)
    lines: list[LineItemTotals] = []

    for item in items:
        line = compute_line_item(item)
        lines.append(line)
        subtotal += line.raw_subtotal
        shipping += line.raw_shipping
        tax_acc[item.tax_rate_percent] += line.raw_tax

    tax_by_rate = {rate: round2(amount) for rate, amount in tax_acc.items()}
    subtotal = round2(subtotal)
    total_tax = sum(tax_by_rate.values(), round2(ZERO))
    total_shipping = round2(shipping)

    return OrderTotals(
        subtotal=subtotal,
        tax_by_rate=tax_by_rate,
        total_tax=total_tax,
        total_shipping=total_shipping,
        grand_total=subtotal + total_tax + total_shipping,
        lines=tuple(lines),
    )


def line_items_from_order(order: Order) -> list[LineItem]:
    """Return the pricing inputs for every item stored on ``order``."""

    return [LineItem.from_order_item(item) for item in order.items]


def compute_order(order: Order) -> OrderTotals:
    """Price ``order`` from the values stored on it at order time."""

    return compute_order_totals(line_items_from_order(order))
