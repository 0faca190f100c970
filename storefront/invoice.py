# invoice.py

"""Invoice document assembly.

:func:`render_invoice` turns a stored :class:`~storefront.schemas.Order` and
its computed totals into an :class:`InvoiceDocument`: plain data describing
the sections of an 80mm receipt. The document is rendered to markup, text
or raster by the adapters in :mod:`storefront.pdf` and
:mod:`storefront.printing`; it holds no formatting of its own beyond the
display strings every target prints the same way.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from .catalog_display import CategoryBadge, category_badge, subcategory_badge
from .money import ZERO, format2
from .schemas import Address, IssuerProfile, Order
from .tax.gst_engine import OrderTotals, compute_order, rate_label
from .utils.words import to_words

NAME_MAX_CHARS = 25
ORDER_REF_CHARS = 8
TXN_REF_CHARS = 12
DEFAULT_TIMEZONE = "Asia/Kolkata"
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class IssuerHeader:
    name: str
    tagline: str
    gstin: str


@dataclass(frozen=True)
class InvoiceMeta:
    invoice_number: str
    order_ref: str
    issued_at: datetime
    date: str
    time: str


@dataclass(frozen=True)
class TransactionRef:
    transaction_id: Optional[str]
    short: str


@dataclass(frozen=True)
class CustomerBlock:
    name: str
    phone: str
    email: str
    street: str
    city: str
    state: str
    zipcode: str
    country: str

    @property
    def locality(self) -> str:
        return ", ".join(p for p in (self.city, self.state) if p)


@dataclass(frozen=True)
class ItemRow:
    index: int
    name: str
    display_name: str
    quantity: int
    unit_price: Decimal
    tax_rate: str
    tax_amount: Decimal
    shipping_amount: Decimal
    total: Decimal
    category: Optional[str] = None
    sub_category: Optional[str] = None
    weight: Optional[str] = None
    category_badge: Optional[CategoryBadge] = None
    subcategory_badge: Optional[CategoryBadge] = None


@dataclass(frozen=True)
class TaxLine:
    rate: str
    label: str
    amount: Decimal


@dataclass(frozen=True)
class TotalsBlock:
    item_count: int
    subtotal: Decimal
    tax_lines: tuple[TaxLine, ...]
    total_tax: Decimal
    shipping: Decimal
    shipping_label: str
    grand_total: Decimal
    amount_in_words: str


@dataclass(frozen=True)
class PaymentBlock:
    is_paid: bool
    status: str
    method: str


@dataclass(frozen=True)
class FooterBlock:
    phone: str
    email: str
    pan: str
    gstin: str
    terms: tuple[str, ...]
    thank_you: str


@dataclass(frozen=True)
class InvoiceDocument:
    """Immutable snapshot of everything printed on one invoice."""

    header: IssuerHeader
    meta: InvoiceMeta
    transaction: TransactionRef
    customer: Optional[CustomerBlock]
    items: tuple[ItemRow, ...]
    totals: TotalsBlock
    payment: PaymentBlock
    footer: FooterBlock
    filename_stem: str

    def sections(self) -> Iterator[tuple[str, object]]:
        """Yield ``(name, block)`` in print order, skipping absent blocks."""

        yield "header", self.header
        yield "invoice", self.meta
        yield "transaction", self.transaction
        if self.customer is not None:
            yield "customer", self.customer
        yield "items", self.items
        yield "totals", self.totals
        yield "payment", self.payment
        yield "footer", self.footer

    def filename(self, ext: str) -> str:
        return f"{self.filename_stem}.{ext.lower()}"

    def as_dict(self) -> dict:
        data = asdict(self)
        data["sections"] = [name for name, _ in self.sections()]
        return data


def truncate_name(name: Optional[str], limit: int = NAME_MAX_CHARS) -> str:
    """Cap ``name`` at ``limit`` characters, marking the cut with ``...``."""

    if not name:
        return "Product"
    if len(name) > limit:
        return name[:limit] + "..."
    return name


def _issued_at(order: Order, tz: str, now: Optional[datetime]) -> datetime:
    issued = order.created_at or now or datetime.now(timezone.utc)
    if issued.tzinfo is None:
        issued = issued.replace(tzinfo=timezone.utc)
    return issued.astimezone(ZoneInfo(tz))


def _weight(value: Optional[Decimal], unit: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return f"{format(value.normalize(), 'f')} {unit or 'kg'}"


def _customer(address: Optional[Address]) -> Optional[CustomerBlock]:
    if address is None:
        return None
    return CustomerBlock(
        name=address.full_name,
        phone=address.phone or NOT_AVAILABLE,
        email=address.email or "",
        street=address.street or "",
        city=address.city or "",
        state=address.state or "",
        zipcode=address.zipcode or "",
        country=address.country or "",
    )


def _meta(order: Order, issued: datetime) -> InvoiceMeta:
    order_ref = order.id[-ORDER_REF_CHARS:] if order.id else NOT_AVAILABLE
    return InvoiceMeta(
        invoice_number=f"INV-{issued:%Y%m%d}-{order_ref.upper()}",
        order_ref=order_ref,
        issued_at=issued,
        date=f"{issued:%d/%m/%Y}",
        time=f"{issued:%I:%M %p}",
    )


def _item_rows(order: Order, totals: OrderTotals, name_max_chars: int) -> tuple[ItemRow, ...]:
    rows = []
    for index, (item, line) in enumerate(zip(order.items, totals.lines), start=1):
        product = item.resolved_product
        rows.append(
            ItemRow(
                index=index,
                name=product.name or "Product",
                display_name=truncate_name(product.name, name_max_chars),
                quantity=line.item.quantity,
                unit_price=line.item.unit_price,
                tax_rate=rate_label(line.item.tax_rate_percent),
                tax_amount=line.tax_amount,
                shipping_amount=line.shipping_amount,
                total=line.total,
                category=product.category,
                sub_category=product.sub_category,
                weight=_weight(product.weight_value, product.weight_unit),
                category_badge=category_badge(product.category) if product.category else None,
                subcategory_badge=subcategory_badge(product.category, product.sub_category),
            )
        )
    return tuple(rows)


def _totals(totals: OrderTotals, item_count: int) -> TotalsBlock:
    tax_lines = tuple(
        TaxLine(rate=rate_label(rate), label=f"GST {rate_label(rate)}%", amount=amount)
        for rate, amount in totals.sorted_tax_lines()
    )
    shipping = totals.total_shipping
    return TotalsBlock(
        item_count=item_count,
        subtotal=totals.subtotal,
        tax_lines=tax_lines,
        total_tax=totals.total_tax,
        shipping=shipping,
        shipping_label="FREE" if shipping == ZERO else format2(shipping),
        grand_total=totals.grand_total,
        amount_in_words=to_words(totals.grand_total),
    )


def render_invoice(
    order: Order,
    totals: Optional[OrderTotals] = None,
    issuer: Optional[IssuerProfile] = None,
    *,
    name_max_chars: int = NAME_MAX_CHARS,
    tz: str = DEFAULT_TIMEZONE,
    now: Optional[datetime] = None,
) -> InvoiceDocument:
    """Assemble the invoice document for ``order``.

    ``totals`` should come from :func:`~storefront.tax.gst_engine.compute_order`
    for the same order; it is computed here when omitted. ``now`` only
    matters for orders without a stored creation time.
    """

    if totals is None or len(totals.lines) != len(order.items):
        totals = compute_order(order)
    issuer = issuer or IssuerProfile()
    issued = _issued_at(order, tz, now)
    meta = _meta(order, issued)
    txn = order.transaction_id

    return InvoiceDocument(
        header=IssuerHeader(name=issuer.name, tagline=issuer.tagline, gstin=issuer.gstin),
        meta=meta,
        transaction=TransactionRef(
            transaction_id=txn,
            short=txn[-TXN_REF_CHARS:] if txn else NOT_AVAILABLE,
        ),
        customer=_customer(order.address),
        items=_item_rows(order, totals, name_max_chars),
        totals=_totals(totals, len(order.items)),
        payment=PaymentBlock(
            is_paid=order.is_paid,
            status="PAID" if order.is_paid else "PENDING",
            method=(order.payment_type or "ONLINE").upper(),
        ),
        footer=FooterBlock(
            phone=issuer.phone,
            email=issuer.email,
            pan=issuer.pan,
            gstin=issuer.gstin,
            terms=tuple(issuer.terms)
            + ((f"Subject to {issuer.jurisdiction} jurisdiction",) if issuer.jurisdiction else ()),
            thank_you=issuer.thank_you,
        ),
        filename_stem=f"Invoice_{order.id[-ORDER_REF_CHARS:] if order.id else 'draft'}",
    )
