from __future__ import annotations

import secrets
from typing import Literal

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from config import Settings, get_settings

from .invoice import InvoiceDocument, render_invoice
from .pdf.export import (
    ExportError,
    ExportOptions,
    export_to_file,
    record_export_failure,
)
from .pdf.render import render_invoice_html
from .routes_metrics import invoices_generated_total
from .schemas import Order
from .tax.gst_engine import compute_order
from .utils.responses import attachment_headers, ok

router = APIRouter()


def _document(order: Order, settings: Settings) -> InvoiceDocument:
    document = render_invoice(
        order,
        compute_order(order),
        settings.issuer,
        name_max_chars=settings.item_name_max_chars,
        tz=settings.display_timezone,
    )
    invoices_generated_total.inc()
    return document


def _print_response(
    document: InvoiceDocument, settings: Settings, headers: dict | None = None
) -> HTMLResponse:
    nonce = secrets.token_urlsafe(16)
    html = render_invoice_html(
        document, auto_print=True, settle_ms=settings.print_settle_ms, nonce=nonce
    )
    response = HTMLResponse(html)
    response.headers["Content-Security-Policy"] = (
        "default-src 'none'; "
        f"script-src 'nonce-{nonce}'; "
        f"style-src 'nonce-{nonce}'; "
        "img-src data:"
    )
    response.headers.update(headers or {})
    return response


@router.post("/orders/totals")
async def order_totals(order: Order) -> dict:
    """Return subtotal, GST breakdown, shipping and grand total for ``order``."""

    return ok(compute_order(order).as_dict())


@router.post("/invoice/document")
async def invoice_document(
    order: Order, settings: Settings = Depends(get_settings)
) -> dict:
    """Return the invoice document for ``order`` as JSON."""

    return ok(_document(order, settings).as_dict())


@router.post("/invoice/file")
async def invoice_file(
    order: Order,
    fmt: Literal["pdf", "png"] = "pdf",
    settings: Settings = Depends(get_settings),
) -> Response:
    """Return the 80mm invoice file, or the print view if rendering fails."""

    document = _document(order, settings)
    try:
        artifact = await export_to_file(
            document, fmt, ExportOptions.from_settings(settings)
        )
    except ExportError as exc:
        record_export_failure(document, exc)
        return _print_response(document, settings, {"X-Invoice-Fallback": "print"})
    return Response(
        artifact.content,
        media_type=artifact.mimetype,
        headers=attachment_headers(artifact.filename),
    )


@router.post("/invoice/print", response_class=HTMLResponse)
async def invoice_print(
    order: Order, settings: Settings = Depends(get_settings)
) -> HTMLResponse:
    """Return the invoice markup that opens the print dialog once loaded."""

    return _print_response(_document(order, settings), settings)
