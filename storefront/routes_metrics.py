# routes_metrics.py

"""Prometheus counters for the invoice pipeline and the scrape endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# HTTP
http_requests_total = Counter(
    "http_requests_total", "Requests served", ["path", "method", "status"]
)

# Invoices
invoices_generated_total = Counter(
    "invoices_generated_total", "Invoice documents assembled from orders"
)
invoice_exports_total = Counter(
    "invoice_exports_total", "Invoice files rendered", ["format"]
)
invoice_export_failures_total = Counter(
    "invoice_export_failures_total", "Invoice file renders that raised ExportError"
)
invoice_print_fallbacks_total = Counter(
    "invoice_print_fallbacks_total",
    "Failed file exports answered with the print view instead",
)

# Publish zero samples so dashboards see the series before the first event.
for _fmt in ("pdf", "png"):
    invoice_exports_total.labels(format=_fmt).inc(0)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
