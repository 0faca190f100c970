"""Invoice markup rendering utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..invoice import InvoiceDocument
from ..money import format2

ROOT_DIR = Path(__file__).resolve().parents[2]
TEMPLATE_DIR = ROOT_DIR / "templates"
_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR), autoescape=select_autoescape()
)
_env.filters["money"] = format2

INVOICE_TEMPLATE = "invoice_80mm.html"
PRINT_SETTLE_MS = 500


def render_invoice_html(
    document: InvoiceDocument,
    *,
    auto_print: bool = False,
    settle_ms: int = PRINT_SETTLE_MS,
    nonce: Optional[str] = None,
) -> str:
    """Render ``document`` as standalone 80mm HTML.

    With ``auto_print`` the page opens the print dialog ``settle_ms`` after
    the browser reports the content loaded.
    """

    template = _env.get_template(INVOICE_TEMPLATE)
    return template.render(
        doc=document,
        auto_print=auto_print,
        settle_ms=settle_ms,
        csp_nonce=nonce,
    )
