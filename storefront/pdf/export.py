"""Export adapters turning an invoice document into a file or a print view.

Exports run in a worker thread and complete as a single await. Callers are
expected to debounce repeated requests for the same order themselves.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
import time
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from ..invoice import InvoiceDocument
from ..obs.errors import capture_exception
from ..printing.receipt import COLUMNS
from ..routes_metrics import (
    invoice_export_failures_total,
    invoice_exports_total,
    invoice_print_fallbacks_total,
)
from .raster import DEFAULT_DPI, DEFAULT_MARGIN_MM, ExportError, rasterize
from .render import PRINT_SETTLE_MS, render_invoice_html

__all__ = [
    "ExportArtifact",
    "ExportError",
    "ExportOptions",
    "PrintJob",
    "download_invoice",
    "export_to_file",
    "open_for_print",
    "purge_print_files",
    "record_export_failure",
]

MIMETYPES = {"pdf": "application/pdf", "png": "image/png"}

PRINT_FILE_PREFIX = "storefront-print-"
PRINT_FILE_MAX_AGE_S = 3600

logger = logging.getLogger("storefront.export")

Opener = Callable[[str], object]


@dataclass(frozen=True)
class ExportOptions:
    dpi: int = DEFAULT_DPI
    margin_mm: float = DEFAULT_MARGIN_MM
    columns: int = COLUMNS
    font_path: Optional[str] = None
    settle_ms: int = PRINT_SETTLE_MS

    @classmethod
    def from_settings(cls, settings) -> "ExportOptions":
        return cls(
            dpi=settings.receipt_dpi,
            margin_mm=settings.receipt_margin_mm,
            columns=settings.receipt_columns,
            font_path=settings.font_path,
            settle_ms=settings.print_settle_ms,
        )


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    mimetype: str


@dataclass(frozen=True)
class PrintJob:
    path: Path
    html: str
    opened: bool


async def export_to_file(
    document: InvoiceDocument,
    fmt: str = "pdf",
    options: ExportOptions = ExportOptions(),
) -> ExportArtifact:
    """Rasterize ``document`` into a single-page 80mm ``fmt`` file.

    Raises :class:`ExportError` when rendering fails.
    """

    fmt = fmt.lower()
    if fmt not in MIMETYPES:
        raise ExportError("FORMAT", f"Unsupported export format: {fmt}")
    content = await asyncio.to_thread(
        rasterize,
        document,
        fmt.upper(),
        dpi=options.dpi,
        margin_mm=options.margin_mm,
        columns=options.columns,
        font_path=options.font_path,
    )
    invoice_exports_total.labels(format=fmt).inc()
    logger.info(
        "exported invoice %s (%d bytes)",
        document.meta.invoice_number,
        len(content),
        extra={"order_ref": document.meta.order_ref},
    )
    return ExportArtifact(
        filename=document.filename(fmt), content=content, mimetype=MIMETYPES[fmt]
    )


def _write_markup(html: str, stem: str, directory: Optional[Path]) -> Path:
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        prefix=f"{PRINT_FILE_PREFIX}{stem}_",
        suffix=".html",
        dir=directory,
        delete=False,
    ) as fh:
        fh.write(html)
    return Path(fh.name)


def purge_print_files(
    directory: Optional[Path] = None, max_age_s: float = PRINT_FILE_MAX_AGE_S
) -> int:
    """Delete print views older than ``max_age_s``; returns how many went.

    The files outlive :func:`open_for_print` because the browser loads them
    after the call returns, so stale ones are swept on the next print.
    """

    folder = Path(directory or tempfile.gettempdir())
    cutoff = time.time() - max_age_s
    removed = 0
    for path in folder.glob(f"{PRINT_FILE_PREFIX}*.html"):
        try:
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except FileNotFoundError:
            continue
    return removed


async def open_for_print(
    document: InvoiceDocument,
    options: ExportOptions = ExportOptions(),
    *,
    opener: Optional[Opener] = None,
    directory: Optional[Path] = None,
) -> PrintJob:
    """Open the auto-printing markup of ``document`` in a browser tab."""

    html = render_invoice_html(document, auto_print=True, settle_ms=options.settle_ms)
    await asyncio.to_thread(purge_print_files, directory)
    path = await asyncio.to_thread(_write_markup, html, document.filename_stem, directory)
    opener = opener or webbrowser.open_new_tab
    opened = bool(await asyncio.to_thread(opener, path.as_uri()))
    if not opened:
        logger.warning("no browser accepted print view %s", path)
    return PrintJob(path=path, html=html, opened=opened)


def record_export_failure(document: InvoiceDocument, exc: ExportError) -> None:
    """Count, log and report a failed export that falls back to printing."""

    invoice_export_failures_total.inc()
    invoice_print_fallbacks_total.inc()
    logger.warning(
        "invoice export failed (%s); falling back to print view",
        exc.code,
        extra={"order_ref": document.meta.order_ref},
    )
    capture_exception(exc)


async def download_invoice(
    document: InvoiceDocument,
    fmt: str = "pdf",
    options: ExportOptions = ExportOptions(),
    *,
    opener: Optional[Opener] = None,
    directory: Optional[Path] = None,
) -> Union[ExportArtifact, PrintJob]:
    """Export ``document`` to a file, falling back to the print view on failure."""

    try:
        return await export_to_file(document, fmt, options)
    except ExportError as exc:
        record_export_failure(document, exc)
    return await open_for_print(document, options, opener=opener, directory=directory)
