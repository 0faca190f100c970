from __future__ import annotations

"""Rasterize invoices to fixed-width receipt images and single-page PDFs."""

import io
from typing import List, Literal, Optional

from PIL import Image, ImageDraw, ImageFont

from ..invoice import InvoiceDocument
from ..printing.receipt import COLUMNS, render_receipt
from .fonts import font_candidates

MM_PER_INCH = 25.4
PAPER_WIDTH_MM = 80
DEFAULT_DPI = 203
DEFAULT_MARGIN_MM = 5.0
_PROBE_SIZE = 20


class ExportError(RuntimeError):
    """Raised when an invoice cannot be rendered to a file."""

    def __init__(self, code: str, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.hint = hint


def mm_to_px(mm: float, dpi: int) -> int:
    return round(mm / MM_PER_INCH * dpi)


def _fit_font(columns: int, width_px: int, font_path: Optional[str]):
    """Load a monospace font sized so ``columns`` characters fill ``width_px``."""

    for candidate in font_candidates(font_path):
        try:
            probe = ImageFont.truetype(candidate, _PROBE_SIZE)
        except OSError:
            continue
        advance = probe.getlength("M") or 1
        size = max(int(_PROBE_SIZE * width_px / (advance * columns)), 6)
        return ImageFont.truetype(candidate, size)
    return ImageFont.load_default()


def render_lines_image(
    lines: List[str],
    *,
    dpi: int = DEFAULT_DPI,
    margin_mm: float = DEFAULT_MARGIN_MM,
    columns: int = COLUMNS,
    font_path: Optional[str] = None,
) -> Image.Image:
    """Draw ``lines`` on a white 80mm-wide canvas whose height fits the text."""

    width = mm_to_px(PAPER_WIDTH_MM, dpi)
    margin = mm_to_px(margin_mm, dpi)
    font = _fit_font(columns, width - 2 * margin, font_path)

    bbox = font.getbbox("Ag")
    line_height = int((bbox[3] - bbox[1]) * 1.3) + 1
    height = line_height * max(len(lines), 1) + 2 * margin

    image = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(image)
    y = margin
    for line in lines:
        draw.text((margin, y), line, font=font, fill=0)
        y += line_height
    return image


def rasterize(
    document: InvoiceDocument,
    fmt: Literal["PDF", "PNG"] = "PDF",
    *,
    dpi: int = DEFAULT_DPI,
    margin_mm: float = DEFAULT_MARGIN_MM,
    columns: int = COLUMNS,
    font_path: Optional[str] = None,
) -> bytes:
    """Render ``document`` to PDF or PNG bytes.

    The PDF is a single page exactly 80mm wide whose height follows the
    content. Any rendering failure surfaces as :class:`ExportError`.
    """

    fmt = fmt.upper()  # type: ignore[assignment]
    if fmt not in ("PDF", "PNG"):
        raise ExportError("FORMAT", f"Unsupported export format: {fmt}")
    try:
        image = render_lines_image(
            render_receipt(document, columns),
            dpi=dpi,
            margin_mm=margin_mm,
            columns=columns,
            font_path=font_path,
        )
        buf = io.BytesIO()
        if fmt == "PDF":
            # Stamp the invoice time so identical documents give identical bytes.
            stamp = document.meta.issued_at.utctimetuple()
            image.save(
                buf,
                format="PDF",
                resolution=float(dpi),
                creationDate=stamp,
                modDate=stamp,
            )
        else:
            image.save(buf, format="PNG", dpi=(dpi, dpi))
    except Exception as exc:
        raise ExportError(
            "RASTERIZE", f"Could not render invoice: {exc}", hint="Use the print view"
        ) from exc
    return buf.getvalue()
