import io
import os
import time

import pytest
from PIL import Image
from pypdf import PdfReader

from storefront.invoice import render_invoice
from storefront.pdf import raster
from storefront.pdf.export import (
    PRINT_FILE_MAX_AGE_S,
    PRINT_FILE_PREFIX,
    ExportArtifact,
    ExportError,
    ExportOptions,
    PrintJob,
    download_invoice,
    export_to_file,
    open_for_print,
    purge_print_files,
)
from storefront.schemas import Order
from tests._orders import order_payload

PAPER_WIDTH_PT = 80 / 25.4 * 72
_real_gmtime = time.gmtime


def _document(issuer, now, items=None):
    payload = order_payload()
    if items is not None:
        payload["items"] = items
    return render_invoice(Order.model_validate(payload), issuer=issuer, now=now)


@pytest.mark.anyio
async def test_pdf_is_single_80mm_page(issuer, now):
    artifact = await export_to_file(_document(issuer, now))
    assert artifact.filename == "Invoice_c0ffee12.pdf"
    assert artifact.mimetype == "application/pdf"
    assert artifact.content.startswith(b"%PDF")

    reader = PdfReader(io.BytesIO(artifact.content))
    assert len(reader.pages) == 1
    assert abs(float(reader.pages[0].mediabox.width) - PAPER_WIDTH_PT) < 1


@pytest.mark.anyio
async def test_page_height_follows_content(issuer, now):
    one = order_payload()["items"][:1]
    short = await export_to_file(_document(issuer, now, one))
    long = await export_to_file(_document(issuer, now, one * 12))
    short_page = PdfReader(io.BytesIO(short.content)).pages[0]
    long_page = PdfReader(io.BytesIO(long.content)).pages[0]
    assert float(long_page.mediabox.height) > float(short_page.mediabox.height)
    assert len(PdfReader(io.BytesIO(long.content)).pages) == 1


@pytest.mark.anyio
async def test_png_export(issuer, now):
    options = ExportOptions(dpi=203, margin_mm=5)
    artifact = await export_to_file(_document(issuer, now), "png", options)
    assert artifact.filename.endswith(".png")
    image = Image.open(io.BytesIO(artifact.content))
    assert image.width == raster.mm_to_px(80, 203)


@pytest.mark.anyio
async def test_unknown_format_rejected(issuer, now):
    with pytest.raises(ExportError) as exc:
        await export_to_file(_document(issuer, now), "docx")
    assert exc.value.code == "FORMAT"


@pytest.mark.anyio
async def test_open_for_print_writes_auto_print_page(issuer, now, tmp_path):
    opened = []
    job = await open_for_print(
        _document(issuer, now),
        ExportOptions(settle_ms=300),
        opener=lambda url: opened.append(url) or True,
        directory=tmp_path,
    )
    assert isinstance(job, PrintJob)
    assert job.opened
    assert job.path.parent == tmp_path
    assert opened == [job.path.as_uri()]
    assert "window.print(); }, 300)" in job.path.read_text(encoding="utf-8")


@pytest.mark.anyio
async def test_open_for_print_reports_unopened(issuer, now, tmp_path):
    job = await open_for_print(
        _document(issuer, now), opener=lambda url: False, directory=tmp_path
    )
    assert not job.opened
    assert job.path.exists()


@pytest.mark.anyio
async def test_download_falls_back_to_print(monkeypatch, issuer, now, tmp_path):
    def broken(*args, **kwargs):
        raise RuntimeError("no canvas")

    monkeypatch.setattr(raster, "render_lines_image", broken)
    opened = []
    result = await download_invoice(
        _document(issuer, now),
        opener=lambda url: opened.append(url) or True,
        directory=tmp_path,
    )
    assert isinstance(result, PrintJob)
    assert len(opened) == 1


@pytest.mark.anyio
async def test_download_returns_file_when_export_works(issuer, now, tmp_path):
    opened = []
    result = await download_invoice(
        _document(issuer, now), "png", opener=opened.append, directory=tmp_path
    )
    assert isinstance(result, ExportArtifact)
    assert opened == []


def test_rasterize_wraps_failures(monkeypatch, issuer, now):
    monkeypatch.setattr(raster, "render_lines_image", lambda *a, **k: 1 / 0)
    with pytest.raises(ExportError) as exc:
        raster.rasterize(_document(issuer, now))
    assert exc.value.code == "RASTERIZE"
    assert exc.value.hint


def test_pdf_bytes_are_stable(monkeypatch, issuer, now):
    doc = _document(issuer, now)
    first = raster.rasterize(doc)
    # Any wall-clock stamp would differ between these two renders.
    monkeypatch.setattr(time, "time", lambda: 4102444800.0)
    monkeypatch.setattr(time, "gmtime", lambda *a: _real_gmtime(4102444800))
    second = raster.rasterize(doc)
    assert first == second
    assert b"/CreationDate (D:20240604063000Z)" in first


@pytest.mark.anyio
async def test_stale_print_files_are_purged(issuer, now, tmp_path):
    stale = tmp_path / f"{PRINT_FILE_PREFIX}Invoice_old_x.html"
    stale.write_text("old", encoding="utf-8")
    old = time.time() - PRINT_FILE_MAX_AGE_S - 60
    os.utime(stale, (old, old))
    unrelated = tmp_path / "notes.html"
    unrelated.write_text("keep", encoding="utf-8")
    os.utime(unrelated, (old, old))

    job = await open_for_print(
        _document(issuer, now), opener=lambda url: True, directory=tmp_path
    )
    assert not stale.exists()
    assert unrelated.exists()
    assert job.path.exists()
    assert job.path.name.startswith(PRINT_FILE_PREFIX)
    assert purge_print_files(tmp_path) == 0
