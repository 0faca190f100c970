from __future__ import annotations

"""Monospace font lookup and download for receipt rasterizing."""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

ROOT_DIR = Path(__file__).resolve().parents[2]
FONTS_DIR = ROOT_DIR / "static" / "fonts"

RECEIPT_FONT = "NotoSansMono-Regular.ttf"
# Resolved by Pillow against the system font directories.
SYSTEM_FALLBACKS = ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf")

_FONT_URLS = {
    RECEIPT_FONT: "https://raw.githubusercontent.com/notofonts/noto-fonts/main/hinted/ttf/NotoSansMono/NotoSansMono-Regular.ttf",
}

logger = logging.getLogger("storefront.fonts")


def fetch_font(url: str, dest: Path, timeout: float = 20) -> Path:
    """Save the font at ``url`` to ``dest``; only https sources are accepted.

    The body is written beside ``dest`` first and renamed into place, so an
    interrupted download never leaves a truncated font behind.
    """
    if urlparse(url).scheme != "https":
        raise ValueError(f"refusing non-https font url: {url}")
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    if not resp.content:
        raise ValueError(f"empty font download: {url}")
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")
    partial.write_bytes(resp.content)
    partial.replace(dest)
    return dest


def ensure_fonts() -> list[Path]:
    """Download missing receipt fonts and return the paths fetched."""
    fetched = []
    for filename, url in _FONT_URLS.items():
        dest = FONTS_DIR / filename
        if dest.exists():
            continue
        logger.info("downloading font %s", filename)
        fetched.append(fetch_font(url, dest))
    return fetched


def font_candidates(font_path: Optional[str] = None) -> list[str]:
    """Fonts to try, most specific first."""
    candidates = [font_path] if font_path else []
    bundled = FONTS_DIR / RECEIPT_FONT
    if bundled.exists():
        candidates.append(str(bundled))
    candidates.extend(SYSTEM_FALLBACKS)
    return candidates
