# start_app.py
"""Launch the invoice API with uvicorn."""

from __future__ import annotations

import argparse
import logging
import os

import uvicorn
from dotenv import load_dotenv

import config

logger = logging.getLogger("storefront.start")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    parser.add_argument(
        "--fetch-fonts",
        action="store_true",
        help="download the receipt font into static/fonts first",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    load_dotenv()  # .env values become environment overrides
    config.get_settings.cache_clear()
    settings = config.get_settings()

    if args.fetch_fonts or settings.fetch_fonts:
        from storefront.pdf.fonts import ensure_fonts

        try:
            ensure_fonts()
        except (OSError, ValueError) as exc:
            # Rendering falls back to system fonts.
            logger.warning("receipt font unavailable: %s", exc)

    uvicorn.run(
        "storefront.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
