# config.py

"""Settings for the invoice service.

``config.json`` beside this file carries the issuer profile and receipt
geometry for a deployment. Environment variables (and ``.env``) win over
the file; nested issuer fields are addressed as ``ISSUER__<FIELD>``, for
example ``ISSUER__GSTIN``.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.schemas import IssuerProfile

CONFIG_PATH = Path(__file__).with_name("config.json")
NESTED_DELIMITER = "__"


class Settings(BaseSettings):
    """Issuer profile, receipt geometry and service knobs."""

    model_config = SettingsConfigDict(
        env_file=".env", env_nested_delimiter=NESTED_DELIMITER, extra="ignore"
    )

    issuer: IssuerProfile = IssuerProfile()
    # 80mm roll, Font A
    receipt_columns: int = 48
    item_name_max_chars: int = 25
    receipt_dpi: int = 203
    receipt_margin_mm: float = 5.0
    print_settle_ms: int = 500
    display_timezone: str = "Asia/Kolkata"
    font_path: str | None = None
    fetch_fonts: bool = False
    log_level: str = "INFO"
    error_dsn: str | None = None
    environment: str = "dev"


def _read_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def _apply_env(data: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    """Overlay matching environment variables onto ``data``."""

    merged = dict(data)
    issuer = dict(merged.get("issuer") or {})
    for key, value in environ.items():
        name = key.lower()
        if name in Settings.model_fields and name != "issuer":
            merged[name] = value
            continue
        head, _, field = name.partition(NESTED_DELIMITER)
        if head == "issuer" and field in IssuerProfile.model_fields:
            issuer[field] = value
    if issuer:
        merged["issuer"] = issuer
    return merged


@lru_cache
def get_settings() -> Settings:
    """Cached settings; call ``get_settings.cache_clear()`` after env changes."""

    return Settings(**_apply_env(_read_json(CONFIG_PATH), dict(os.environ)))
