"""Error sink: Sentry when a DSN is configured, the log otherwise."""

from __future__ import annotations

import logging
from typing import Optional

import sentry_sdk

logger = logging.getLogger("storefront.obs")


def init_sentry(dsn: Optional[str] = None, env: Optional[str] = None) -> bool:
    """Start the Sentry client; returns ``False`` when no DSN is set."""
    if not dsn:
        logger.info("error_dsn not set; exceptions go to the log only")
        return False
    sentry_sdk.init(dsn=dsn, environment=env, send_default_pii=False)
    return True


def capture_exception(exc: BaseException) -> Optional[str]:
    """Report ``exc`` and return the Sentry event id when one was sent."""
    if sentry_sdk.get_client().is_active():
        return sentry_sdk.capture_exception(exc)
    logger.error("%s: %s", type(exc).__name__, exc, exc_info=exc)
    return None
