"""Structured request logging for the invoice API."""

import json
import logging
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..routes_metrics import http_requests_total
from ..utils.responses import error_response
from .request_id import request_id_ctx

# Order payload fields that should never reach the logs
PII_KEYS = {"phone", "email", "street", "zipcode", "firstname", "lastname", "transactionid"}

logger = logging.getLogger("storefront.api")


def redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: "***" if k.lower() in PII_KEYS else redact(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [redact(v) for v in obj]
    return obj


def _body_summary(raw: bytes) -> Any:
    try:
        return redact(json.loads(raw))
    except ValueError:
        return f"<{len(raw)} bytes>"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one JSON line per request and one per response.

    Unhandled route errors are turned into a 500 error envelope carrying an
    ``error_id`` that also appears in the log line.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request_id_ctx.get(None)
        path, method = request.url.path, request.method

        raw = await request.body()
        inbound: dict[str, Any] = {"req_id": req_id, "path": path, "method": method}
        if request.query_params:
            inbound["query"] = dict(request.query_params)
        if raw:
            inbound["body"] = _body_summary(raw)
        logger.info(json.dumps(inbound))

        started = time.perf_counter()
        error_id = None
        try:
            response = await call_next(request)
        except Exception:
            error_id = uuid.uuid4().hex
            logger.exception(json.dumps({"req_id": req_id, "error_id": error_id}))
            response = error_response(
                500, "INTERNAL", "Internal Server Error", error_id=error_id
            )
        latency_ms = int((time.perf_counter() - started) * 1000)
        status = response.status_code
        http_requests_total.labels(path=path, method=method, status=str(status)).inc()

        outbound = {"req_id": req_id, "status": status, "latency_ms": latency_ms}
        if error_id:
            outbound["error_id"] = error_id
        logger.log(
            logging.ERROR if status >= 500 else logging.INFO,
            json.dumps(outbound),
            extra={"route": path, "status": status, "latency_ms": latency_ms},
        )
        return response
