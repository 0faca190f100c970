"""Envelopes shared by every JSON route."""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def ok(data: Any) -> Dict[str, Any]:
    return {"ok": True, "data": data}


def err(
    code: int | str,
    message: str,
    *,
    hint: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Failure envelope stamped with the current request id."""
    # Imported lazily: the middlewares package imports this module.
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    if hint:
        error["hint"] = hint
    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error, **extra}


def error_response(
    status_code: int, code: int | str, message: str, **kwargs: Any
) -> JSONResponse:
    return JSONResponse(err(code, message, **kwargs), status_code=status_code)


def attachment_headers(filename: str) -> Dict[str, str]:
    """Headers that make browsers save the body as ``filename``."""
    return {"Content-Disposition": f'attachment; filename="{filename}"'}
