# backend/beautyplaza/errors.py
"""
Error envelope rendering.

Every error leaves the API as
``{timestamp, status, message, detail, code?, errors?}`` where ``detail``
is ``uri=<request path>``.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException
from .monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def _envelope(
    *,
    status: int,
    message: str,
    path: str,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "message": message,
        "detail": f"uri={path}",
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return body


def _parse_detail(detail: Any) -> tuple[str, Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        errors = detail.get("details") or detail.get("errors")
        return (message if isinstance(message, str) else ""), code, errors
    if detail is None:
        return "", None, None
    return str(detail), None, None


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Collapse pydantic error locations into a ``field -> message`` map."""
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        field = ".".join(loc) or "request"
        fields.setdefault(field, str(error.get("msg", "Invalid value")))
    return fields


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        prometheus_metrics.record_error(exc.code)
        return JSONResponse(
            _envelope(
                status=http_exc.status_code,
                message=exc.message,
                path=request.url.path,
                code=exc.code,
                errors=exc.details,
            ),
            status_code=http_exc.status_code,
            headers=http_exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message, code, errors = _parse_detail(exc.detail)
        return JSONResponse(
            _envelope(
                status=exc.status_code,
                message=message,
                path=request.url.path,
                code=code,
                errors=errors,
            ),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            _envelope(
                status=400,
                message="Validation failed",
                path=request.url.path,
                code="VALIDATION_ERROR",
                errors=_field_errors(exc),
            ),
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        prometheus_metrics.record_error(type(exc).__name__)
        return JSONResponse(
            _envelope(
                status=500,
                message=UNEXPECTED_ERROR_MESSAGE,
                path=request.url.path,
                code="INTERNAL_SERVER_ERROR",
            ),
            status_code=500,
        )
