"""
Error envelope.

Every error response has the shape
``{"success": false, "message": str, "code": str, "error"?: str, "details"?: ...}``.
``error`` is internal detail and is only included when detail exposure is on.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "Bad request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not found",
        405: "Method not allowed",
        500: "Server error",
        503: "Service unavailable",
    }
    return mapping.get(status_code, "Error")


def _error_body(
    *,
    message: str,
    code: str,
    error: Optional[str] = None,
    details: Optional[Any] = None,
    show_details: bool = False,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message, "code": code}
    if error and show_details:
        body["error"] = error
    if details:
        body["details"] = jsonable_encoder(details)
    return body


def _show_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.show_error_details)


def _parse_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any], Optional[str]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        detail_text = message if isinstance(message, str) else None
        errors = detail.get("details") or detail.get("errors")
        error = detail.get("error") if isinstance(detail.get("error"), str) else None
        return detail_text, code, errors, error
    if isinstance(detail, str):
        return detail, None, None, None
    if detail is None:
        return None, None, None, None
    return str(detail), None, None, None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        if http_exc.status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} failed: {exc.message}",
                extra={"code": exc.code, "error": exc.error},
            )
        return JSONResponse(
            _error_body(
                message=exc.message,
                code=exc.code,
                error=exc.error,
                details=exc.details,
                show_details=_show_details(request),
            ),
            status_code=http_exc.status_code,
            headers=http_exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail_text, code, errors, error = _parse_detail(exc.detail)
        return JSONResponse(
            _error_body(
                message=detail_text or _title_from_status(exc.status_code),
                code=code or f"HTTP_{exc.status_code}",
                error=error,
                details=errors,
                show_details=_show_details(request),
            ),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            _error_body(
                message="Invalid request data",
                code="VALIDATION_ERROR",
                details=exc.errors(),
            ),
            status_code=400,
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            _error_body(
                message="Invalid data",
                code="VALIDATION_ERROR",
                details=exc.errors(),
            ),
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            _error_body(
                message="Server error",
                code="INTERNAL_ERROR",
                error=str(exc),
                show_details=_show_details(request),
            ),
            status_code=500,
        )
