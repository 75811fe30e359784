"""Exception handlers rendering every failure as an error envelope.

Expected errors keep their message and code. Request validation reports
only the first violation. Anything unexpected is logged in full and
answered with a generic message; internal detail is echoed only in
debug mode.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from infrastructure.observability import DefaultRequestErrorProbe, RequestErrorProbe
from shared_kernel.envelope import ErrorEnvelope
from shared_kernel.exceptions import BrandBrainError

GENERIC_ERROR_MESSAGE = "Internal server error"
_VALUE_ERROR_PREFIX = "Value error, "


def http_error(error: BrandBrainError) -> HTTPException:
    """Convert a taxonomy error into an HTTPException carrying the envelope."""
    body = ErrorEnvelope(
        error=error.message, code=error.code, details=error.details
    ).to_body()
    return HTTPException(status_code=error.status_code, detail=body)


def first_validation_message(exc: RequestValidationError) -> str:
    """Human-readable message for the first schema violation."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if first.get("type") == "missing":
        return f"{loc[-1]} is required" if loc else "Request body is required"
    message = str(first.get("msg", "Invalid request"))
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX) :]
    if loc:
        return f"{loc[-1]}: {message}"
    return message


def _envelope_from_detail(detail: Any) -> dict[str, Any]:
    if isinstance(detail, dict) and "error" in detail:
        return {"success": False, **detail}
    return ErrorEnvelope(error=str(detail)).to_body()


def register_error_handlers(
    app: FastAPI,
    debug: bool = False,
    probe: RequestErrorProbe | None = None,
) -> None:
    """Install the envelope-rendering exception handlers on ``app``.

    Args:
        app: The FastAPI application
        debug: Include internal exception text in 500 responses
        probe: Optional domain probe for observability
    """
    error_probe = probe or DefaultRequestErrorProbe()

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        body = _envelope_from_detail(exc.detail)
        if exc.status_code < 500:
            error_probe.request_rejected(
                path=request.url.path,
                status_code=exc.status_code,
                error=str(body.get("error")),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=body,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = first_validation_message(exc)
        error_probe.request_rejected(
            path=request.url.path,
            status_code=status.HTTP_400_BAD_REQUEST,
            error=message,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorEnvelope(error=message, code="VALIDATION_ERROR").to_body(),
        )

    @app.exception_handler(BrandBrainError)
    async def handle_domain_error(
        request: Request, exc: BrandBrainError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            error_probe.unhandled_error(
                path=request.url.path, method=request.method, error=exc
            )
            envelope = ErrorEnvelope(
                error=exc.message if debug else GENERIC_ERROR_MESSAGE,
                code=exc.code,
            )
        else:
            error_probe.request_rejected(
                path=request.url.path,
                status_code=exc.status_code,
                error=exc.message,
            )
            envelope = ErrorEnvelope(
                error=exc.message, code=exc.code, details=exc.details
            )
        return JSONResponse(status_code=exc.status_code, content=envelope.to_body())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        error_probe.unhandled_error(
            path=request.url.path, method=request.method, error=exc
        )
        envelope = ErrorEnvelope(
            error=GENERIC_ERROR_MESSAGE,
            details=f"{type(exc).__name__}: {exc}" if debug else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope.to_body(),
        )
