"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from default_management.core.metrics import record_domain_error
from default_management.domain.exceptions import DomainException, ErrorKind
from .request_context import get_request_id

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}


def _error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
        headers=headers,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Domain exceptions map to an HTTP status by their kind; the body always
    carries the structured error code.
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle all domain exceptions."""
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        record_domain_error(exc.kind.value, exc.code)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "domain_exception",
            request_id=get_request_id(),
            kind=exc.kind.value,
            code=exc.code,
            message=exc.message,
        )

        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return _error_response(status_code, exc.code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle malformed request bodies and query parameters."""
        message = _format_validation_errors(exc)
        record_domain_error(ErrorKind.VALIDATION.value, "VALIDATION_ERROR")
        logger.info(
            "request_validation_failed",
            request_id=get_request_id(),
            message=message,
        )
        return _error_response(400, "VALIDATION_ERROR", message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
