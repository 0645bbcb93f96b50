"""Translation of raised errors into the API error envelope.

Services and adapters only raise; this module is the one place where
failures are logged and turned into HTTP responses.
"""

import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from photobooth.domain.errors import PhotoboothError

_logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message, "statusCode": status_code},
        },
    )


async def _handle_photobooth_error(request: Request, exc: PhotoboothError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        _logger.error(
            "Request failed: %s %s code=%s error=%s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
    else:
        _logger.warning(
            "Request rejected: %s %s code=%s error=%s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
    return error_response(exc.status_code, exc.code, exc.message)


async def _handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    _logger.warning(
        "Invalid request: %s %s errors=%s", request.method, request.url.path, exc.errors()
    )
    first = exc.errors()[0] if exc.errors() else {}
    message = str(first.get("msg", "Invalid request"))
    return error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message)


async def _handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    _logger.warning(
        "HTTP error: %s %s status=%s", request.method, request.url.path, exc.status_code
    )
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


async def _handle_provider_error(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    _logger.error(
        "Generation provider error: %s %s error=%s", request.method, request.url.path, exc
    )
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "GENERATION_PROVIDER_ERROR",
        "Image generation provider request failed",
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    _logger.exception(
        "Unhandled error: %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an app."""
    app.add_exception_handler(PhotoboothError, _handle_photobooth_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(httpx.HTTPError, _handle_provider_error)
    app.add_exception_handler(Exception, _handle_unexpected)
