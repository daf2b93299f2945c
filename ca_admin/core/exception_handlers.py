"""FastAPI exception handlers.

Every error leaves the API as ``{error, message, details}`` plus the
request id, so a failing call can be matched to its log lines.
register_exception_handlers(app) wires them once at startup.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ca_admin.core.config import get_settings
from ca_admin.domain.exceptions import CaAdminException
from ca_admin.shared.telemetry.logging import request_id_var

logger = logging.getLogger(__name__)

# Domain error_code -> HTTP status. Unlisted codes are client errors (400).
STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "RESOURCE_ALREADY_EXISTS": 409,
    "STORE_ERROR": 502,
    "PARTIAL_CASCADE": 500,
}


def _error_response(status: int, error: str, message: object, details: object = None) -> JSONResponse:
    body = {"error": error, "message": message, "request_id": request_id_var.get()}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status, content=body)


async def handle_domain_error(request: Request, exc: CaAdminException) -> JSONResponse:
    status = STATUS_BY_ERROR_CODE.get(exc.error_code, 400)
    if status >= 500:
        logger.error(
            "%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message
        )
    body = exc.to_dict()
    return _error_response(status, body["error"], body["message"], body["details"])


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(422, "VALIDATION_ERROR", "Request validation failed", exc.errors())


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything unhandled; the exception text is only exposed in debug mode."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CaAdminException, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected)
