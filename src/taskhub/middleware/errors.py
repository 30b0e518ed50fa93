"""Exception handlers - map error kinds to status codes and a uniform envelope.

Every error response has the shape::

    {"error": {"message": ..., "statusCode": ..., "traceId": ..., "details": ...}}

``details`` is only filled in when running in development.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub.config import settings
from taskhub.engine.errors import ErrorKind, TaskHubError
from taskhub.observability.metrics import metrics
from taskhub.observability.trace import get_trace_id

logger = logging.getLogger("taskhub.api")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERSISTENCE: 500,
    ErrorKind.BROADCAST: 500,
}

INTERNAL_ERROR_MESSAGE = "An error occurred while processing your request"


def error_response(
    status_code: int,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    """Render the error envelope."""
    metrics.inc_counter(f"http.errors.{status_code}")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": message,
                "statusCode": status_code,
                "traceId": get_trace_id(),
                "details": jsonable_encoder(details) if settings.is_development else None,
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""

    @app.exception_handler(TaskHubError)
    async def taskhub_error_handler(request: Request, exc: TaskHubError) -> JSONResponse:
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        if status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
            return error_response(status_code, INTERNAL_ERROR_MESSAGE, details=exc.message)

        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        details: dict[str, Any] = {"code": exc.code}
        field = getattr(exc, "field", None)
        if field:
            details["field"] = field
        return error_response(status_code, exc.message, details=details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(f"Invalid request on {request.method} {request.url.path}")
        return error_response(400, "Invalid request", details=exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return error_response(500, INTERNAL_ERROR_MESSAGE, details=str(exc))
