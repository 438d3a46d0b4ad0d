"""
Exception handlers rendering every failure as the JSON error envelope:

    {"error": {"statusCode": ..., "message": ..., "details": ...}}
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import SchedulerError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "statusCode": status_code,
                "message": message,
                "details": details,
            }
        },
    )


async def scheduler_error_handler(request: Request, exc: SchedulerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s (%s)",
            type(exc).__name__, request.method, request.url.path, exc.message, exc.details,
            exc_info=exc,
        )
    return error_response(exc.status_code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed query/path/body values are client errors, same as range checks
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return error_response(400, "Invalid request", details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s: %s: %s",
        request.method, request.url.path, type(exc).__name__, exc,
        exc_info=exc,
    )
    return error_response(500, "Internal server error", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulerError, scheduler_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
