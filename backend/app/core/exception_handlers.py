"""
exception_handlers.py
- Purpose: Convert AppError (and generic exceptions) into consistent API responses.

Errors are logged with request context so failures are diagnosable.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core import AppError, ErrorReason
from app.core.errors import internal_error

logger = logging.getLogger("app.exceptions")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "code": exc.code.value,
            "reason": exc.reason,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": request.url.path, "method": request.method},
    )
    err = internal_error(ErrorReason.INTERNAL_ERROR)
    return JSONResponse(status_code=err.status_code, content=err.to_dict())
