from __future__ import annotations

import time
import uuid
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.request_context import set_context, clear_context


logger = logging.getLogger("app.http")

# polled by uptime checks; not worth a log line per hit
QUIET_PATHS = {"/api/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Accept upstream request id if present, else create one
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        set_context(request_id=rid)

        path = request.url.path
        quiet = path in QUIET_PATHS
        t0 = time.monotonic()
        try:
            if not quiet:
                logger.info("http.request", extra={"method": request.method, "path": path})

            response: Response = await call_next(request)
            dt_ms = int((time.monotonic() - t0) * 1000)

            if not quiet:
                log = logger.warning if response.status_code >= 500 else logger.info
                log(
                    "http.response",
                    extra={
                        "method": request.method,
                        "path": path,
                        "status_code": response.status_code,
                        "duration_ms": dt_ms,
                    },
                )

            response.headers["x-request-id"] = rid
            return response
        finally:
            clear_context()
