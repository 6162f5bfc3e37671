"""
Foodbabes Backend: Request Logging Middleware
===============================================

What:  One access log line per request on the `foodbabes.access` logger.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client IP. Level follows the status class:
       5xx → ERROR, 4xx → WARNING, otherwise INFO. /health is not logged.

Never logged: request bodies (passwords), the Authorization header (access
tokens), uploaded file contents.

Example line:
    2026-01-15T12:00:00 [INFO] foodbabes.access [3f2a9c1e]: POST /foods 200 84.3ms from 127.0.0.1
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from foodbabes.middleware.request_id import request_id_var

logger = logging.getLogger("foodbabes.access")

SKIP_PATHS = frozenset({"/health"})


def status_log_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            status_log_level(status),
            "%s %s %d %.1fms from %s",
            request.method,
            path,
            status,
            duration_ms,
            client_ip,
            extra={
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "request_id": rid or "-",
            },
        )
        return response
