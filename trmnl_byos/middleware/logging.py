"""
Request logging middleware.

Logs one line per request with method, path, status and duration. At DEBUG
level the scheme, host and request and response headers are logged too,
with credentials redacted.
"""

import logging
import time

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("trmnl_byos.access")

SENSITIVE_HEADERS = frozenset(
    {"authorization", "cookie", "set-cookie", "x-api-key", "password"}
)


def redact_headers(headers: Headers) -> dict:
    """Return the headers as a dict with sensitive values replaced."""
    return {
        key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s://%s%s headers=%s",
                method,
                request.url.scheme,
                request.url.netloc,
                path,
                redact_headers(request.headers),
            )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        # 5xx -> ERROR, 4xx -> WARNING
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            method,
            path,
            status,
            duration_ms,
            client_ip,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s response headers=%s",
                method,
                path,
                redact_headers(response.headers),
            )

        return response
