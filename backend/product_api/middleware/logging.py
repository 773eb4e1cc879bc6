"""
Product API — Access Log Middleware
====================================

What:  One access line per request on the `product_api.access` logger:
       method, original url, status, duration, request id, client address.
How:   Level follows the status class (5xx ERROR, 4xx WARNING, otherwise
       INFO). A request whose handler raises is logged as 500 before the
       exception continues to the server-error handler.

Request bodies are never logged. /health is skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from product_api.middleware.request_id import current_request_id

logger = logging.getLogger("product_api.access")


def status_log_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    SKIPPED_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started)
            raise

        self._log(request, response.status_code, started)
        return response

    @staticmethod
    def _log(request: Request, status: int, started: float) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        rid = current_request_id(request)
        client = request.client.host if request.client else "unknown"
        logger.log(
            status_log_level(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            _target(request),
            status,
            elapsed_ms,
            rid,
            client,
        )
