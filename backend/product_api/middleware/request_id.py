"""
Product API — Request ID Middleware
====================================

What:  Tags every request with a short correlation id and returns it in the
       X-Request-ID response header.
How:   A client-supplied X-Request-ID is reused when it is a plausible token;
       otherwise an 8-character hex id is generated. The id is kept in a
       ContextVar (read by the access logger) and in request.state (read by
       the error handlers, including the 500 fallback that runs outside this
       middleware).
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids end up in log lines and response headers.
_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(client_value: Optional[str]) -> str:
    """Return the client's id if it is well-formed, else a fresh one."""
    if client_value and _CLIENT_ID_PATTERN.match(client_value):
        return client_value
    return uuid.uuid4().hex[:8]


def current_request_id(request: Request) -> str:
    """
    The id assigned to `request`.

    Falls back to the ContextVar and then to the raw header, for code paths
    that see the request before or after RequestIDMiddleware.
    """
    rid = getattr(request.state, "request_id", "") or request_id_var.get("")
    return rid or resolve_request_id(request.headers.get(REQUEST_ID_HEADER))


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, rid)
        return response
