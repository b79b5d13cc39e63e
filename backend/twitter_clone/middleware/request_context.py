"""
Twitter Clone Backend - Request Context Middleware
===================================================

What:  Per-request correlation ID plus one access-log line.
How:   A single BaseHTTPMiddleware that
         1. accepts the caller's X-Request-ID if it is a short token of safe
            characters, otherwise mints an 8-char id,
         2. publishes it through `request_id_var` for exception handlers,
         3. times the downstream call and logs method, path, status,
            duration, request id, caller user id and client IP,
         4. echoes the id in the `X-Request-ID` response header.

Log line:
    GET /user/tweets/feed/ 200 3.4ms [a1b2c3d4] user=2 from 127.0.0.1

Never logged: request bodies (passwords), the Authorization header (tokens).

A client-supplied id is copied into logs and error bodies, so anything that
is not 1-64 characters of [A-Za-z0-9._-] is replaced rather than trusted.
"""

import logging
import re
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Skipped by the access log; probes hit it every few seconds
_QUIET_PATHS = frozenset({"/health"})

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("twitter_clone.access")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Returns the client's id when it is well-formed, else a fresh one."""
    if header_value and _CLIENT_REQUEST_ID.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags every request with a correlation ID and writes the access log."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid

        if request.url.path not in _QUIET_PATHS:
            # Set by the auth gate on the shared ASGI scope state
            user_id = getattr(request.state, "user_id", None)
            logger.log(
                _level_for(response.status_code),
                "%s %s %d %.1fms [%s] user=%s from %s",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
                rid,
                user_id if user_id is not None else "-",
                request.client.host if request.client else "unknown",
            )
        return response
