"""
HTTP middleware.

- RequestLoggingMiddleware logs every request with its status and duration.
- MethodOverrideMiddleware lets clients limited to GET/POST tunnel
  PATCH, PUT and DELETE through the X-HTTP-Method-Override header.

No business logic. Pure cross-cutting concerns.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

METHOD_OVERRIDE_HEADER = "X-HTTP-Method-Override"
OVERRIDABLE_METHODS = frozenset({"PATCH", "PUT", "DELETE"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and log its outcome."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "-"
        logger.info(
            '%s "%s %s" %d %.1fms',
            client,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    """Middleware that rewrites POST requests carrying a method override header.

    Only PATCH, PUT and DELETE can be requested. Any other value is ignored.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Rewrite the request method before routing."""
        if request.method == "POST":
            override = request.headers.get(METHOD_OVERRIDE_HEADER, "").strip().upper()
            if override in OVERRIDABLE_METHODS:
                logger.debug("Overriding HTTP method POST with %s", override)
                request.scope["method"] = override
        return await call_next(request)
