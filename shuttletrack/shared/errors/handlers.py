"""
Centralized error handlers for FastAPI.

Maps fleet errors and HTTP-level failures to JSON:API error documents.
No stack traces or internal details are exposed to clients.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from shuttletrack.domain.fleet.errors import BusError
from shuttletrack.interfaces.jsonapi.codec import dump_document
from shuttletrack.interfaces.jsonapi.documents import ErrorData
from shuttletrack.interfaces.jsonapi.errors import (
    HTTP_500,
    error_data,
    error_for,
    errors_document,
)
from shuttletrack.shared.responses import JSONAPIResponse

logger = logging.getLogger(__name__)

HTTP_TITLES = {
    400: "Invalid JSON format",
    404: "URL not found",
    405: "HTTP method not allowed",
    406: "Not acceptable",
    415: "Unsupported media type",
}


def error_response(error: ErrorData, headers: dict[str, str] | None = None) -> JSONAPIResponse:
    """Build a JSON:API error response and log it by severity."""
    status_code = int(error.status)
    if status_code >= HTTP_500:
        logger.error("HTTP error %s: %s (%s)", error.status, error.title, error.detail)
    else:
        logger.info("HTTP error %s: %s (%s)", error.status, error.title, error.detail)

    return JSONAPIResponse(
        status_code=status_code,
        content=dump_document(errors_document(error)),
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(BusError)
    async def handle_bus_error(_request: Request, exc: BusError) -> JSONAPIResponse:
        """Handle every error of the fleet taxonomy."""
        error = error_for(exc)
        if int(error.status) >= HTTP_500:
            logger.error("Fleet error: %s", exc.message)
        return error_response(error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONAPIResponse:
        """Handle routing and content negotiation failures."""
        title = HTTP_TITLES.get(exc.status_code) or HTTPStatus(exc.status_code).phrase
        detail = exc.detail if isinstance(exc.detail, str) else None
        return error_response(error_data(exc.status_code, title, detail), exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONAPIResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return error_response(error_data(HTTP_500, "Unexpected error"))
