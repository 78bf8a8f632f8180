"""
Dependency injection for the fleet bounded context.

Provides the composition root that wires a storage adapter into
the repository, and FastAPI dependency functions that hand the
repository to routes and enforce JSON:API content negotiation.
"""

from fastapi import HTTPException, Request

from shuttletrack.core.config import Settings
from shuttletrack.domain.fleet.repository import BusRepository
from shuttletrack.infrastructure.fleet import build_source
from shuttletrack.interfaces.jsonapi.documents import CONTENT_TYPE

HTTP_406 = 406
HTTP_415 = 415

ACCEPTABLE_MEDIA_TYPES = frozenset({CONTENT_TYPE, "*/*", "application/*"})


def build_repository(settings: Settings) -> BusRepository:
    """Build a BusRepository over the backend selected by the settings."""
    return BusRepository(source=build_source(settings.database_url))


def get_bus_repository(request: Request) -> BusRepository:
    """Return the repository owned by the running application."""
    return request.app.state.repository


def _media_type(value: str) -> str:
    return value.split(";", 1)[0].strip().lower()


def require_jsonapi_accept(request: Request) -> None:
    """Reject requests whose Accept header excludes the JSON:API media type."""
    accept = request.headers.get("accept")
    if not accept:
        return
    media_types = {_media_type(part) for part in accept.split(",")}
    if media_types.isdisjoint(ACCEPTABLE_MEDIA_TYPES):
        raise HTTPException(
            status_code=HTTP_406,
            detail=f'Request must accept "{CONTENT_TYPE}"',
        )


def require_jsonapi_body(request: Request) -> None:
    """Reject request bodies that are not sent as JSON:API."""
    content_type = _media_type(request.headers.get("content-type", ""))
    if content_type != CONTENT_TYPE:
        raise HTTPException(
            status_code=HTTP_415,
            detail=f'Request body must be "{CONTENT_TYPE}"',
        )
