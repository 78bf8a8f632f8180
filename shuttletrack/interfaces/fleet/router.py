"""
FastAPI router for the fleet bounded context.

All routes delegate to the bus repository. No business logic here.
Documents are decoded and encoded by the JSON:API codec.
Error mapping is handled by centralized error handlers.
"""

from dataclasses import replace
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from shuttletrack.domain.fleet.errors import InvalidFieldError
from shuttletrack.domain.fleet.repository import BusRepository
from shuttletrack.interfaces.fleet.dependencies import (
    get_bus_repository,
    require_jsonapi_accept,
    require_jsonapi_body,
)
from shuttletrack.interfaces.jsonapi.codec import (
    LinkBuilder,
    dump_document,
    encode_bus,
    encode_buses,
    parse_bus_document,
)
from shuttletrack.shared.responses import JSONAPIResponse

HTTP_201 = 201
HTTP_204 = 204
HTTP_400 = 400

router = APIRouter(
    tags=["fleet"],
    default_response_class=JSONAPIResponse,
    dependencies=[Depends(require_jsonapi_accept)],
)


def _link_builder(request: Request) -> LinkBuilder:
    """Build self links relative to the URL the client used."""
    base_url = str(request.base_url)
    return lambda bus_id: f"{base_url}bus/{quote(bus_id, safe='')}"


async def read_document(request: Request) -> Any:
    """Parse the request body as JSON."""
    try:
        return await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=HTTP_400, detail=str(exc)) from exc


@router.api_route(
    "/bus",
    methods=["GET", "HEAD"],
    summary="List buses",
    description="Return every tracked bus ordered by id.",
)
def list_buses(
    request: Request,
    repository: BusRepository = Depends(get_bus_repository),
) -> JSONAPIResponse:
    """List all buses."""
    buses = repository.read_all()
    document = encode_buses(buses, link_for=_link_builder(request))
    return JSONAPIResponse(content=dump_document(document))


@router.post(
    "/bus",
    status_code=HTTP_201,
    dependencies=[Depends(require_jsonapi_body)],
    summary="Create a bus",
    description="Start tracking a new bus. Timestamps are assigned by the server.",
)
def create_bus(
    request: Request,
    payload: Any = Depends(read_document),
    repository: BusRepository = Depends(get_bus_repository),
) -> JSONAPIResponse:
    """Create a bus from a JSON:API document."""
    bus = parse_bus_document(payload)
    created = repository.create(bus)

    link_for = _link_builder(request)
    document = encode_bus(created, link_for=link_for)
    return JSONAPIResponse(
        status_code=HTTP_201,
        content=dump_document(document),
        headers={"Location": link_for(created.id)},
    )


@router.api_route(
    "/bus/{bus_id}",
    methods=["GET", "HEAD"],
    summary="Read a bus",
    description="Return the last known position of a bus.",
)
def read_bus(
    bus_id: str,
    request: Request,
    repository: BusRepository = Depends(get_bus_repository),
) -> JSONAPIResponse:
    """Read a single bus."""
    bus = repository.read(bus_id)
    document = encode_bus(bus, link_for=_link_builder(request))
    return JSONAPIResponse(content=dump_document(document))


@router.patch(
    "/bus/{bus_id}",
    dependencies=[Depends(require_jsonapi_body)],
    summary="Update a bus",
    description=(
        "Update the position of a bus. Sending the current updated_at "
        "makes the update conditional on nobody having changed the bus since."
    ),
)
def update_bus(
    bus_id: str,
    request: Request,
    payload: Any = Depends(read_document),
    repository: BusRepository = Depends(get_bus_repository),
) -> JSONAPIResponse:
    """Update a bus from a JSON:API document."""
    bus = parse_bus_document(payload)
    if not bus.id:
        bus = replace(bus, id=bus_id)
    elif bus.id != bus_id:
        raise InvalidFieldError("id", bus.id, f'does not match the URL id "{bus_id}"')

    updated = repository.update(bus)
    document = encode_bus(updated, link_for=_link_builder(request))
    return JSONAPIResponse(content=dump_document(document))


@router.delete(
    "/bus/{bus_id}",
    status_code=HTTP_204,
    response_class=Response,
    summary="Delete a bus",
    description="Stop tracking a bus. Deleting an unknown bus returns 404.",
)
def delete_bus(
    bus_id: str,
    repository: BusRepository = Depends(get_bus_repository),
) -> Response:
    """Delete a bus."""
    repository.delete(bus_id)
    return Response(status_code=HTTP_204)
