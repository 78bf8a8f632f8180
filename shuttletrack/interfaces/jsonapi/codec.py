"""
Conversion between bus entities and JSON:API documents.

Inbound documents pass two checks before a bus reaches the repository:
    - Version: a declared protocol version must not be newer than ours.
    - Type: every resource object must be tagged ``"bus"``.

Collections are decoded element by element and stop at the first
element that fails.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional

from pydantic import BaseModel, ValidationError
from semver import Version

from shuttletrack.domain.fleet.entities import Bus
from shuttletrack.domain.fleet.errors import (
    InvalidResourceTypeError,
    MalformedDocumentError,
    UnsupportedVersionError,
)
from shuttletrack.interfaces.jsonapi.documents import (
    BUS_TYPE,
    CURRENT_VERSION,
    BusAttributes,
    BusData,
    BusDocument,
    BusesDocument,
    Links,
    Root,
)

logger = logging.getLogger(__name__)

LinkBuilder = Callable[[str], str]
"""Builds the ``self`` URL of a bus from its id."""

_CURRENT = Version.parse(CURRENT_VERSION, optional_minor_and_patch=True)


class _Envelope(BaseModel):
    """Top-level members inspected before the resource data is validated."""

    jsonapi: Optional[Root] = None
    data: Any = None


def validate_version(root: Optional[Root]) -> None:
    """Reject documents declaring a protocol version newer than ours.

    An absent or empty version is compatible. Versions compare as
    semantic versions: a pre-release of the current version is older,
    and build metadata is ignored.

    Raises:
        UnsupportedVersionError: The version is unparseable or too new.
    """
    if root is None or not root.version:
        return

    try:
        version = Version.parse(root.version, optional_minor_and_patch=True)
    except ValueError as exc:
        logger.warning("Failed to parse JSON:API version %r", root.version)
        raise UnsupportedVersionError(root.version, CURRENT_VERSION) from exc

    if version.replace(build=None) > _CURRENT:
        raise UnsupportedVersionError(root.version, CURRENT_VERSION)


def _to_bus_data(bus: Bus, link_for: Optional[LinkBuilder]) -> BusData:
    links = Links(self_link=link_for(bus.id)) if link_for is not None else None
    return BusData(
        type=BUS_TYPE,
        id=bus.id,
        attributes=BusAttributes(
            latitude=bus.latitude,
            longitude=bus.longitude,
            created_at=bus.created_at,
            updated_at=bus.updated_at,
        ),
        links=links,
    )


def _from_bus_data(data: BusData) -> Bus:
    if data.type != BUS_TYPE:
        raise InvalidResourceTypeError(data.type, BUS_TYPE)

    attributes = data.attributes or BusAttributes()
    return Bus(
        id=data.id,
        latitude=attributes.latitude,
        longitude=attributes.longitude,
        created_at=attributes.created_at,
        updated_at=attributes.updated_at,
    )


def encode_bus(bus: Bus, link_for: Optional[LinkBuilder] = None) -> BusDocument:
    """Encode a single bus, attaching a self link when ``link_for`` is given."""
    return BusDocument(
        jsonapi=Root(version=CURRENT_VERSION),
        data=_to_bus_data(bus, link_for),
    )


def encode_buses(
    buses: Iterable[Bus], link_for: Optional[LinkBuilder] = None
) -> BusesDocument:
    """Encode a collection of buses, attaching self links when ``link_for`` is given."""
    return BusesDocument(
        jsonapi=Root(version=CURRENT_VERSION),
        data=[_to_bus_data(bus, link_for) for bus in buses],
    )


def decode_bus(document: BusDocument) -> Bus:
    """Decode a validated single-bus document.

    Raises:
        UnsupportedVersionError: The document version is too new.
        InvalidResourceTypeError: The resource is not tagged ``"bus"``.
    """
    validate_version(document.jsonapi)
    return _from_bus_data(document.data)


def decode_buses(document: BusesDocument) -> list[Bus]:
    """Decode a validated collection document.

    Raises:
        UnsupportedVersionError: The document version is too new.
        InvalidResourceTypeError: An element is not tagged ``"bus"``.
    """
    validate_version(document.jsonapi)
    return [_from_bus_data(data) for data in document.data]


def _pointer(prefix: str, error: ValidationError) -> tuple[str, str]:
    """Return the JSON pointer and message of the first validation error."""
    first = error.errors()[0]
    parts = [prefix, *(str(part) for part in first["loc"])]
    pointer = "/".join(part.strip("/") for part in parts if part != "")
    return "/" + pointer, first["msg"]


def _parse_envelope(payload: Any) -> _Envelope:
    if not isinstance(payload, dict):
        raise MalformedDocumentError("/", "document must be a JSON object")

    try:
        envelope = _Envelope.model_validate(payload)
    except ValidationError as exc:
        pointer, message = _pointer("", exc)
        raise MalformedDocumentError(pointer, message) from exc

    validate_version(envelope.jsonapi)
    return envelope


def _parse_bus_data(raw: Any, pointer: str) -> Bus:
    try:
        data = BusData.model_validate(raw)
    except ValidationError as exc:
        error_pointer, message = _pointer(pointer, exc)
        raise MalformedDocumentError(error_pointer, message) from exc
    return _from_bus_data(data)


def parse_bus_document(payload: Any) -> Bus:
    """Decode a raw single-bus document (as parsed from JSON).

    The version is checked before the resource data.

    Raises:
        MalformedDocumentError: The document has the wrong structure.
        UnsupportedVersionError: The document version is too new.
        InvalidResourceTypeError: The resource is not tagged ``"bus"``.
    """
    envelope = _parse_envelope(payload)
    if not isinstance(envelope.data, dict):
        raise MalformedDocumentError("/data", "data must be a resource object")
    return _parse_bus_data(envelope.data, "/data")


def parse_buses_document(payload: Any) -> list[Bus]:
    """Decode a raw collection document (as parsed from JSON).

    Raises:
        MalformedDocumentError: The document or an element has the wrong structure.
        UnsupportedVersionError: The document version is too new.
        InvalidResourceTypeError: An element is not tagged ``"bus"``.
    """
    envelope = _parse_envelope(payload)
    if envelope.data is None:
        return []
    if not isinstance(envelope.data, list):
        raise MalformedDocumentError("/data", "data must be an array of resource objects")
    return [
        _parse_bus_data(raw, f"/data/{index}")
        for index, raw in enumerate(envelope.data)
    ]


def dump_document(document: BaseModel) -> dict[str, Any]:
    """Serialize a document model to a JSON-compatible dict."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)
