"""
JSON:API wire codec.

Maps bus entities to and from versioned, typed documents and turns
fleet errors into structured error documents.
"""

from shuttletrack.interfaces.jsonapi.codec import (
    decode_bus,
    decode_buses,
    dump_document,
    encode_bus,
    encode_buses,
    parse_bus_document,
    parse_buses_document,
    validate_version,
)
from shuttletrack.interfaces.jsonapi.documents import (
    BUS_TYPE,
    CONTENT_TYPE,
    CURRENT_VERSION,
)

__all__ = [
    "BUS_TYPE",
    "CONTENT_TYPE",
    "CURRENT_VERSION",
    "decode_bus",
    "decode_buses",
    "dump_document",
    "encode_bus",
    "encode_buses",
    "parse_bus_document",
    "parse_buses_document",
    "validate_version",
]
