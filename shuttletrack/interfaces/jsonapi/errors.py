"""
Structured error documents.

Translates fleet errors into JSON:API error objects carrying an HTTP
status, a title, a human-readable detail and a pointer to the part of
the request that caused the failure.
"""

from typing import Optional

from shuttletrack.domain.fleet.errors import (
    BusError,
    BusNotFoundError,
    DuplicateBusError,
    InvalidFieldError,
    InvalidResourceTypeError,
    MalformedDocumentError,
    MissingFieldError,
    SourceError,
    UnsupportedVersionError,
)
from shuttletrack.interfaces.jsonapi.documents import (
    CURRENT_VERSION,
    ErrorData,
    ErrorsDocument,
    ErrorSource,
    Root,
)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500


def field_pointer(field: str) -> str:
    """Return the pointer of a bus field inside a single-bus document."""
    if field == "id":
        return "/data/id"
    return f"/data/attributes/{field}"


def error_data(
    status: int,
    title: str,
    detail: Optional[str] = None,
    pointer: Optional[str] = None,
) -> ErrorData:
    """Build a single error object."""
    source = ErrorSource(pointer=pointer) if pointer else None
    return ErrorData(status=str(status), title=title, detail=detail, source=source)


def errors_document(*errors: ErrorData) -> ErrorsDocument:
    """Wrap error objects in a versioned document."""
    return ErrorsDocument(jsonapi=Root(version=CURRENT_VERSION), errors=list(errors))


def error_for(exc: BusError) -> ErrorData:
    """Map a fleet error to its error object.

    Backend failures keep their detail out of the response.
    """
    if isinstance(exc, MissingFieldError):
        return error_data(HTTP_422, "Missing bus field", exc.message, field_pointer(exc.field))
    if isinstance(exc, InvalidFieldError):
        return error_data(HTTP_422, "Invalid bus field", exc.message, field_pointer(exc.field))
    if isinstance(exc, DuplicateBusError):
        return error_data(
            HTTP_409, "Existing bus ID", f'Bus "{exc.bus_id}" already exists', "/data/id"
        )
    if isinstance(exc, BusNotFoundError):
        return error_data(
            HTTP_404, "Bus ID not found", f'Bus "{exc.bus_id}" doesn\'t exist', "/data/id"
        )
    if isinstance(exc, UnsupportedVersionError):
        return error_data(
            HTTP_400, "Unsupported JSON:API version", exc.message, "/jsonapi/version"
        )
    if isinstance(exc, InvalidResourceTypeError):
        return error_data(HTTP_409, "Invalid JSON:API data type", exc.message, "/data/type")
    if isinstance(exc, MalformedDocumentError):
        return error_data(HTTP_400, "Invalid JSON:API data", exc.detail, exc.pointer)
    if isinstance(exc, SourceError):
        return error_data(HTTP_500, "Unexpected error", "The storage backend failed.")
    return error_data(HTTP_500, "Unexpected error")
