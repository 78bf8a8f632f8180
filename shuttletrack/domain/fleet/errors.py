"""
Domain-specific errors for the fleet bounded context.

This is the shared failure vocabulary used by the repository and the
wire codec. Errors are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Any


class BusError(Exception):
    """Base error for all fleet errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class MissingFieldError(BusError):
    """Raised when a required field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f'missing field "{field}"')
        self.field = field


class InvalidFieldError(BusError):
    """Raised when a field is present but violates an invariant."""

    def __init__(self, field: str, value: Any = None, reason: str = "") -> None:
        message = f'invalid field "{field}" = "{value}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.field = field
        self.value = value
        self.reason = reason


class DuplicateBusError(BusError):
    """Raised when a bus is created with an id that already exists."""

    def __init__(self, bus_id: str) -> None:
        super().__init__(f'bus "{bus_id}" already exists')
        self.bus_id = bus_id


class BusNotFoundError(BusError):
    """Raised when an operation targets a bus that does not exist."""

    def __init__(self, bus_id: str) -> None:
        super().__init__(f'bus "{bus_id}" does not exist')
        self.bus_id = bus_id


class UnsupportedVersionError(BusError):
    """Raised when a document declares a newer protocol version than supported."""

    def __init__(self, version: str, current_version: str) -> None:
        super().__init__(
            f"JSON:API version {version} cannot be greater than {current_version}"
        )
        self.version = version
        self.current_version = current_version


class InvalidResourceTypeError(BusError):
    """Raised when a document element carries the wrong resource type tag."""

    def __init__(self, resource_type: str, expected_type: str) -> None:
        super().__init__(
            f'expected resource type "{expected_type}" but got "{resource_type}"'
        )
        self.resource_type = resource_type
        self.expected_type = expected_type


class MalformedDocumentError(BusError):
    """Raised when a wire document does not have the expected structure."""

    def __init__(self, pointer: str, detail: str) -> None:
        super().__init__(f"malformed document at {pointer}: {detail}")
        self.pointer = pointer
        self.detail = detail


class SourceError(BusError):
    """Raised when the storage backend fails for an unclassified reason."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"storage backend failure: {reason}")
        self.reason = reason
