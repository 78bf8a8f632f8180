"""
Domain service: Bus repository.

Wraps a BusSource and enforces the record invariants shared by every
storage backend:
    - A bus always has a non-empty id.
    - created_at is stamped once, on creation, and never changes.
    - updated_at is stamped on every mutation and never moves backwards.
    - A caller-supplied updated_at on update acts as an optimistic
      concurrency token and must match the stored value.

No framework imports. The repository keeps no state between calls;
the source is the single source of truth.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from shuttletrack.domain.fleet.entities import Bus
from shuttletrack.domain.fleet.errors import (
    BusError,
    InvalidFieldError,
    MissingFieldError,
    SourceError,
)
from shuttletrack.domain.fleet.ports import BusSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class BusRepository:
    """Invariant-enforcing layer between callers and a BusSource.

    The read-then-write in :meth:`update` is not atomic. Concurrent
    writers are only safe if the source itself serializes them.
    """

    def __init__(
        self,
        source: BusSource,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the repository.

        Args:
            source: Storage backend to delegate to.
            clock: Returns "now" as an aware datetime. Defaults to UTC wall clock.
        """
        self._source = source
        self._clock = clock or utcnow
        self._closed = False

    def create(self, bus: Bus) -> Bus:
        """Create a new bus, stamping both timestamps.

        Args:
            bus: The bus to create. Timestamps must not be set.

        Returns:
            The stored bus.

        Raises:
            MissingFieldError: The id is empty.
            InvalidFieldError: The caller supplied created_at or updated_at.
            DuplicateBusError: A bus with the same id already exists.
        """
        logger.debug(
            "Creating bus: id=%s, latitude=%s, longitude=%s",
            bus.id,
            bus.latitude,
            bus.longitude,
        )
        if not bus.id:
            raise MissingFieldError("id")

        if bus.created_at is not None:
            raise InvalidFieldError(
                "created_at", bus.created_at, "creation time cannot be specified"
            )

        if bus.updated_at is not None:
            raise InvalidFieldError(
                "updated_at", bus.updated_at, "update time cannot be specified"
            )

        now = self._clock()
        created = replace(bus, created_at=now, updated_at=now)
        self._call(self._source.create, created)
        return created

    def read_all(self) -> list[Bus]:
        """Return every bus known to the source."""
        logger.debug("Reading all buses")
        return self._call(self._source.read_all)

    def read(self, bus_id: str) -> Bus:
        """Return a single bus.

        Raises:
            MissingFieldError: The id is empty.
            BusNotFoundError: No bus has this id.
        """
        logger.debug("Reading bus: id=%s", bus_id)
        if not bus_id:
            raise MissingFieldError("id")

        return self._call(self._source.read, bus_id)

    def update(self, bus: Bus) -> Bus:
        """Update a bus, merging unset fields from the stored record.

        Coordinates left as ``None`` keep their stored value. If the caller
        supplies ``created_at`` it must equal the stored one. If the caller
        supplies ``updated_at`` it must equal the stored one, otherwise the
        update is rejected as stale.

        Args:
            bus: The requested changes, identified by ``bus.id``.

        Returns:
            The stored bus after the update.

        Raises:
            MissingFieldError: The id is empty.
            BusNotFoundError: No bus has this id.
            InvalidFieldError: A supplied timestamp does not match the stored one.
        """
        logger.debug(
            "Updating bus: id=%s, latitude=%s, longitude=%s, updated_at=%s",
            bus.id,
            bus.latitude,
            bus.longitude,
            bus.updated_at,
        )
        if not bus.id:
            raise MissingFieldError("id")

        existing = self._call(self._source.read, bus.id)

        if bus.created_at is not None and bus.created_at != existing.created_at:
            raise InvalidFieldError(
                "created_at", bus.created_at, "creation time cannot be changed"
            )

        if bus.updated_at is not None and bus.updated_at != existing.updated_at:
            raise InvalidFieldError(
                "updated_at", bus.updated_at, "bus was modified since this version"
            )

        now = self._clock()
        if existing.updated_at is not None and now < existing.updated_at:
            now = existing.updated_at

        updated = Bus(
            id=existing.id,
            latitude=existing.latitude if bus.latitude is None else bus.latitude,
            longitude=existing.longitude if bus.longitude is None else bus.longitude,
            created_at=existing.created_at,
            updated_at=now,
        )
        self._call(self._source.update, updated)
        return updated

    def delete(self, bus_id: str) -> None:
        """Delete a bus permanently.

        Raises:
            MissingFieldError: The id is empty.
            BusNotFoundError: No bus has this id.
        """
        logger.debug("Deleting bus: id=%s", bus_id)
        if not bus_id:
            raise MissingFieldError("id")

        self._call(self._source.delete, bus_id)

    def close(self) -> None:
        """Close the underlying source. Later calls are no-ops."""
        if self._closed:
            return
        logger.debug("Closing bus source")
        self._closed = True
        self._call(self._source.close)

    def _call(self, operation: Callable[..., T], *args: Any) -> T:
        """Invoke a source operation, normalizing unknown failures to SourceError."""
        try:
            return operation(*args)
        except BusError:
            raise
        except Exception as exc:
            name = getattr(operation, "__name__", repr(operation))
            logger.debug("Source operation %s failed", name, exc_info=True)
            raise SourceError(str(exc) or type(exc).__name__) from exc
