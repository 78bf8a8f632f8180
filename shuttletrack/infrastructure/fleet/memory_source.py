"""
Adapter: In-memory bus source.

Implements BusSource port.
Every instance holds an independent table that lives as long as
the process. Nothing is persisted anywhere else.
"""

import logging
import threading

from shuttletrack.domain.fleet.entities import Bus
from shuttletrack.domain.fleet.errors import BusNotFoundError, DuplicateBusError
from shuttletrack.domain.fleet.ports import BusSource

logger = logging.getLogger(__name__)


class MemoryBusSource(BusSource):
    """Dictionary-backed implementation of the BusSource port.

    A lock serializes all operations so concurrent request handlers
    see consistent data.
    """

    def __init__(self) -> None:
        logger.debug("Initializing in-memory bus source.")
        self._buses: dict[str, Bus] = {}
        self._lock = threading.Lock()

    def create(self, bus: Bus) -> None:
        with self._lock:
            if bus.id in self._buses:
                raise DuplicateBusError(bus.id)
            self._buses[bus.id] = bus

    def read_all(self) -> list[Bus]:
        with self._lock:
            return [self._buses[bus_id] for bus_id in sorted(self._buses)]

    def read(self, bus_id: str) -> Bus:
        with self._lock:
            try:
                return self._buses[bus_id]
            except KeyError:
                raise BusNotFoundError(bus_id) from None

    def update(self, bus: Bus) -> None:
        with self._lock:
            if bus.id not in self._buses:
                raise BusNotFoundError(bus.id)
            self._buses[bus.id] = bus

    def delete(self, bus_id: str) -> None:
        with self._lock:
            if self._buses.pop(bus_id, None) is None:
                raise BusNotFoundError(bus_id)

    def close(self) -> None:
        """No-op. The table is simply dropped with the instance."""
        logger.debug("Closing in-memory bus source.")
