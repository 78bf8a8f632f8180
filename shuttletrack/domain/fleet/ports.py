"""
Port interfaces (ABCs) for the fleet bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod

from shuttletrack.domain.fleet.entities import Bus


class BusSource(ABC):
    """Port for raw bus persistence.

    A source performs mechanical storage only. It owns no business
    rules apart from detecting duplicate identities on create.
    Every operation may raise SourceError on I/O failure.
    """

    @abstractmethod
    def create(self, bus: Bus) -> None:
        """Persist a new bus.

        Raises:
            DuplicateBusError: A bus with the same id already exists.
        """
        raise NotImplementedError

    @abstractmethod
    def read_all(self) -> list[Bus]:
        """Return every stored bus ordered by id ascending."""
        raise NotImplementedError

    @abstractmethod
    def read(self, bus_id: str) -> Bus:
        """Return the bus with the given id.

        Raises:
            BusNotFoundError: No bus has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, bus: Bus) -> None:
        """Overwrite the stored bus matching ``bus.id``.

        The caller guarantees ``bus`` is complete and valid.

        Raises:
            BusNotFoundError: No bus has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, bus_id: str) -> None:
        """Remove the bus with the given id.

        Raises:
            BusNotFoundError: No bus has this id.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        raise NotImplementedError
