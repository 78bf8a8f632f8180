"""
Domain entities for the fleet bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Bus:
    """Last known position of a shuttle bus.

    ``None`` marks a field the caller did not supply. A coordinate of
    ``0.0`` is a real position and is stored as such.

    Attributes:
        id: Opaque, non-empty identifier. Immutable once created.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        created_at: Set once by the repository when the bus is created.
        updated_at: Advanced by the repository on every mutation.
    """

    id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
