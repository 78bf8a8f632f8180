"""
Adapter: Relational bus source.

Implements BusSource port on top of a SQLAlchemy engine.
PostgreSQL (via psycopg2) is the production target; any dialect
SQLAlchemy supports works, which is how the tests run on SQLite.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    MetaData,
    String,
    Table,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shuttletrack.domain.fleet.entities import Bus
from shuttletrack.domain.fleet.errors import (
    BusNotFoundError,
    DuplicateBusError,
    SourceError,
)
from shuttletrack.domain.fleet.ports import BusSource

logger = logging.getLogger(__name__)

# SQLSTATE reported by PostgreSQL for a primary key collision.
UNIQUE_VIOLATION = "23505"

metadata = MetaData()

buses = Table(
    "buses",
    metadata,
    Column("id", String, primary_key=True),
    Column("latitude", Float, nullable=True),
    Column("longitude", Float, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime read from or written to the database to aware UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _row_to_bus(row: RowMapping) -> Bus:
    return Bus(
        id=row["id"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        created_at=_to_utc(row["created_at"]),
        updated_at=_to_utc(row["updated_at"]),
    )


def _bus_to_params(bus: Bus) -> dict[str, Any]:
    return {
        "id": bus.id,
        "latitude": bus.latitude,
        "longitude": bus.longitude,
        "created_at": _to_utc(bus.created_at),
        "updated_at": _to_utc(bus.updated_at),
    }


class SqlBusSource(BusSource):
    """SQLAlchemy implementation of the BusSource port.

    Stores buses in the ``buses`` table, creating it if needed.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the source and make sure the table exists.

        Args:
            engine: SQLAlchemy engine the source owns from now on.

        Raises:
            SourceError: The table could not be created.
        """
        self._engine = engine
        self._closed = False
        try:
            metadata.create_all(self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.error("Error creating the table \"buses\": %s", exc)
            raise SourceError(str(exc)) from exc

    def create(self, bus: Bus) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(buses).values(**_bus_to_params(bus)))
        except IntegrityError as exc:
            pgcode = getattr(exc.orig, "pgcode", None)
            if pgcode not in (None, UNIQUE_VIOLATION):
                logger.error("Error creating bus %s: %s", bus.id, exc)
                raise SourceError(str(exc)) from exc
            raise DuplicateBusError(bus.id) from exc
        except SQLAlchemyError as exc:
            logger.error("Error creating bus %s: %s", bus.id, exc)
            raise SourceError(str(exc)) from exc

    def read_all(self) -> list[Bus]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(select(buses).order_by(buses.c.id)).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Error reading buses: %s", exc)
            raise SourceError(str(exc)) from exc

        return [_row_to_bus(row) for row in rows]

    def read(self, bus_id: str) -> Bus:
        try:
            with self._engine.connect() as conn:
                row = (
                    conn.execute(select(buses).where(buses.c.id == bus_id))
                    .mappings()
                    .first()
                )
        except SQLAlchemyError as exc:
            logger.error("Error reading bus %s: %s", bus_id, exc)
            raise SourceError(str(exc)) from exc

        if row is None:
            raise BusNotFoundError(bus_id)
        return _row_to_bus(row)

    def update(self, bus: Bus) -> None:
        params = _bus_to_params(bus)
        statement = (
            update(buses)
            .where(buses.c.id == bus.id)
            .values(
                latitude=params["latitude"],
                longitude=params["longitude"],
                updated_at=params["updated_at"],
            )
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
        except SQLAlchemyError as exc:
            logger.error("Error updating bus %s: %s", bus.id, exc)
            raise SourceError(str(exc)) from exc

        self._check_single_row(result.rowcount, bus.id, "updated")

    def delete(self, bus_id: str) -> None:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(buses).where(buses.c.id == bus_id))
        except SQLAlchemyError as exc:
            logger.error("Error deleting bus %s: %s", bus_id, exc)
            raise SourceError(str(exc)) from exc

        self._check_single_row(result.rowcount, bus_id, "deleted")

    def close(self) -> None:
        """Dispose of the engine's connection pool once."""
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()

    @staticmethod
    def _check_single_row(rowcount: int, bus_id: str, action: str) -> None:
        if rowcount == 0:
            raise BusNotFoundError(bus_id)
        if rowcount > 1:
            logger.error("%d rows %s for bus %s, expected 1", rowcount, action, bus_id)
            raise SourceError(f"{rowcount} rows {action} for bus {bus_id}")
