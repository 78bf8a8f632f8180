"""
Infrastructure adapters for the fleet bounded context.

Each adapter implements the BusSource port and connects
to one storage engine: an in-memory table or a relational database.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine

from shuttletrack.domain.fleet.ports import BusSource
from shuttletrack.infrastructure.fleet.memory_source import MemoryBusSource
from shuttletrack.infrastructure.fleet.sql_source import SqlBusSource

logger = logging.getLogger(__name__)

__all__ = ["MemoryBusSource", "SqlBusSource", "build_source"]


def build_source(database_url: Optional[str]) -> BusSource:
    """Build the storage backend selected by a database URL.

    Args:
        database_url: SQLAlchemy URL. Empty or None selects the in-memory source.

    Returns:
        A ready-to-use BusSource.
    """
    if not database_url:
        logger.info("No database URL configured, using in-memory storage.")
        return MemoryBusSource()

    engine = create_engine(database_url, pool_pre_ping=True)
    logger.info("Using relational storage: %s", engine.url.render_as_string(hide_password=True))
    return SqlBusSource(engine)
