"""
Logging configuration for the ShuttleTrack server.

Every record goes to stdout in one pipe-separated format. Levels are
derived from Settings: ``debug`` turns on DEBUG for our own modules and
echoes the SQL sent to the bus database, otherwise ``log_level`` applies
and SQLAlchemy stays quiet.

Logging must not change program behavior.
Never logs request bodies or database passwords.
"""

import logging
import sys

from shuttletrack.core.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers whose level follows the debug flag.
SQL_LOGGER = "sqlalchemy.engine"
ACCESS_LOGGER = "uvicorn.access"


def configure_logging(settings: Settings) -> None:
    """Configure process-wide logging from the application settings.

    Args:
        settings: Settings providing ``debug`` and ``log_level``.
    """
    level = getattr(logging, settings.effective_log_level().upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Requests are logged by RequestLoggingMiddleware
    logging.getLogger(ACCESS_LOGGER).setLevel(logging.WARNING)
    logging.getLogger(SQL_LOGGER).setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
