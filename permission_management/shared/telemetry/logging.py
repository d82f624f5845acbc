"""Logging configuration for permission management."""

import logging
import sys

from permission_management.core.config import get_settings

# Third-party loggers that are chatty at DEBUG (SQL echo, redis connection pool).
_QUIET_LOGGERS = ("sqlalchemy.engine", "redis", "aiosqlite")


def setup_logging(level: int | None = None) -> None:
    """Configure process-wide logging once at startup.

    Level defaults to DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Third-party loggers stay at WARNING unless the
    database echo setting asks for SQL output.

    Args:
        level: Optional explicit level overriding the settings-derived one.
    """
    settings = get_settings()
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        if name == "sqlalchemy.engine" and settings.database_echo:
            continue
        logging.getLogger(name).setLevel(logging.WARNING)
