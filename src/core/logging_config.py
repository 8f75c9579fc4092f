"""Logging configuration.

This module configures the root logger once for the whole application.
"""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the application.

    Calling this more than once is a no-op.

    Args:
        level: Logging level name, e.g. "INFO" or "DEBUG".
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )
    # SQLAlchemy echoes every statement at INFO when its logger inherits root
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
