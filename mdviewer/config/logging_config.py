"""
Logging Configuration

Sets up the root logger once for the whole process.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # httpx logs every request at INFO, which would include signed file URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)
