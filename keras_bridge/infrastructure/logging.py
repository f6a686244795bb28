"""
Logging setup for the CLI and scripts.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
application decides where records go by calling :func:`setup_logging`.
"""

import logging
import sys
from typing import IO, Optional

from ..config import get_config

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Framework loggers that are chatty at INFO
QUIET_LOGGERS = ("absl", "h5py", "matplotlib", "tensorflow")


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route log records to a single stream handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR); defaults to the
            configured ``log_level``
        format_string: Custom format string (uses DEFAULT_FORMAT if None)
        stream: Output stream (stdout by default)
    """
    if level is None:
        level = get_config().log_level

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stdout)],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.root.level))
