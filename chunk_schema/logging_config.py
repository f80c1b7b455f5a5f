"""Logging setup for the chunk-schema command line tool.

Library code only creates loggers; handlers are installed here, once,
by the CLI entry point.
"""

import logging
import sys

from rich.logging import RichHandler

_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"


def _handler() -> logging.Handler:
    # Captured output under pytest must not contain terminal escape codes.
    if "pytest" in sys.modules:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT, datefmt="%H:%M:%S"))
        return handler
    return RichHandler(rich_tracebacks=True, markup=False, show_path=False)


def setup_logging(level: int = logging.INFO) -> None:
    """Route chunk_schema log records to the console at `level`.

    Replaces any handlers installed by an earlier call.
    """
    # RichHandler renders time and level itself; only the message is formatted.
    logging.basicConfig(level=level, format="%(message)s", handlers=[_handler()], force=True)


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. get_logger(__name__)."""
    return logging.getLogger(name)
