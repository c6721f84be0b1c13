"""Logging and timing helpers for the admin table.

Run with adminui-debug to get DEBUG output on the console; the plain
adminui entry point only reports warnings and errors.

Usage:
    from ..utils.debug_trace import logger, perf_timer

    logger.debug("Starting operation")

    with perf_timer("search", row_count=len(records)):
        matches = search(records, query)
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager

# Package logger; modules log through this or a child of it
logger = logging.getLogger("adminui")

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def setup_debug_logging(debug: bool = False) -> None:
    """Configure console logging for the package logger.

    Call this once at startup. Calling it again only changes the level.

    Args:
        debug: If True, log DEBUG and above; otherwise WARNING and above.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    # Windowed launches may have no stdout
    stream = sys.stdout if sys.stdout is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)


@contextmanager
def perf_timer(operation: str, row_count: int | None = None):
    """Time a block and log the duration at DEBUG level.

    Args:
        operation: Name of the operation being timed
        row_count: Optional row count for context
    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        if row_count is not None:
            logger.debug(f"PERF: {operation} ({row_count} rows) took {elapsed_ms:.2f}ms")
        else:
            logger.debug(f"PERF: {operation} took {elapsed_ms:.2f}ms")
