"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> None:
    """Attach handlers to the ``asciicube`` logger.

    The animated view owns the terminal, so records only go to ``log_file``;
    without one they are dropped.
    """
    root = logging.getLogger("asciicube")
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
    else:
        root.addHandler(logging.NullHandler())
    root.propagate = False
