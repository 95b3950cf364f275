"""Logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Client libraries are noisy at DEBUG
NOISY_LOGGERS = ("kubernetes", "urllib3")


def setup_logging(level: str = "INFO", verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure root logging for the CLI.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        verbose: Include source line numbers and keep client library debug output
        log_file: Also write logs to this file (optional)
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, "_component_pruner", True)

    # Replace only handlers installed by a previous call
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_component_pruner", False):
            root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(numeric_level)

    if not verbose:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
