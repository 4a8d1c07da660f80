"""Logging for seoinstruct.

Every module logs through a child of the ``seoinstruct`` logger, so one call
to :func:`configure_logging` (made by the CLI and the web entry point) sets
the level and the sinks for the whole package.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

ROOT = "seoinstruct"

# Console lines stay short; the file keeps timestamps and the module name.
CONSOLE_FORMAT = "seoinstruct %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT)
    return logging.getLogger(f"{ROOT}.{name}")


def _handler(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(*, verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Route package records to stderr and, optionally, ``log_file``.

    The package logger does not propagate: a host application that embeds
    the Flask app keeps its own root handlers, and our debug output is not
    printed twice. Existing handlers are replaced on every call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    package_logger = logging.getLogger(ROOT)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    package_logger.addHandler(_handler(logging.StreamHandler(), CONSOLE_FORMAT, level))
    if log_file is not None:
        package_logger.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT, level))
    return package_logger
