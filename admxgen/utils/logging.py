"""
Project-wide logging setup for admxgen.

Provides a simple, consistent console logger with optional JSON output.
Controlled via environment variables:
- ADMXGEN_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: WARNING)
- ADMXGEN_LOG_FORMAT: text|json (default: text)
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger


def _get_level(default: str = "WARNING") -> int:
    level = os.getenv("ADMXGEN_LOG_LEVEL", default).upper()
    return getattr(logging, level, logging.WARNING)


def setup_logging(
    force: bool = False,
    *,
    level: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Configure root logging for console output.

    If a handler is already present and force is False, this is a no-op.
    An explicit ``level`` (e.g. from --verbose) wins over ADMXGEN_LOG_LEVEL.
    """
    target_logger = logger or logging.getLogger()
    if target_logger.handlers and not force:
        return

    if force:
        for h in list(target_logger.handlers):
            target_logger.removeHandler(h)

    target_logger.setLevel(level if level is not None else _get_level())

    # stderr keeps generated-build output on stdout clean
    handler = logging.StreamHandler()

    fmt = os.getenv("ADMXGEN_LOG_FORMAT", "text").lower()
    if fmt == "json":
        formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    handler.setFormatter(formatter)
    target_logger.addHandler(handler)
