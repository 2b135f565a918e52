"""
Logging Setup

Configures stdlib logging for applications embedding the tree engine.
Library modules only create loggers; handlers are installed here.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .runtime import LoggingConfig


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(level: Optional[str]) -> int:
    """Map a level name to a logging level, defaulting to INFO."""
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure root logging handlers."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def setup_logging_from_config(config: "LoggingConfig") -> None:
    setup_logging(config.level, config.file)
