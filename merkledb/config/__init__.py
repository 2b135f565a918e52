"""
Runtime Configuration Module

Provides configuration loading and logging setup for merkledb.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    StoreConfig,
    LoggingConfig,
    get_default_config,
    set_default_config,
)
from .logs import setup_logging, setup_logging_from_config

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "StoreConfig",
    "LoggingConfig",
    "get_default_config",
    "set_default_config",
    "setup_logging",
    "setup_logging_from_config",
]
