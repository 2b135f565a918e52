"""
Runtime Configuration

Central configuration for tree naming, store backend selection and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "MERKLEDB_"


@dataclass
class TreeConfig:
    """Configuration for the tree to open."""
    name: str = "main"
    depth: int = 32


@dataclass
class StoreConfig:
    """Configuration for the key-value store backend."""
    backend: str = "memory"  # "memory" or "sqlite"
    path: Optional[str] = None


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLEDB_TREE_NAME: Tree name (metadata key)
        - MERKLEDB_TREE_DEPTH: Depth for newly created trees
        - MERKLEDB_STORE_BACKEND: Store backend (memory, sqlite)
        - MERKLEDB_STORE_PATH: Database file for the sqlite backend
        - MERKLEDB_LOG_LEVEL: Log level (default: INFO)
        - MERKLEDB_LOG_FILE: Optional log file
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv(f"{ENV_PREFIX}TREE_NAME"):
            overrides.setdefault("tree", {})["name"] = os.getenv(f"{ENV_PREFIX}TREE_NAME")
        if os.getenv(f"{ENV_PREFIX}TREE_DEPTH"):
            try:
                overrides.setdefault("tree", {})["depth"] = int(os.getenv(f"{ENV_PREFIX}TREE_DEPTH", ""))
            except ValueError as e:
                raise ValueError(
                    f"{ENV_PREFIX}TREE_DEPTH must be an integer, "
                    f"got {os.getenv(f'{ENV_PREFIX}TREE_DEPTH')!r}"
                ) from e

        # Store settings
        if os.getenv(f"{ENV_PREFIX}STORE_BACKEND"):
            overrides.setdefault("store", {})["backend"] = os.getenv(f"{ENV_PREFIX}STORE_BACKEND")
        if os.getenv(f"{ENV_PREFIX}STORE_PATH"):
            overrides.setdefault("store", {})["path"] = os.getenv(f"{ENV_PREFIX}STORE_PATH")

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        store_data = data.get("store", {})
        logging_data = data.get("logging", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        store = StoreConfig(**store_data) if store_data else StoreConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            tree=tree,
            store=store,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("tree", "store", "logging"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "name": self.tree.name,
                "depth": self.tree.depth,
            },
            "store": {
                "backend": self.store.backend,
                "path": self.store.path,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
