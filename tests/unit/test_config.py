"""
Runtime Configuration Unit Tests
Tests for merkledb/config/
"""
import logging

import pytest

from merkledb.config import (
    RuntimeConfig,
    TreeConfig,
    StoreConfig,
    LoggingConfig,
    get_default_config,
    set_default_config,
    setup_logging,
)
from merkledb.config.logs import LOG_FORMAT, resolve_log_level


class TestDefaults:

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.tree == TreeConfig(name="main", depth=32)
        assert config.store == StoreConfig(backend="memory", path=None)
        assert config.logging == LoggingConfig(level="INFO", file=None)


class TestFromDict:

    def test_partial_dict(self):
        config = RuntimeConfig.from_dict({"tree": {"depth": 16}})

        assert config.tree.depth == 16
        assert config.tree.name == "main"
        assert config.store.backend == "memory"

    def test_full_dict_round_trip(self):
        data = {
            "tree": {"name": "accounts", "depth": 20},
            "store": {"backend": "sqlite", "path": "/tmp/trees.db"},
            "logging": {"level": "DEBUG", "file": None},
            "extra": {"owner": "ops"},
        }
        assert RuntimeConfig.from_dict(data).to_dict() == data

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"tree": {"height": 3}})


class TestFromEnv:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MERKLEDB_TREE_NAME", "ledger")
        monkeypatch.setenv("MERKLEDB_TREE_DEPTH", "24")
        monkeypatch.setenv("MERKLEDB_STORE_BACKEND", "sqlite")
        monkeypatch.setenv("MERKLEDB_STORE_PATH", "/var/lib/ledger.db")
        monkeypatch.setenv("MERKLEDB_LOG_LEVEL", "DEBUG")

        config = RuntimeConfig.from_env()

        assert config.tree == TreeConfig(name="ledger", depth=24)
        assert config.store == StoreConfig(backend="sqlite", path="/var/lib/ledger.db")
        assert config.logging.level == "DEBUG"

    def test_bad_depth_env(self, monkeypatch):
        monkeypatch.setenv("MERKLEDB_TREE_DEPTH", "deep")
        with pytest.raises(ValueError, match="MERKLEDB_TREE_DEPTH"):
            RuntimeConfig.from_env()

    def test_with_env_overrides(self, monkeypatch):
        base = RuntimeConfig.from_dict({"tree": {"name": "file", "depth": 8}})
        monkeypatch.setenv("MERKLEDB_TREE_NAME", "env")

        config = base.with_env_overrides()

        assert config.tree.name == "env"
        assert config.tree.depth == 8
        assert base.tree.name == "file"

    def test_with_env_overrides_noop(self):
        base = RuntimeConfig()
        assert base.with_env_overrides() is base


class TestFromYaml:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "merkledb.yaml"
        path.write_text(
            "tree:\n"
            "  name: yaml-tree\n"
            "  depth: 12\n"
            "store:\n"
            "  backend: sqlite\n"
            "  path: ./data/trees.db\n"
        )

        config = RuntimeConfig.from_yaml(path)

        assert config.tree == TreeConfig(name="yaml-tree", depth=12)
        assert config.store.path == "./data/trees.db"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "nope.yaml")


class TestDefaultConfig:

    def test_cached(self):
        assert get_default_config() is get_default_config()

    def test_set_default(self):
        config = RuntimeConfig(tree=TreeConfig(name="custom"))
        set_default_config(config)
        assert get_default_config() is config


class TestLogging:

    @pytest.mark.parametrize("name, level", [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        (None, logging.INFO),
        ("nonsense", logging.INFO),
    ])
    def test_resolve_log_level(self, name, level):
        assert resolve_log_level(name) == level

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "merkledb.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("DEBUG", str(log_file))
            logging.getLogger("merkledb.test").debug("hello from test")
            for handler in root.handlers:
                handler.flush()
            assert root.level == logging.DEBUG
            assert "[DEBUG] merkledb.test: hello from test" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_log_format(self):
        assert LOG_FORMAT == "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
