"""
Test fixtures package for merkledb tests.

Usage:
    from fixtures import make_leaf_value, fold_default_root

    def test_something():
        value = make_leaf_value(7)
"""

from .common import (
    make_leaf_value,
    fold_default_root,
    fold_path,
    YieldingStore,
    FailingBatchStore,
    BlockingBatchStore,
    PausingSQLiteStore,
)

__all__ = [
    "make_leaf_value",
    "fold_default_root",
    "fold_path",
    "YieldingStore",
    "FailingBatchStore",
    "BlockingBatchStore",
    "PausingSQLiteStore",
]
