"""Pytest configuration and shared fixtures for fedstore test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture()
def fed_config() -> Any:
    """Config with every collaborator store and a small shard count."""
    from core.config import FedStoreConfig

    return FedStoreConfig(shard_count=8, log_level="WARNING")


@pytest.fixture()
def seeded_storage(fed_config: Any) -> Any:
    """Store holding the root actor and its materialized collections."""
    from seed.generator import root_actor
    from store.memory_storage import MemoryStorage

    storage = MemoryStorage(fed_config)
    storage.save(root_actor())
    return storage
