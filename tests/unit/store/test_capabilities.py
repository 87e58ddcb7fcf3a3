"""Unit tests for the storage capability descriptor."""

from __future__ import annotations

from typing import Any

import pytest

from core.errors import FedUnsupportedError
from store.capabilities import StorageCapabilities, resolve_capabilities
from store.concurrent_map import ConcurrentMap
from store.metadata_store import MetadataStore


class _MetadataOnly:
    def __init__(self) -> None:
        self.metadata_store = MetadataStore(ConcurrentMap[Any](2))


def test_resolve_capabilities_detects_present_stores() -> None:
    """Only attached collaborator stores should be reported."""
    capabilities = resolve_capabilities(_MetadataOnly())

    assert capabilities.metadata
    assert not capabilities.keys
    assert not capabilities.oauth
    assert not capabilities.client_admin


def test_require_raises_for_missing_capability() -> None:
    """require should raise for disabled capabilities."""
    with pytest.raises(FedUnsupportedError):
        StorageCapabilities(keys=True).require("passwords")


def test_require_passes_for_present_capability() -> None:
    """require should return quietly for enabled capabilities."""
    StorageCapabilities(keys=True).require("keys")

    assert StorageCapabilities(keys=True).supports("keys")
    assert not StorageCapabilities().supports("unknown")
