"""Opaque per-IRI metadata store."""

from __future__ import annotations

import copy
from typing import Any

from core.constants import METADATA_PATH
from core.errors import FedNotFoundError
from core.iri import add_path
from store.concurrent_map import ConcurrentMap


class MetadataStore:
    """Metadata persistence; values are deep-copied in and out."""

    def __init__(self, substrate: ConcurrentMap[Any]) -> None:
        self._map = substrate

    def save_metadata(self, iri: str, value: Any) -> None:
        """Store a metadata value for an IRI, replacing any previous one."""
        self._map.put(add_path(iri, METADATA_PATH), _Envelope(copy.deepcopy(value)))

    def load_metadata(self, iri: str) -> Any:
        """Return a copy of the metadata value stored for an IRI.

        Raises:
            FedNotFoundError: If no metadata is stored for the IRI.
        """
        envelope = self._map.get(add_path(iri, METADATA_PATH))
        if envelope is None:
            raise FedNotFoundError(f"Unable to find metadata for iri {iri}.")
        return copy.deepcopy(envelope.value)


class _Envelope:
    """Wrapper so a stored ``None`` value is distinguishable from absence."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value
