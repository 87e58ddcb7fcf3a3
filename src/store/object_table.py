"""IRI keyed object table.

This module is the base storage substrate for items. It shares its
concurrent map with the collaborator stores, so every read checks that
the stored value really is an item before handing it back.
"""

from __future__ import annotations

from typing import Any, Callable

from core.errors import FedNotFoundError, FedTypeMismatchError
from core.iri import validate_key_iri
from core.types import Item, is_item
from store.concurrent_map import ConcurrentMap


class ObjectTable:
    """Concurrent IRI to item mapping with last-write-wins upserts."""

    def __init__(self, substrate: ConcurrentMap[Any]) -> None:
        self._map = substrate

    def put(self, iri: str, item: Item) -> None:
        """Upsert an item under its IRI."""
        self._map.put(validate_key_iri(iri), item)

    def get(self, iri: str) -> Item:
        """Fetch an item by IRI.

        Args:
            iri: Item IRI.

        Returns:
            Stored item.

        Raises:
            FedNotFoundError: If no value is stored under the IRI.
            FedTypeMismatchError: If the stored value is not an item.
        """
        value = self._map.get(iri)
        if value is None:
            raise FedNotFoundError(f"Unable to find {iri}.")
        if not is_item(value):
            raise FedTypeMismatchError(
                f"Invalid value type in storage for {iri}: {type(value).__name__} is not an item."
            )
        return value

    def find(self, iri: str) -> Item | None:
        """Return the stored item, or None when absent or not an item."""
        value = self._map.get(iri)
        return value if is_item(value) else None

    def contains(self, iri: str) -> bool:
        """Return whether any value is stored under the IRI."""
        return self._map.contains(iri)

    def remove(self, iri: str) -> None:
        """Delete the entry; absent keys are ignored."""
        self._map.remove(iri)

    def get_or_create(self, iri: str, factory: Callable[[], Item]) -> tuple[Item, bool]:
        """Atomically return the resident item or store a new one.

        Returns:
            Pair of resident value and whether it existed before the call.
        """
        return self._map.load_or_store(validate_key_iri(iri), factory)
