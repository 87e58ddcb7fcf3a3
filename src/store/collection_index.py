"""Per-collection membership index.

This module keeps, for every collection IRI, an insertion ordered
mapping of member IRI to member item. Each collection has its own
re-entrant lock; callers hold it while they mutate membership and
re-persist the collection entity so the count stays in step.
"""

from __future__ import annotations

import threading
from typing import Iterable

from core.constants import DEFAULT_SHARD_COUNT
from core.errors import FedNotFoundError
from core.types import Item
from store.concurrent_map import ConcurrentMap, KeyedLocks


class CollectionIndex:
    """Membership mappings keyed by collection IRI."""

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT) -> None:
        self._indexes: ConcurrentMap[dict[str, Item]] = ConcurrentMap(shard_count)
        self._locks = KeyedLocks(shard_count)

    def lock_for(self, collection_iri: str) -> threading.RLock:
        """Return the lock serializing mutations of one collection."""
        return self._locks.lock_for(collection_iri)

    def ensure(self, collection_iri: str) -> bool:
        """Create an empty membership index unless one exists.

        Returns:
            True when a new index was created.
        """
        _, existed = self._indexes.load_or_store(collection_iri, dict)
        return not existed

    def exists(self, collection_iri: str) -> bool:
        """Return whether a membership index exists for the collection."""
        return self._indexes.contains(collection_iri)

    def drop(self, collection_iri: str) -> None:
        """Discard a collection's membership index."""
        with self.lock_for(collection_iri):
            self._indexes.remove(collection_iri)

    def replace(self, collection_iri: str, items: Iterable[Item]) -> int:
        """Swap a collection's membership for ``items``, creating the index if needed.

        Duplicate member IRIs keep their first position and last value.

        Returns:
            The new member count.
        """
        members: dict[str, Item] = {}
        for item in items:
            members[item.id] = item
        with self.lock_for(collection_iri):
            self._indexes.put(collection_iri, members)
        return len(members)

    def add(self, collection_iri: str, item: Item) -> bool:
        """Upsert one member, keeping its original position on re-add.

        Returns:
            True when the member IRI was not present before.

        Raises:
            FedNotFoundError: If the collection has no index.
        """
        with self.lock_for(collection_iri):
            members = self._members_of(collection_iri)
            is_new = item.id not in members
            members[item.id] = item
            return is_new

    def remove(self, collection_iri: str, member_iri: str) -> bool:
        """Drop one member IRI.

        Returns:
            True when the member was present.

        Raises:
            FedNotFoundError: If the collection has no index.
        """
        with self.lock_for(collection_iri):
            members = self._members_of(collection_iri)
            return members.pop(member_iri, None) is not None

    def size(self, collection_iri: str) -> int:
        """Return the member count of a collection."""
        with self.lock_for(collection_iri):
            return len(self._members_of(collection_iri))

    def members(self, collection_iri: str) -> list[Item]:
        """Return an ordered snapshot of member items."""
        with self.lock_for(collection_iri):
            return list(self._members_of(collection_iri).values())

    def _members_of(self, collection_iri: str) -> dict[str, Item]:
        members = self._indexes.get(collection_iri)
        if members is None:
            raise FedNotFoundError(
                f"Unable to find membership index for collection {collection_iri}. "
                "Save or create the collection before adding members."
            )
        return members
