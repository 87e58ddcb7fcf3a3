"""Sharded concurrent map.

This module provides the shared key/value substrate used by the object
table, the collection index, and the collaborator stores. Keys hash to
one of several shards, each guarded by its own lock, so writers on
unrelated keys do not contend on a single global mutex.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Iterator, TypeVar

from core.constants import DEFAULT_SHARD_COUNT

V = TypeVar("V")

_MISSING = object()


class ConcurrentMap(Generic[V]):
    """Thread-safe string-keyed map split into independently locked shards."""

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT) -> None:
        if shard_count < 1:
            raise ValueError(f"shard_count must be positive, got {shard_count}")
        self._shards: tuple[dict[str, V], ...] = tuple({} for _ in range(shard_count))
        self._locks = tuple(threading.Lock() for _ in range(shard_count))

    def get(self, key: str, default: V | None = None) -> V | None:
        """Return the stored value or ``default``."""
        index = self._shard_index(key)
        with self._locks[index]:
            return self._shards[index].get(key, default)

    def contains(self, key: str) -> bool:
        """Return whether a key is present."""
        index = self._shard_index(key)
        with self._locks[index]:
            return key in self._shards[index]

    def put(self, key: str, value: V) -> None:
        """Store a value, replacing any previous one."""
        index = self._shard_index(key)
        with self._locks[index]:
            self._shards[index][key] = value

    def remove(self, key: str) -> V | None:
        """Delete a key and return its previous value, or None when absent."""
        index = self._shard_index(key)
        with self._locks[index]:
            return self._shards[index].pop(key, None)

    def load_or_store(self, key: str, factory: Callable[[], V]) -> tuple[V, bool]:
        """Return the existing value, or store and return a new one.

        The factory runs under the shard lock, so at most one caller
        creates the value for a given key.

        Args:
            key: Map key.
            factory: Zero-argument builder for the new value.

        Returns:
            Pair of the resident value and whether it already existed.
        """
        index = self._shard_index(key)
        with self._locks[index]:
            shard = self._shards[index]
            existing = shard.get(key, _MISSING)
            if existing is not _MISSING:
                return existing, True
            value = factory()
            shard[key] = value
            return value, False

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """Return a sorted snapshot of keys starting with ``prefix``."""
        matches: list[str] = []
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                matches.extend(key for key in shard if key.startswith(prefix))
        return sorted(matches)

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys_with_prefix(""))

    def _shard_index(self, key: str) -> int:
        return hash(key) % len(self._shards)


class KeyedLocks:
    """Lazily created re-entrant locks, one per key."""

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT) -> None:
        self._locks: ConcurrentMap[threading.RLock] = ConcurrentMap(shard_count)

    def lock_for(self, key: str) -> threading.RLock:
        """Return the lock dedicated to ``key``."""
        lock, _ = self._locks.load_or_store(key, threading.RLock)
        return lock

    def __len__(self) -> int:
        return len(self._locks)
