"""In-memory ActivityPub object store.

This module exposes the collection-aware CRUD surface: load with
filters, save with first-time collection materialization, delete, and
collection membership mutation. Collaborator stores (keys, passwords,
metadata, OAuth2) share the same concurrent map and are advertised
through a capability descriptor resolved at construction.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from core.config import FedStoreConfig
from core.constants import STORE_KEYS, STORE_METADATA, STORE_OAUTH, STORE_PASSWORDS
from core.errors import FedError, FedInvalidArgumentError, FedNotFoundError
from core.iri import split_query, validate_iri, validate_key_iri
from core.logging_config import get_logger
from core.types import Collection, Item, ItemKind, is_item, on_collection
from query.checks import Check
from query.cursor import parse_cursor_iri
from query.pipeline import evaluate_collection
from store.capabilities import StorageCapabilities, resolve_capabilities
from store.collection_index import CollectionIndex
from store.collection_materializer import CollectionMaterializer
from store.concurrent_map import ConcurrentMap
from store.key_store import KeyStore
from store.metadata_store import MetadataStore
from store.oauth_store import OAuthStore
from store.object_table import ObjectTable
from store.password_store import PasswordStore

_LOGGER = get_logger(__name__)


class MemoryStorage:
    """Reference in-memory store for federated activity items.

    Attributes:
        key_store: Key pair store, or None when disabled.
        password_store: Password store, or None when disabled.
        metadata_store: Metadata store, or None when disabled.
        oauth_store: OAuth2 store, or None when disabled.
        capabilities: Capability descriptor resolved at construction.
    """

    def __init__(self, config: FedStoreConfig | None = None) -> None:
        """Create an empty store.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or FedStoreConfig.from_env()
        self._substrate: ConcurrentMap[Any] = ConcurrentMap(self._config.shard_count)
        self._table = ObjectTable(self._substrate)
        self._index = CollectionIndex(self._config.shard_count)
        self._materializer = CollectionMaterializer(
            self._table, self._index, self._config.hidden_collections
        )
        enabled = set(self._config.enabled_stores)
        self.key_store = KeyStore(self._substrate) if STORE_KEYS in enabled else None
        self.password_store = (
            PasswordStore(self._substrate) if STORE_PASSWORDS in enabled else None
        )
        self.metadata_store = (
            MetadataStore(self._substrate) if STORE_METADATA in enabled else None
        )
        self.oauth_store = OAuthStore(self._substrate) if STORE_OAUTH in enabled else None
        self.capabilities: StorageCapabilities = resolve_capabilities(self)

    def load(self, iri: str, *checks: Check) -> Item:
        """Load an item, running checks when it is a collection.

        Stored keys never carry a query, so an IRI with a cursor query is
        decoded and its checks run ahead of the explicit ones.

        Args:
            iri: Item IRI, optionally with a cursor query.
            checks: Filters and pagination checks; ignored for
                non-collection items.

        Returns:
            The stored item, or a filtered collection or collection page.

        Raises:
            FedNotFoundError: If nothing is stored under the IRI.
            FedTypeMismatchError: If the stored value is not an item.
            FedInvalidArgumentError: If the cursor query is malformed.
        """
        validate_iri(iri)
        if split_query(iri).query:
            iri, cursor_checks = parse_cursor_iri(iri)
            checks = cursor_checks + checks
        item = self._table.get(iri)
        if item.kind is not ItemKind.COLLECTION:
            return item
        collection = self._materialized_collection(iri)
        return evaluate_collection(collection, checks, self._table.find)

    def save(self, item: Item) -> Item:
        """Upsert an item, materializing owned collections on first save.

        Args:
            item: Item carrying its own IRI.

        Returns:
            The same item, unchanged.

        Raises:
            FedInvalidArgumentError: If the item is empty, has no IRI, or
                its IRI carries a query.
            FedInternalError: If owned collections cannot be created; the
                item itself is not stored in that case.
        """
        _validate_item(item)
        if not self._table.contains(item.id):
            self._materializer.materialize(item)
        if item.kind is ItemKind.COLLECTION:
            self._save_collection(item)
        else:
            self._table.put(item.id, item)
        _LOGGER.debug("item_saved", iri=item.id, type=item.type)
        return item

    def create(self, collection: Collection) -> Collection:
        """Store a collection with its membership index.

        Raises:
            FedTypeMismatchError: If the item is not a collection.
        """
        _validate_item(collection)
        return on_collection(collection, self.save)

    def delete(self, item: Item) -> None:
        """Remove an item's object table entry.

        Other collections that list the item keep their membership; a
        deleted collection loses its own membership index.

        Raises:
            FedInvalidArgumentError: If the item is empty or has no IRI.
        """
        _validate_item(item)
        if item.kind is ItemKind.COLLECTION or self._index.exists(item.id):
            with self._index.lock_for(item.id):
                self._table.remove(item.id)
                if self._index.exists(item.id):
                    self._index.drop(item.id)
        else:
            self._table.remove(item.id)
        _LOGGER.debug("item_deleted", iri=item.id)

    def add_to(self, collection_iri: str, *items: Item) -> None:
        """Add items to a collection.

        Items are upserted into the object table and the membership
        index; re-adding a member leaves the count unchanged.

        Args:
            collection_iri: Target collection IRI.
            items: Items to add.

        Raises:
            FedNotFoundError: If the collection or its index is absent;
                nothing is changed in that case.
            FedTypeMismatchError: If the IRI names a non-collection.
            FedError: The first per-item failure, raised after every
                other item has been attempted.
        """
        self._load_collection(collection_iri)
        first_error: FedError | None = None
        accepted: list[Item] = []
        for item in items:
            try:
                accepted.append(self.save(item))
            except FedError as error:
                first_error = first_error or error
        with self._index.lock_for(collection_iri):
            collection = self._load_collection(collection_iri)
            added = sum(1 for item in accepted if self._index.add(collection_iri, item))
            total = self._persist_count(collection)
        _LOGGER.info(
            "collection_members_added",
            collection=collection_iri,
            requested=len(items),
            added=added,
            total_items=total,
        )
        if first_error is not None:
            raise first_error

    def remove_from(self, collection_iri: str, *items: Item | str) -> None:
        """Remove members from a collection by item or bare IRI.

        Raises:
            FedNotFoundError: If the collection or its index is absent.
            FedTypeMismatchError: If the IRI names a non-collection.
            FedInvalidArgumentError: For the first empty item, raised after
                every other item has been removed.
        """
        self._load_collection(collection_iri)
        first_error: FedError | None = None
        with self._index.lock_for(collection_iri):
            collection = self._load_collection(collection_iri)
            removed = 0
            for item in items:
                try:
                    member_iri = item if isinstance(item, str) else _validate_item(item).id
                    validate_iri(member_iri)
                except FedError as error:
                    first_error = first_error or error
                    continue
                if self._index.remove(collection_iri, member_iri):
                    removed += 1
            total = self._persist_count(collection)
        _LOGGER.info(
            "collection_members_removed",
            collection=collection_iri,
            requested=len(items),
            removed=removed,
            total_items=total,
        )
        if first_error is not None:
            raise first_error

    def _save_collection(self, collection: Collection) -> None:
        # Empty items is a field-only update and keeps the current membership.
        for member in collection.items:
            self.save(member)
        with self._index.lock_for(collection.id):
            if collection.items:
                self._index.replace(collection.id, collection.items)
            else:
                self._index.ensure(collection.id)
            self._persist_count(collection)

    def _persist_count(self, collection: Collection) -> int:
        total = self._index.size(collection.id)
        self._table.put(collection.id, replace(collection, items=(), total_items=total))
        return total

    def _load_collection(self, collection_iri: str) -> Collection:
        validate_iri(collection_iri)
        collection = on_collection(self._table.get(collection_iri), lambda found: found)
        if not self._index.exists(collection_iri):
            raise FedNotFoundError(
                f"Unable to find membership index for collection {collection_iri}."
            )
        return collection

    def _materialized_collection(self, collection_iri: str) -> Collection:
        self._load_collection(collection_iri)
        with self._index.lock_for(collection_iri):
            collection = self._load_collection(collection_iri)
            members = self._index.members(collection_iri)
        current = tuple(self._table.find(member.id) or member for member in members)
        return replace(collection, items=current, total_items=len(members))


def _validate_item(item: object) -> Item:
    if item is None:
        raise FedInvalidArgumentError("Unable to store an empty item.")
    if not is_item(item):
        raise FedInvalidArgumentError(
            f"Unable to store value of type {type(item).__name__}: expected an item."
        )
    validate_key_iri(item.id)
    return item
