"""Owned sub-collection materialization.

This module creates the collections an item declares (inbox, outbox,
followers, replies, likes, ...) plus the hidden per-actor collections
the first time the item is saved. Creation is get-or-create: a
collection that already exists is never replaced.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.constants import DEFAULT_HIDDEN_COLLECTIONS, ORDERED_COLLECTION_TYPE, PUBLIC_NS
from core.errors import FedError, FedInternalError
from core.iri import add_path, validate_key_iri
from core.logging_config import get_logger
from core.types import Collection, Item, ItemKind, declared_collections
from store.collection_index import CollectionIndex
from store.object_table import ObjectTable

_LOGGER = get_logger(__name__)


class CollectionMaterializer:
    """Get-or-create owned collections for newly stored items."""

    def __init__(
        self,
        table: ObjectTable,
        index: CollectionIndex,
        hidden_collections: tuple[str, ...] = DEFAULT_HIDDEN_COLLECTIONS,
    ) -> None:
        self._table = table
        self._index = index
        self._hidden_collections = hidden_collections

    def collection_targets(self, item: Item) -> tuple[str, ...]:
        """Return every collection IRI the item owns, declared or hidden.

        Args:
            item: Item about to be stored for the first time.

        Returns:
            Ordered, de-duplicated collection IRIs.
        """
        targets = list(declared_collections(item).values())
        if item.kind is ItemKind.ACTOR:
            targets.extend(add_path(item.id, suffix) for suffix in self._hidden_collections)
        return tuple(dict.fromkeys(targets))

    def materialize(self, item: Item) -> tuple[str, ...]:
        """Ensure the item's owned collections exist.

        Args:
            item: Item about to be stored for the first time.

        Returns:
            IRIs of the collections created by this call.

        Raises:
            FedInternalError: If any owned collection cannot be created.
        """
        created: list[str] = []
        try:
            for collection_iri in self.collection_targets(item):
                if self._get_or_create(collection_iri, item.id):
                    created.append(collection_iri)
        except FedError as error:
            raise FedInternalError(
                f"Could not create collections owned by {item.id}: {error}"
            ) from error
        if created:
            _LOGGER.info("collections_materialized", owner=item.id, collections=created)
        return tuple(created)

    def _get_or_create(self, collection_iri: str, owner_iri: str) -> bool:
        validate_key_iri(collection_iri)
        index_created = self._index.ensure(collection_iri)
        resident, existed = self._table.get_or_create(
            collection_iri,
            lambda: new_collection(collection_iri, owner_iri),
        )
        if existed and getattr(resident, "kind", None) is not ItemKind.COLLECTION:
            if index_created:
                self._index.drop(collection_iri)
            _LOGGER.warning(
                "collection_path_occupied",
                collection=collection_iri,
                owner=owner_iri,
                resident_type=type(resident).__name__,
            )
            return False
        return not existed


def new_collection(collection_iri: str, owner_iri: str | None) -> Collection:
    """Build an empty ordered collection owned by ``owner_iri``."""
    return Collection(
        id=collection_iri,
        type=ORDERED_COLLECTION_TYPE,
        attributed_to=owner_iri,
        cc=(PUBLIC_NS,),
        published=datetime.now(timezone.utc).replace(microsecond=0),
    )
