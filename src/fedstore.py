"""Public SDK surface for fedstore.

This module provides a stable import path for store users.
It re-exports the store facade, item models, and query checks.
"""

from __future__ import annotations

from core.config import FedStoreConfig
from core.errors import (
    FedConfigError,
    FedError,
    FedInternalError,
    FedInvalidArgumentError,
    FedNotFoundError,
    FedTypeMismatchError,
    FedUnauthorizedError,
    FedUnsupportedError,
)
from core.logging_config import configure_logging
from core.oauth_types import AccessData, AuthorizeData, OAuthClient
from core.types import (
    Activity,
    Actor,
    Collection,
    Item,
    ItemKind,
    Link,
    Object,
    PublicKey,
    on_activity,
    on_actor,
    on_collection,
    on_link,
    on_object,
)
from query.checks import (
    after,
    all_of,
    any_of,
    attributed_to,
    before,
    has_type,
    object_matches,
    same_id,
    with_max_count,
)
from seed.generator import GeneratorContext, random_item, random_items, root_actor
from store.capabilities import StorageCapabilities
from store.memory_storage import MemoryStorage

__all__ = [
    "AccessData",
    "Activity",
    "Actor",
    "AuthorizeData",
    "Collection",
    "FedConfigError",
    "FedError",
    "FedInternalError",
    "FedInvalidArgumentError",
    "FedNotFoundError",
    "FedStoreConfig",
    "FedTypeMismatchError",
    "FedUnauthorizedError",
    "FedUnsupportedError",
    "GeneratorContext",
    "Item",
    "ItemKind",
    "Link",
    "MemoryStorage",
    "OAuthClient",
    "Object",
    "PublicKey",
    "StorageCapabilities",
    "after",
    "all_of",
    "any_of",
    "attributed_to",
    "before",
    "configure_logging",
    "has_type",
    "object_matches",
    "on_activity",
    "on_actor",
    "on_collection",
    "on_link",
    "on_object",
    "random_item",
    "random_items",
    "root_actor",
    "same_id",
    "with_max_count",
]
