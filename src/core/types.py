"""Shared typed vocabulary models.

This module defines the immutable item variants stored by fedstore:
objects, actors, activities, links, and collections. Every variant
carries a ``kind`` discriminant so callers can dispatch without
probing attributes, and the ``on_*`` helpers run a callback only for
a matching variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, TypeVar, Union

from core.constants import (
    ACTOR_COLLECTION_FIELDS,
    COLLECTION_PAGE_TYPE,
    LINK_TYPE,
    NOTE_TYPE,
    OBJECT_COLLECTION_FIELDS,
    ORDERED_COLLECTION_PAGE_TYPE,
    ORDERED_COLLECTION_TYPE,
    ORDERED_COLLECTION_TYPES,
    PERSON_TYPE,
)
from core.errors import FedTypeMismatchError

T = TypeVar("T")


class ItemKind(str, Enum):
    """Discriminant for the closed set of item variants."""

    OBJECT = "object"
    ACTOR = "actor"
    ACTIVITY = "activity"
    LINK = "link"
    COLLECTION = "collection"


@dataclass(frozen=True)
class PublicKey:
    """Actor public key in PEM form.

    Attributes:
        id: Key IRI, conventionally ``<actor>#main``.
        owner: IRI of the owning actor.
        public_key_pem: PEM encoded SubjectPublicKeyInfo.
    """

    id: str
    owner: str
    public_key_pem: str


@dataclass(frozen=True)
class Object:
    """Base object variant and field set shared by object-based items.

    Attributes:
        id: Unique IRI of the item.
        type: Vocabulary type name, e.g. ``Note``.
        attributed_to: IRI of the owning actor or parent item.
        name: Optional display name.
        summary: Optional short summary.
        content: Optional content body.
        media_type: Optional MIME type of ``content``.
        published: Optional publication timestamp.
        url: Optional canonical URL.
        to: Primary audience IRIs.
        cc: Secondary audience IRIs.
        icon: Optional embedded icon item.
        replies: Optional replies collection IRI.
        likes: Optional likes collection IRI.
        shares: Optional shares collection IRI.
    """

    kind: ClassVar[ItemKind] = ItemKind.OBJECT

    id: str
    type: str = NOTE_TYPE
    attributed_to: str | None = None
    name: str | None = None
    summary: str | None = None
    content: str | None = None
    media_type: str | None = None
    published: datetime | None = None
    url: str | None = None
    to: tuple[str, ...] = ()
    cc: tuple[str, ...] = ()
    icon: Item | None = None
    replies: str | None = None
    likes: str | None = None
    shares: str | None = None

    @property
    def iri(self) -> str:
        """Return the item IRI."""
        return self.id


@dataclass(frozen=True)
class Actor(Object):
    """Actor variant with its declared inbox and social collections."""

    kind: ClassVar[ItemKind] = ItemKind.ACTOR

    type: str = PERSON_TYPE
    inbox: str | None = None
    outbox: str | None = None
    followers: str | None = None
    following: str | None = None
    liked: str | None = None
    preferred_username: str | None = None
    public_key: PublicKey | None = None


@dataclass(frozen=True)
class Activity(Object):
    """Activity variant; ``object`` may be embedded or a bare IRI."""

    kind: ClassVar[ItemKind] = ItemKind.ACTIVITY

    type: str = "Create"
    actor: str | None = None
    object: Item | str | None = None
    target: str | None = None


@dataclass(frozen=True)
class Link:
    """Link variant; links carry no owned collections."""

    kind: ClassVar[ItemKind] = ItemKind.LINK

    id: str
    type: str = LINK_TYPE
    href: str | None = None
    name: str | None = None
    hreflang: str | None = None
    media_type: str | None = None

    @property
    def iri(self) -> str:
        """Return the item IRI."""
        return self.id


@dataclass(frozen=True)
class Collection(Object):
    """Collection variant with an ordered member sequence.

    Attributes:
        total_items: Size of the backing membership index.
        items: Ordered member items.
        first: Optional first page IRI.
        next: Optional next page IRI.
        prev: Optional previous page IRI.
        part_of: Parent collection IRI when this is a page.
    """

    kind: ClassVar[ItemKind] = ItemKind.COLLECTION

    type: str = ORDERED_COLLECTION_TYPE
    total_items: int = 0
    items: tuple[Item, ...] = field(default_factory=tuple)
    first: str | None = None
    next: str | None = None
    prev: str | None = None
    part_of: str | None = None

    @property
    def ordered(self) -> bool:
        """Return whether this collection keeps an ordered sequence."""
        return self.type in ORDERED_COLLECTION_TYPES

    @property
    def page_type(self) -> str:
        """Return the page type matching this collection type."""
        return ORDERED_COLLECTION_PAGE_TYPE if self.ordered else COLLECTION_PAGE_TYPE


Item = Union[Object, Actor, Activity, Link, Collection]
ITEM_CLASSES = (Object, Actor, Activity, Link, Collection)


def is_item(value: object) -> bool:
    """Return whether a value is one of the item variants."""
    return isinstance(value, ITEM_CLASSES)


def is_object_based(item: Item) -> bool:
    """Return whether an item carries the shared object field set."""
    return item.kind is not ItemKind.LINK


def on_object(item: object, callback: Callable[[Object], T]) -> T:
    """Run callback when the item is object-based (any variant but Link).

    Raises:
        FedTypeMismatchError: If the item is a Link or not an item.
    """
    if not is_item(item) or item.kind is ItemKind.LINK:
        raise FedTypeMismatchError(f"Expected an object-based item, got {_describe(item)}.")
    return callback(item)


def on_actor(item: object, callback: Callable[[Actor], T]) -> T:
    """Run callback when the item is an Actor.

    Raises:
        FedTypeMismatchError: If the item is another variant.
    """
    return _on_kind(item, ItemKind.ACTOR, callback)


def on_activity(item: object, callback: Callable[[Activity], T]) -> T:
    """Run callback when the item is an Activity.

    Raises:
        FedTypeMismatchError: If the item is another variant.
    """
    return _on_kind(item, ItemKind.ACTIVITY, callback)


def on_link(item: object, callback: Callable[[Link], T]) -> T:
    """Run callback when the item is a Link.

    Raises:
        FedTypeMismatchError: If the item is another variant.
    """
    return _on_kind(item, ItemKind.LINK, callback)


def on_collection(item: object, callback: Callable[[Collection], T]) -> T:
    """Run callback when the item is a Collection.

    Raises:
        FedTypeMismatchError: If the item is another variant.
    """
    return _on_kind(item, ItemKind.COLLECTION, callback)


def declared_collections(item: Item) -> dict[str, str]:
    """Return declared sub-collection IRIs keyed by field name.

    Args:
        item: Any item variant.

    Returns:
        Mapping of field name to IRI for every non-empty declaration.
    """
    if not is_object_based(item):
        return {}
    field_names: tuple[str, ...] = OBJECT_COLLECTION_FIELDS
    if item.kind is ItemKind.ACTOR:
        field_names = ACTOR_COLLECTION_FIELDS + field_names
    declared: dict[str, str] = {}
    for field_name in field_names:
        value = getattr(item, field_name)
        if value:
            declared[field_name] = value
    return declared


def _on_kind(item: object, kind: ItemKind, callback: Callable[[Any], T]) -> T:
    if not is_item(item) or item.kind is not kind:
        raise FedTypeMismatchError(f"Expected a {kind.value} item, got {_describe(item)}.")
    return callback(item)


def _describe(value: object) -> str:
    if is_item(value):
        return f"{value.kind.value} '{value.id}' of type {value.type}"
    return type(value).__name__
