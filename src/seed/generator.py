"""Deterministic fixture generator for federated items.

Every generator function takes a ``GeneratorContext`` holding the
seeded random source and the per-type counters used to build unique
item IDs. Independent contexts never share state, so parallel tests
each get their own reproducible sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import random
import threading
from typing import Callable, Iterator

from core.config import FedStoreConfig
from core.constants import (
    ACTOR_TYPES,
    DEFAULT_BASE_IRI,
    DEFAULT_RANDOM_SEED,
    FOLLOWERS_PATH,
    FOLLOWING_PATH,
    IMAGE_TYPE,
    INBOX_PATH,
    LIKED_PATH,
    LIKES_PATH,
    LINK_TYPES,
    NOTE_TYPE,
    ORDERED_COLLECTION_TYPE,
    OUTBOX_PATH,
    PERSON_TYPE,
    PUBLIC_NS,
    SHARES_PATH,
)
from core.errors import FedInvalidArgumentError
from core.iri import add_path
from core.types import (
    Activity,
    Actor,
    Collection,
    Item,
    ItemKind,
    Link,
    Object,
)
from seed.content import CONTENT_SAMPLES, sample_for
from seed.names import random_name

ROOT_IRI = add_path(DEFAULT_BASE_IRI, "~root")
ROOT_PUBLISHED = datetime(1999, 4, 1, 6, 6, 6, tzinfo=timezone.utc)

ACTOR_ACTIVITY_TYPES = ("Update", "Like", "Dislike", "Flag", "Block", "Follow", "Ignore")
OBJECT_ACTIVITY_TYPES = ACTOR_ACTIVITY_TYPES + ("Delete",)
ACTIVITY_ACTIVITY_TYPES = ("Undo",)
TYPES_NEEDING_REASON = ("Block", "Flag", "Ignore")
RANDOM_REASON = "A random reason for a stupid activity"


@dataclass
class GeneratorContext:
    """Random source and ID counters threaded through the generator.

    Attributes:
        rng: Seeded random source.
        base_iri: IRI prefix for items without an owner.
        type_counts: Last issued sequence number per lowercase type.
    """

    rng: random.Random
    base_iri: str = DEFAULT_BASE_IRI
    type_counts: dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def from_seed(cls, seed: int = DEFAULT_RANDOM_SEED) -> "GeneratorContext":
        return cls(rng=random.Random(seed))

    @classmethod
    def from_config(cls, config: FedStoreConfig) -> "GeneratorContext":
        """Build a context seeded from runtime config."""
        return cls.from_seed(config.random_seed)

    def next_count(self, type_name: str) -> int:
        """Return the next sequence number for a type, starting at 1."""
        key = type_name.lower()
        with self._lock:
            count = self.type_counts.get(key, 0) + 1
            self.type_counts[key] = count
        return count


def item_id(
    context: GeneratorContext,
    type_name: str,
    attributed_to: str | None = None,
    collection: bool = False,
) -> str:
    """Build a generated item ID.

    Args:
        context: Generator context owning the type counters.
        type_name: Vocabulary type of the item.
        attributed_to: Owner IRI used as the ID prefix.
        collection: Collections get ``<base>/<type>`` with no counter.

    Returns:
        ``<base>/<type>/<n>`` for plain items.
    """
    base = add_path(attributed_to or context.base_iri, type_name.lower())
    if collection:
        return base
    return add_path(base, str(context.next_count(type_name)))


def random_time(context: GeneratorContext) -> datetime:
    """Return a second-precision UTC timestamp between 1900 and 2098."""
    rng = context.rng
    return datetime(
        year=1900 + rng.randrange(199),
        month=rng.randint(1, 12),
        day=rng.randint(1, 28),
        hour=rng.randrange(24),
        minute=rng.randrange(59),
        second=rng.randrange(59),
        tzinfo=timezone.utc,
    )


def random_object(context: GeneratorContext, attributed_to: str | None = None) -> Object:
    """Return an object whose type follows a randomly picked content sample."""
    sample = context.rng.choice(CONTENT_SAMPLES)
    type_name = sample.object_type or NOTE_TYPE
    return Object(
        id=item_id(context, type_name, attributed_to),
        type=type_name,
        attributed_to=attributed_to,
        published=random_time(context),
        media_type=sample.media_type,
        summary=sample.summary(),
        content=sample.encoded(),
    )


def random_image(
    context: GeneratorContext,
    media_type: str = "image/png",
    attributed_to: str | None = None,
) -> Object:
    """Return an image object with a base64 body of the given media type."""
    sample = sample_for(media_type)
    return Object(
        id=item_id(context, IMAGE_TYPE, attributed_to),
        type=IMAGE_TYPE,
        attributed_to=attributed_to,
        media_type=media_type,
        content=sample.encoded() if sample is not None else "",
    )


def random_actor(context: GeneratorContext, attributed_to: str | None = None) -> Actor:
    """Return an actor declaring its inbox and social collections."""
    type_name = context.rng.choice(ACTOR_TYPES)
    actor_id = item_id(context, type_name, attributed_to)
    name = random_name(context.rng)
    return Actor(
        id=actor_id,
        type=type_name,
        attributed_to=attributed_to,
        name=name,
        preferred_username=name,
        published=random_time(context),
        icon=random_image(context, "image/png", attributed_to),
        **_actor_collections(actor_id),
    )


def random_activity(
    context: GeneratorContext,
    obj: Item | None = None,
    attributed_to: str | None = None,
) -> Activity:
    """Return an activity whose type suits its object.

    Args:
        context: Generator context.
        obj: Embedded object; the activity type is chosen from it.
        attributed_to: Owner and actor IRI.
    """
    type_name = context.rng.choice(_activity_types_for(obj))
    reason = RANDOM_REASON if type_name in TYPES_NEEDING_REASON else None
    return Activity(
        id=item_id(context, type_name, attributed_to),
        type=type_name,
        attributed_to=attributed_to,
        actor=attributed_to,
        object=obj,
        to=(ROOT_IRI, PUBLIC_NS),
        summary=reason,
        content=reason,
        published=random_time(context),
    )


def random_link(context: GeneratorContext, attributed_to: str | None = None) -> Link:
    """Return a link whose ID is its href.

    ``attributed_to`` is accepted for signature parity; links carry no owner.
    """
    href = context.base_iri
    for segment in random_name(context.rng).split("_"):
        href = add_path(href, segment)
    return Link(
        id=href,
        type=context.rng.choice(LINK_TYPES),
        href=href,
        name=random_name(context.rng),
        hreflang="en",
    )


def random_collection(
    context: GeneratorContext, attributed_to: str | None = None
) -> Collection:
    """Return an empty ordered collection at ``<base>/orderedcollection``."""
    return Collection(
        id=item_id(context, ORDERED_COLLECTION_TYPE, attributed_to, collection=True),
        type=ORDERED_COLLECTION_TYPE,
        attributed_to=attributed_to,
        published=random_time(context),
    )


def random_item(context: GeneratorContext, attributed_to: str | None = None) -> Item:
    """Return an object, actor, activity or link picked at random."""
    generators: tuple[Callable[[GeneratorContext, str | None], Item], ...] = (
        random_object,
        random_actor,
        lambda ctx, owner: random_activity(ctx, random_object(ctx, owner), owner),
        random_link,
    )
    return context.rng.choice(generators)(context, attributed_to)


def random_items(
    context: GeneratorContext,
    count: int,
    attributed_to: str | None = ROOT_IRI,
) -> Iterator[Item]:
    """Lazily yield ``count`` random items with unique IDs.

    Raises:
        FedInvalidArgumentError: If count is negative.
    """
    if count < 0:
        raise FedInvalidArgumentError(f"Item count must be non-negative, got {count}.")
    seen: set[str] = set()
    produced = 0
    while produced < count:
        item = random_item(context, attributed_to)
        if item.id in seen:
            continue
        seen.add(item.id)
        produced += 1
        yield item


def root_actor() -> Actor:
    """Return the fixed base actor that owns generated fixtures."""
    return Actor(
        id=ROOT_IRI,
        type=PERSON_TYPE,
        published=ROOT_PUBLISHED,
        name="Rooty McRootface",
        summary="The base actor for the storage test suite",
        content="<p>The base actor for the storage test suite</p>",
        url=ROOT_IRI,
        to=(PUBLIC_NS,),
        likes=add_path(ROOT_IRI, LIKES_PATH),
        shares=add_path(ROOT_IRI, SHARES_PATH),
        preferred_username="root",
        **_actor_collections(ROOT_IRI),
    )


def _actor_collections(actor_id: str) -> dict[str, str]:
    return {
        "inbox": add_path(actor_id, INBOX_PATH),
        "outbox": add_path(actor_id, OUTBOX_PATH),
        "followers": add_path(actor_id, FOLLOWERS_PATH),
        "following": add_path(actor_id, FOLLOWING_PATH),
        "liked": add_path(actor_id, LIKED_PATH),
    }


def _activity_types_for(obj: Item | None) -> tuple[str, ...]:
    if obj is None:
        return OBJECT_ACTIVITY_TYPES
    if obj.kind is ItemKind.ACTIVITY:
        return ACTIVITY_ACTIVITY_TYPES
    if obj.kind is ItemKind.ACTOR:
        return ACTOR_ACTIVITY_TYPES
    return OBJECT_ACTIVITY_TYPES
