"""Integration tests for end-to-end collection scenarios."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.types import ItemKind, Object
from query.checks import has_type, with_max_count
from seed.generator import GeneratorContext, random_items, random_object, root_actor
from store.memory_storage import MemoryStorage


def test_note_note_image_inbox_scenario(seeded_storage: MemoryStorage) -> None:
    """Type filtering should keep full totals and drop the filtered member."""
    root = root_actor()
    items = [
        Object(id=f"{root.id}/note/1", attributed_to=root.id, content="one"),
        Object(id=f"{root.id}/note/2", attributed_to=root.id, content="two"),
        Object(id=f"{root.id}/image/1", type="Image", attributed_to=root.id),
    ]
    seeded_storage.add_to(root.inbox, *items)

    everything = seeded_storage.load(root.inbox)
    notes = seeded_storage.load(root.inbox, has_type("Note"))

    assert everything.total_items == 3
    assert notes.total_items == 3
    assert [item.id for item in notes.items] == [items[0].id, items[1].id]
    seeded_storage.remove_from(root.inbox, items[2])
    assert seeded_storage.load(root.inbox).total_items == 2


@pytest.mark.parametrize("count,page_size", [(10, 3), (9, 3), (1, 5), (25, 4)])
def test_pagination_walk_visits_every_member(
    seeded_storage: MemoryStorage, count: int, page_size: int
) -> None:
    """Following next links should take ceil(N/k) pages and visit all items."""
    root = root_actor()
    context = GeneratorContext.from_seed(17)
    members = [random_object(context, root.id) for _ in range(count)]
    seeded_storage.add_to(root.outbox, *members)

    page = seeded_storage.load(root.outbox, with_max_count(page_size))
    pages = 1
    seen = [item.id for item in page.items]
    while page.next is not None:
        page = seeded_storage.load(page.next)
        pages += 1
        seen.extend(item.id for item in page.items)

    assert pages == math.ceil(count / page_size)
    assert seen == [member.id for member in members]


def test_concurrent_add_to_keeps_accurate_total(seeded_storage: MemoryStorage) -> None:
    """Parallel writers should never lose membership updates."""
    root = root_actor()
    items = list(random_items(GeneratorContext.from_seed(23), 120, root.id))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda item: seeded_storage.add_to(root.inbox, item), items))

    assert seeded_storage.load(root.inbox).total_items == len(items)


def test_concurrent_add_and_remove_settle_to_index_size(seeded_storage: MemoryStorage) -> None:
    """Mixed writers should leave total_items equal to the final membership."""
    root = root_actor()
    context = GeneratorContext.from_seed(29)
    keep = [random_object(context, root.id) for _ in range(40)]
    drop = [random_object(context, root.id) for _ in range(40)]
    seeded_storage.add_to(root.followers, *drop)

    def mutate(index: int) -> None:
        seeded_storage.add_to(root.followers, keep[index])
        seeded_storage.remove_from(root.followers, drop[index])

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(mutate, range(40)))

    followers = seeded_storage.load(root.followers)
    assert followers.total_items == 40
    assert {item.id for item in followers.items} == {item.id for item in keep}


def test_seeded_actors_get_their_collections(seeded_storage: MemoryStorage) -> None:
    """Every generated actor saved should own a loadable inbox."""
    context = GeneratorContext.from_seed(31)
    actors = [item for item in random_items(context, 40) if item.kind is ItemKind.ACTOR]

    for actor in actors:
        seeded_storage.save(actor)

    for actor in actors:
        assert seeded_storage.load(actor.inbox).attributed_to == actor.id
