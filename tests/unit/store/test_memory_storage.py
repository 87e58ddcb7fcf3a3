"""Unit tests for the in-memory store facade."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
import threading
import time

import pytest

from core.config import FedStoreConfig
from core.constants import ORDERED_COLLECTION_PAGE_TYPE
from core.errors import (
    FedInternalError,
    FedInvalidArgumentError,
    FedNotFoundError,
    FedTypeMismatchError,
    FedUnsupportedError,
)
from core.types import Activity, Actor, Collection, Link, Object
from query.checks import has_type, object_matches, with_max_count
from store.memory_storage import MemoryStorage

ACTOR_IRI = "https://example.com/~alice"
INBOX = f"{ACTOR_IRI}/inbox"
OUTBOX = f"{ACTOR_IRI}/outbox"


def _storage(**overrides: object) -> MemoryStorage:
    return MemoryStorage(FedStoreConfig(**overrides))


def _actor() -> Actor:
    return Actor(
        id=ACTOR_IRI,
        preferred_username="alice",
        inbox=INBOX,
        outbox=OUTBOX,
        followers=f"{ACTOR_IRI}/followers",
        following=f"{ACTOR_IRI}/following",
        liked=f"{ACTOR_IRI}/liked",
    )


def _note(number: int, type_name: str = "Note", content: str = "") -> Object:
    return Object(
        id=f"{ACTOR_IRI}/{type_name.lower()}/{number}",
        type=type_name,
        attributed_to=ACTOR_IRI,
        content=content or f"{type_name} {number}",
    )


def test_save_then_load_returns_equal_item() -> None:
    """Loading a saved item should return a deep-equal item."""
    storage = _storage()
    note = _note(1)

    assert storage.save(note) is note
    assert storage.load(note.id) == note


def test_load_raises_not_found_for_absent_iri() -> None:
    """Loading an unknown IRI should raise not found."""
    with pytest.raises(FedNotFoundError):
        _storage().load("https://example.com/missing")


def test_delete_then_load_raises_not_found() -> None:
    """Deleted items should no longer load."""
    storage = _storage()
    note = storage.save(_note(1))
    storage.delete(note)

    with pytest.raises(FedNotFoundError):
        storage.load(note.id)


@pytest.mark.parametrize("item", [None, Object(id=""), "https://example.com/note/1"])
def test_save_rejects_empty_items(item: object) -> None:
    """Saving a missing item, an empty IRI or a non-item should fail."""
    with pytest.raises(FedInvalidArgumentError):
        _storage().save(item)  # type: ignore[arg-type]


def test_actor_save_materializes_empty_owned_inbox() -> None:
    """Saving an actor should create its inbox empty and owned by it."""
    storage = _storage()
    storage.save(_actor())

    inbox = storage.load(INBOX)

    assert isinstance(inbox, Collection)
    assert inbox.attributed_to == ACTOR_IRI
    assert inbox.total_items == 0
    assert inbox.items == ()


def test_actor_save_materializes_hidden_collections() -> None:
    """Saving an actor should create blocked and ignored collections."""
    storage = _storage()
    storage.save(_actor())

    assert storage.load(f"{ACTOR_IRI}/blocked").total_items == 0
    assert storage.load(f"{ACTOR_IRI}/ignored").total_items == 0


def test_actor_resave_keeps_populated_inbox() -> None:
    """Re-saving an actor should not reset its collections."""
    storage = _storage()
    actor = storage.save(_actor())
    storage.add_to(INBOX, _note(1))

    storage.save(replace(actor, name="Alice"))

    assert storage.load(INBOX).total_items == 1
    assert storage.load(ACTOR_IRI).name == "Alice"


def test_add_and_remove_update_total_items() -> None:
    """Membership mutations should keep total_items equal to the index size."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, _note(1), _note(2), _note(3))
    storage.add_to(INBOX, _note(1))

    storage.remove_from(INBOX, _note(2))

    inbox = storage.load(INBOX)
    assert inbox.total_items == 2
    assert [item.id for item in inbox.items] == [_note(1).id, _note(3).id]


def test_remove_from_accepts_bare_iris() -> None:
    """remove_from should accept member IRIs as well as items."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, _note(1))

    storage.remove_from(INBOX, _note(1).id)

    assert storage.load(INBOX).total_items == 0


def test_add_to_absent_collection_changes_nothing() -> None:
    """Adding to an unknown collection should fail before storing members."""
    storage = _storage()

    with pytest.raises(FedNotFoundError):
        storage.add_to(INBOX, _note(1))
    with pytest.raises(FedNotFoundError):
        storage.load(_note(1).id)


def test_add_to_non_collection_raises_type_mismatch() -> None:
    """Adding to an IRI that names a plain object should fail."""
    storage = _storage()
    storage.save(_note(1))

    with pytest.raises(FedTypeMismatchError):
        storage.add_to(_note(1).id, _note(2))


def test_add_to_reports_first_error_after_other_items() -> None:
    """A bad member should not stop the remaining members from being added."""
    storage = _storage()
    storage.save(_actor())

    with pytest.raises(FedInvalidArgumentError):
        storage.add_to(INBOX, _note(1), Object(id=""), _note(2))

    assert storage.load(INBOX).total_items == 2


def test_has_type_filter_keeps_full_total_items() -> None:
    """Filtered loads should report the size of the whole membership."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, _note(1), _note(2, "Image"), _note(3))

    notes = storage.load(INBOX, has_type("Note"))

    assert [item.id for item in notes.items] == [_note(1).id, _note(3).id]
    assert notes.total_items == 3


def test_checks_are_ignored_for_non_collections() -> None:
    """Loading a plain item with checks should return it unchanged."""
    storage = _storage()
    note = storage.save(_note(1))

    assert storage.load(note.id, has_type("Image")) == note


def test_create_rejects_non_collections() -> None:
    """create should only accept collections."""
    with pytest.raises(FedTypeMismatchError):
        _storage().create(_note(1))  # type: ignore[arg-type]


def test_create_seeds_membership_from_items() -> None:
    """A new collection's items should become its initial members."""
    storage = _storage()
    collection = Collection(id=f"{ACTOR_IRI}/shelf", items=(_note(1), _note(2)))

    storage.create(collection)

    loaded = storage.load(collection.id)
    assert loaded.total_items == 2
    assert storage.load(_note(2).id) == _note(2)


def test_collection_save_then_load_is_equal() -> None:
    """An empty saved collection should load back unchanged."""
    storage = _storage()
    collection = Collection(id=f"{ACTOR_IRI}/shelf", name="shelf")

    storage.save(collection)

    assert storage.load(collection.id) == collection


def test_collection_resave_keeps_membership() -> None:
    """Re-saving a collection should keep its index and refresh its count."""
    storage = _storage()
    collection = storage.create(Collection(id=f"{ACTOR_IRI}/shelf"))
    storage.add_to(collection.id, _note(1), _note(2))

    storage.save(replace(collection, name="renamed", total_items=0))

    loaded = storage.load(collection.id)
    assert loaded.name == "renamed"
    assert loaded.total_items == 2


def test_collection_resave_with_items_replaces_membership() -> None:
    """Re-saving a collection with items should store exactly those members."""
    storage = _storage()
    first = Collection(id=f"{ACTOR_IRI}/shelf", items=(_note(1),), total_items=1)
    storage.save(first)
    second = replace(first, items=(_note(2), _note(3)), total_items=2)

    storage.save(second)

    assert storage.load(first.id) == second
    assert storage.load(_note(3).id) == _note(3)


def test_delete_waits_for_in_flight_add_to(monkeypatch: pytest.MonkeyPatch) -> None:
    """Deleting a collection mid add_to should leave neither entity nor index."""
    storage = _storage()
    shelf = storage.create(Collection(id=f"{ACTOR_IRI}/shelf"))
    adding = threading.Event()
    index_add = storage._index.add

    def slow_add(collection_iri: str, item: Object) -> bool:
        adding.set()
        time.sleep(0.05)
        return index_add(collection_iri, item)

    monkeypatch.setattr(storage._index, "add", slow_add)
    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(storage.add_to, shelf.id, _note(1))
        assert adding.wait(timeout=5)
        storage.delete(shelf)
        pending.result(timeout=5)

    assert storage._table.find(shelf.id) is None
    assert not storage._index.exists(shelf.id)
    with pytest.raises(FedNotFoundError):
        storage.load(shelf.id)


def test_failed_materialization_leaves_item_unstored() -> None:
    """A save whose owned collections cannot be created should store nothing."""
    storage = _storage()
    broken = Object(id=f"{ACTOR_IRI}/note/1", type="Note", likes="not an iri")

    with pytest.raises(FedInternalError):
        storage.save(broken)

    with pytest.raises(FedNotFoundError):
        storage.load(broken.id)


def test_save_rejects_iri_with_query() -> None:
    """Stored IRIs may not carry a query part."""
    storage = _storage()

    with pytest.raises(FedInvalidArgumentError):
        storage.save(Collection(id="https://example.com/c?page=all"))
    with pytest.raises(FedInternalError):
        storage.save(Object(id=f"{ACTOR_IRI}/note/1", likes=f"{ACTOR_IRI}/likes?all"))


def test_missing_collections_do_not_allocate_locks() -> None:
    """Lookups and mutations of absent collections should not create locks."""
    storage = _storage()
    storage.save(_note(1))
    missing = f"{ACTOR_IRI}/missing"
    before = len(storage._index._locks)

    with pytest.raises(FedNotFoundError):
        storage.load(missing)
    with pytest.raises(FedNotFoundError):
        storage.add_to(missing, _note(2))
    with pytest.raises(FedNotFoundError):
        storage.remove_from(missing, _note(1))
    with pytest.raises(FedTypeMismatchError):
        storage.remove_from(_note(1).id, _note(1))

    assert len(storage._index._locks) == before


def test_deleting_collection_drops_its_membership() -> None:
    """A deleted collection should not accept new members."""
    storage = _storage()
    collection = storage.create(Collection(id=f"{ACTOR_IRI}/shelf"))
    storage.delete(collection)

    with pytest.raises(FedNotFoundError):
        storage.add_to(collection.id, _note(1))


def test_deleting_member_does_not_cascade() -> None:
    """Collections should keep listing a member after it is deleted."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, _note(1))

    storage.delete(_note(1))

    inbox = storage.load(INBOX)
    assert inbox.total_items == 1
    assert inbox.items[0].id == _note(1).id


def test_collection_load_dereferences_updated_members() -> None:
    """Members should reflect their latest saved state."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, _note(1))

    storage.save(replace(_note(1), content="edited"))

    assert storage.load(INBOX).items[0].content == "edited"


def test_max_count_returns_linked_page() -> None:
    """Pagination should return a page with part_of and a next cursor."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, *(_note(number) for number in range(1, 6)))

    page = storage.load(INBOX, with_max_count(2))

    assert page.type == ORDERED_COLLECTION_PAGE_TYPE
    assert page.part_of == INBOX
    assert [item.id for item in page.items] == [_note(1).id, _note(2).id]
    assert page.total_items == 5
    assert page.prev is None
    assert page.next is not None


def test_next_and_prev_cursors_resume_traversal() -> None:
    """Cursor IRIs should load the neighbouring pages."""
    storage = _storage()
    storage.save(_actor())
    storage.add_to(INBOX, *(_note(number) for number in range(1, 6)))

    second = storage.load(storage.load(INBOX, with_max_count(2)).next)
    previous = storage.load(second.prev)

    assert [item.id for item in second.items] == [_note(3).id, _note(4).id]
    assert [item.id for item in previous.items] == [_note(1).id, _note(2).id]


def test_malformed_cursor_raises_invalid_argument() -> None:
    """Unknown cursor parameters should be rejected."""
    storage = _storage()
    storage.save(_actor())

    with pytest.raises(FedInvalidArgumentError):
        storage.load(f"{INBOX}?color=blue")


def test_object_matches_dereferences_bare_object_iri() -> None:
    """Nested object filters should resolve bare IRIs from storage."""
    storage = _storage()
    storage.save(_actor())
    note = storage.save(_note(1))
    image = storage.save(_note(2, "Image"))
    create_note = Activity(id=f"{ACTOR_IRI}/create/1", actor=ACTOR_IRI, object=note.id)
    create_image = Activity(id=f"{ACTOR_IRI}/create/2", actor=ACTOR_IRI, object=image.id)
    storage.add_to(OUTBOX, create_note, create_image)

    matched = storage.load(OUTBOX, object_matches(has_type("Note")))

    assert [item.id for item in matched.items] == [create_note.id]
    assert matched.items[0].object == note
    assert storage.load(create_note.id).object == note.id


def test_links_are_stored_without_collections() -> None:
    """Links should save and load like any other item."""
    storage = _storage()
    link = Link(id="https://example.com/link", href="https://example.com/link")

    storage.save(link)

    assert storage.load(link.id) == link


def test_capabilities_follow_enabled_stores() -> None:
    """Disabled collaborator stores should be absent and unsupported."""
    storage = _storage(enabled_stores=("keys",))

    assert storage.capabilities.keys
    assert not storage.capabilities.passwords
    assert storage.password_store is None
    with pytest.raises(FedUnsupportedError):
        storage.capabilities.require("passwords")


def test_all_capabilities_enabled_by_default() -> None:
    """Default config should expose every collaborator store."""
    capabilities = _storage().capabilities

    assert capabilities.keys
    assert capabilities.passwords
    assert capabilities.metadata
    assert capabilities.oauth
    assert capabilities.client_admin
