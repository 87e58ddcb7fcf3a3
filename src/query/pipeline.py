"""Filter pipeline evaluation over collection membership.

Filters run first, in order, combined with logical AND and preserving
the relative order of surviving members. Pagination runs last on the
filtered sequence and turns the result into a page with resumable
``first``/``next``/``prev`` IRIs. The returned ``total_items`` is always
the size of the full backing membership.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from core.types import Collection, Item
from query.checks import (
    After,
    Before,
    Check,
    FilterCheck,
    MaxCount,
    Resolver,
    after,
    before,
    with_max_count,
)
from query.cursor import cursor_iri


@dataclass(frozen=True)
class PaginationState:
    """Pagination settings collected from a check sequence.

    Attributes:
        max_count: Optional page size; the last MaxCount wins.
        after_iri: Optional anchor the page starts after.
        before_iri: Optional anchor the page ends before.
    """

    max_count: int | None = None
    after_iri: str | None = None
    before_iri: str | None = None

    @property
    def active(self) -> bool:
        """Return whether any pagination check was given."""
        return any(value is not None for value in (self.max_count, self.after_iri, self.before_iri))


@dataclass(frozen=True)
class PageWindow:
    """One page of filtered items plus its neighbours."""

    items: tuple[Item, ...]
    has_next: bool
    has_prev: bool


def split_checks(checks: Sequence[Check]) -> tuple[tuple[FilterCheck, ...], PaginationState]:
    """Separate filters from pagination checks.

    Args:
        checks: Checks in caller order.

    Returns:
        Pair of ordered filters and the collected pagination state.
    """
    filters: list[FilterCheck] = []
    max_count: int | None = None
    after_iri: str | None = None
    before_iri: str | None = None
    for check in checks:
        if isinstance(check, MaxCount):
            max_count = check.count
        elif isinstance(check, After):
            after_iri = check.iri
        elif isinstance(check, Before):
            before_iri = check.iri
        elif isinstance(check, FilterCheck):
            filters.append(check)
    return tuple(filters), PaginationState(max_count, after_iri, before_iri)


def run_filters(
    items: Sequence[Item],
    filters: Sequence[FilterCheck],
    resolve: Resolver,
) -> list[Item]:
    """Apply filters to every item, keeping accepted items in order."""
    accepted: list[Item] = []
    for item in items:
        current: Item | None = item
        for check in filters:
            current = check.apply(current, resolve)
            if current is None:
                break
        if current is not None:
            accepted.append(current)
    return accepted


def paginate(items: Sequence[Item], state: PaginationState) -> PageWindow:
    """Cut one page out of the filtered items.

    An anchor that is not among the filtered items yields an empty page.

    Args:
        items: Filtered items in stable order.
        state: Pagination settings.

    Returns:
        The page and whether items remain on either side of it.
    """
    positions = {item.id: position for position, item in enumerate(items)}
    start = 0
    end = len(items)
    if state.after_iri is not None:
        start = positions.get(state.after_iri, len(items) - 1) + 1
    if state.before_iri is not None:
        end = positions.get(state.before_iri, 0)
    end = max(start, end)
    window = list(items[start:end])
    page_start = start
    if state.max_count is not None and len(window) > state.max_count:
        if state.before_iri is not None and state.after_iri is None:
            page_start = end - state.max_count
            window = window[-state.max_count:]
        else:
            window = window[: state.max_count]
    page_end = page_start + len(window)
    return PageWindow(
        items=tuple(window),
        has_next=bool(window) and page_end < len(items),
        has_prev=bool(window) and page_start > 0,
    )


def evaluate_collection(
    collection: Collection,
    checks: Sequence[Check],
    resolve: Resolver,
) -> Collection:
    """Run the check pipeline over a collection's full membership.

    Args:
        collection: Collection whose ``items`` hold the full, ordered,
            dereferenced membership.
        checks: Checks in caller order.
        resolve: Object table lookup for nested dereferencing.

    Returns:
        The filtered collection, or a page of it when pagination checks
        are present. ``total_items`` keeps the full membership size.
    """
    filters, state = split_checks(checks)
    filtered = run_filters(collection.items, filters, resolve)
    if not state.active:
        return replace(collection, items=tuple(filtered))
    window = paginate(filtered, state)
    return _build_page(collection, filters, state, window)


def _build_page(
    collection: Collection,
    filters: tuple[FilterCheck, ...],
    state: PaginationState,
    window: PageWindow,
) -> Collection:
    sizing: list[Check] = [with_max_count(state.max_count)] if state.max_count else []
    page_checks: list[Check] = list(filters) + sizing
    if state.after_iri is not None:
        page_checks.append(after(state.after_iri))
    if state.before_iri is not None:
        page_checks.append(before(state.before_iri))
    next_iri = None
    prev_iri = None
    if window.has_next:
        next_iri = cursor_iri(collection.id, [*filters, *sizing, after(window.items[-1].id)])
    if window.has_prev:
        prev_iri = cursor_iri(collection.id, [*filters, *sizing, before(window.items[0].id)])
    return replace(
        collection,
        id=cursor_iri(collection.id, page_checks),
        type=collection.page_type,
        items=window.items,
        part_of=collection.id,
        first=cursor_iri(collection.id, [*filters, *sizing]),
        next=next_iri,
        prev=prev_iri,
    )
