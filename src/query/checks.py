"""Check library for filtered collection reads.

A check is either a filter, applied to one candidate item at a time,
or a pagination check, applied once to the filtered sequence. Filters
return the item (possibly with a dereferenced nested object swapped
in) when it passes, or None when it is rejected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable, ClassVar, Sequence

from core.errors import FedInvalidArgumentError
from core.types import Item, ItemKind

Resolver = Callable[[str], "Item | None"]


class Check(ABC):
    """Base class for every named check."""

    name: ClassVar[str]
    pagination: ClassVar[bool] = False


class FilterCheck(Check):
    """Per-item predicate that may substitute the item it accepts."""

    @abstractmethod
    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        """Return the accepted item, or None when the item is rejected.

        Args:
            item: Candidate item.
            resolve: Object table lookup used to dereference bare IRIs.
        """


class PaginationCheck(Check):
    """Marker base for checks applied after all filters."""

    pagination: ClassVar[bool] = True


@dataclass(frozen=True)
class HasType(FilterCheck):
    """Accept items whose vocabulary type is one of ``types``."""

    name: ClassVar[str] = "type"

    types: tuple[str, ...]

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        return item if item.type in self.types else None


@dataclass(frozen=True)
class SameID(FilterCheck):
    """Accept the item with exactly this IRI."""

    name: ClassVar[str] = "id"

    iri: str

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        return item if item.id == self.iri else None


@dataclass(frozen=True)
class AttributedTo(FilterCheck):
    """Accept object-based items attributed to ``iri``."""

    name: ClassVar[str] = "attributedTo"

    iri: str

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        return item if getattr(item, "attributed_to", None) == self.iri else None


@dataclass(frozen=True)
class AnyOf(FilterCheck):
    """Logical OR; the first accepting sub-check wins."""

    name: ClassVar[str] = "any"

    checks: tuple[FilterCheck, ...]

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        for check in self.checks:
            accepted = check.apply(item, resolve)
            if accepted is not None:
                return accepted
        return None


@dataclass(frozen=True)
class AllOf(FilterCheck):
    """Logical AND with short circuit; substitutions chain through."""

    name: ClassVar[str] = "all"

    checks: tuple[FilterCheck, ...]

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        current: Item | None = item
        for check in self.checks:
            current = check.apply(current, resolve)
            if current is None:
                return None
        return current


@dataclass(frozen=True)
class ObjectMatches(FilterCheck):
    """Dereference an activity's object and require all sub-checks on it.

    Activities whose object is a bare IRI get the stored object swapped
    in place. Non-activities, and activities whose object cannot be
    resolved, are rejected.
    """

    name: ClassVar[str] = "object"

    checks: tuple[FilterCheck, ...]

    def apply(self, item: Item, resolve: Resolver) -> Item | None:
        if item.kind is not ItemKind.ACTIVITY:
            return None
        nested = item.object
        if isinstance(nested, str):
            nested = resolve(nested)
        if nested is None:
            return None
        matched = AllOf(self.checks).apply(nested, resolve)
        if matched is None:
            return None
        return replace(item, object=matched)


@dataclass(frozen=True)
class MaxCount(PaginationCheck):
    """Cap the page length."""

    name: ClassVar[str] = "maxItems"

    count: int


@dataclass(frozen=True)
class After(PaginationCheck):
    """Start the page after the member with this IRI."""

    name: ClassVar[str] = "after"

    iri: str


@dataclass(frozen=True)
class Before(PaginationCheck):
    """End the page before the member with this IRI."""

    name: ClassVar[str] = "before"

    iri: str


def has_type(*types: str) -> HasType:
    """Build a type membership filter."""
    if not types:
        raise FedInvalidArgumentError("has_type needs at least one type name.")
    return HasType(tuple(types))


def same_id(iri: str) -> SameID:
    """Build an IRI equality filter."""
    return SameID(_require_iri(iri, "same_id"))


def attributed_to(iri: str) -> AttributedTo:
    """Build an ownership filter."""
    return AttributedTo(_require_iri(iri, "attributed_to"))


def any_of(*checks: Check) -> AnyOf:
    """Combine filters with logical OR."""
    return AnyOf(_require_filters(checks, "any_of"))


def all_of(*checks: Check) -> AllOf:
    """Combine filters with logical AND."""
    return AllOf(_require_filters(checks, "all_of"))


def object_matches(*checks: Check) -> ObjectMatches:
    """Apply filters to an activity's dereferenced object."""
    return ObjectMatches(_require_filters(checks, "object_matches"))


def with_max_count(count: int) -> MaxCount:
    """Limit each page to ``count`` items."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise FedInvalidArgumentError(f"with_max_count needs a positive integer, got {count!r}.")
    return MaxCount(count)


def after(iri: str) -> After:
    """Resume a page after the given member IRI."""
    return After(_require_iri(iri, "after"))


def before(iri: str) -> Before:
    """Resume a page before the given member IRI."""
    return Before(_require_iri(iri, "before"))


def _require_filters(checks: Sequence[Check], builder: str) -> tuple[FilterCheck, ...]:
    for check in checks:
        if not isinstance(check, FilterCheck):
            raise FedInvalidArgumentError(
                f"{builder} only combines filter checks, got {type(check).__name__}. "
                "Pass pagination checks at the top level of a load call."
            )
    return tuple(checks)


def _require_iri(iri: str, builder: str) -> str:
    if not isinstance(iri, str) or not iri:
        raise FedInvalidArgumentError(f"{builder} needs a non-empty IRI, got {iri!r}.")
    return iri
