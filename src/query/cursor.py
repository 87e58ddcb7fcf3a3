"""Pagination cursor codec.

This module translates check sequences to and from IRI query strings,
so a page can hand out ``next``/``prev`` IRIs that resume the same
filtered traversal. Each check becomes one query parameter; combinator
and nested-object checks carry their sub-checks as an encoded nested
query, which keeps the encoding lossless.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode

from core.constants import (
    QUERY_AFTER,
    QUERY_ALL,
    QUERY_ANY,
    QUERY_ATTRIBUTED_TO,
    QUERY_BEFORE,
    QUERY_ID,
    QUERY_MAX_ITEMS,
    QUERY_OBJECT,
    QUERY_TYPE,
)
from core.errors import FedInvalidArgumentError
from core.iri import SplitIRI, split_query
from query.checks import (
    After,
    AllOf,
    AnyOf,
    AttributedTo,
    Before,
    Check,
    FilterCheck,
    HasType,
    MaxCount,
    ObjectMatches,
    SameID,
    after,
    attributed_to,
    before,
    has_type,
    same_id,
    with_max_count,
)


def encode_checks(checks: tuple[Check, ...] | list[Check]) -> str:
    """Encode checks as a URL query string.

    Args:
        checks: Ordered checks.

    Returns:
        Query string without the leading ``?``.
    """
    return urlencode([_encode_check(check) for check in checks])


def decode_checks(query: str) -> tuple[Check, ...]:
    """Decode a query string produced by :func:`encode_checks`.

    Args:
        query: Query string without the leading ``?``.

    Returns:
        Ordered checks.

    Raises:
        FedInvalidArgumentError: If the query is malformed or names an
            unknown parameter.
    """
    if not query:
        return ()
    try:
        pairs = parse_qsl(query, keep_blank_values=True, strict_parsing=True)
    except ValueError as error:
        raise FedInvalidArgumentError(f"Malformed cursor query '{query}': {error}") from error
    return tuple(_decode_pair(key, value) for key, value in pairs)


def cursor_iri(base_iri: str, checks: tuple[Check, ...] | list[Check]) -> str:
    """Build a resumable IRI for ``base_iri`` under ``checks``."""
    query = encode_checks(checks)
    return f"{base_iri}?{query}" if query else base_iri


def parse_cursor_iri(iri: str) -> tuple[str, tuple[Check, ...]]:
    """Split a cursor IRI into its base IRI and decoded checks."""
    split: SplitIRI = split_query(iri)
    return split.base, decode_checks(split.query)


def _encode_check(check: Check) -> tuple[str, str]:
    if isinstance(check, HasType):
        return QUERY_TYPE, ",".join(check.types)
    if isinstance(check, SameID):
        return QUERY_ID, check.iri
    if isinstance(check, AttributedTo):
        return QUERY_ATTRIBUTED_TO, check.iri
    if isinstance(check, ObjectMatches):
        return QUERY_OBJECT, encode_checks(check.checks)
    if isinstance(check, AnyOf):
        return QUERY_ANY, encode_checks(check.checks)
    if isinstance(check, AllOf):
        return QUERY_ALL, encode_checks(check.checks)
    if isinstance(check, MaxCount):
        return QUERY_MAX_ITEMS, str(check.count)
    if isinstance(check, After):
        return QUERY_AFTER, check.iri
    if isinstance(check, Before):
        return QUERY_BEFORE, check.iri
    raise FedInvalidArgumentError(f"Check {type(check).__name__} has no query encoding.")


def _decode_pair(key: str, value: str) -> Check:
    if key == QUERY_TYPE:
        return has_type(*[name for name in value.split(",") if name])
    if key == QUERY_ID:
        return same_id(value)
    if key == QUERY_ATTRIBUTED_TO:
        return attributed_to(value)
    if key == QUERY_OBJECT:
        return ObjectMatches(_decode_filters(value))
    if key == QUERY_ANY:
        return AnyOf(_decode_filters(value))
    if key == QUERY_ALL:
        return AllOf(_decode_filters(value))
    if key == QUERY_MAX_ITEMS:
        return with_max_count(_parse_count(value))
    if key == QUERY_AFTER:
        return after(value)
    if key == QUERY_BEFORE:
        return before(value)
    raise FedInvalidArgumentError(f"Unknown cursor query parameter '{key}'.")


def _decode_filters(query: str) -> tuple[FilterCheck, ...]:
    checks = decode_checks(query)
    for check in checks:
        if not isinstance(check, FilterCheck):
            raise FedInvalidArgumentError(
                f"Nested cursor query '{query}' may only hold filter checks."
            )
    return checks  # type: ignore[return-value]


def _parse_count(value: str) -> int:
    try:
        return int(value)
    except ValueError as error:
        raise FedInvalidArgumentError(
            f"Invalid {QUERY_MAX_ITEMS} value '{value}': expected integer."
        ) from error
