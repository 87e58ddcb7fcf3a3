"""IRI helpers.

This module centralizes IRI path joining and query splitting so the
store, the collaborator stores, and the cursor codec agree on key shapes.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import FedInvalidArgumentError


@dataclass(frozen=True)
class SplitIRI:
    """IRI split at its query separator."""

    base: str
    query: str


def add_path(iri: str, segment: str) -> str:
    """Append one path segment to an IRI.

    Args:
        iri: Base IRI.
        segment: Path segment without leading slash.

    Returns:
        Joined IRI.

    Raises:
        FedInvalidArgumentError: If the IRI is empty.
    """
    validate_iri(iri)
    return f"{iri.rstrip('/')}/{segment.strip('/')}"


def split_query(iri: str) -> SplitIRI:
    """Split an IRI into its base and raw query string.

    Args:
        iri: IRI that may carry a ``?query`` part.

    Returns:
        Base IRI and query text, which is empty when absent.
    """
    base, _, query = iri.partition("?")
    return SplitIRI(base=base, query=query)


def validate_iri(iri: object) -> str:
    """Validate an IRI key.

    Args:
        iri: Candidate key value.

    Returns:
        The IRI unchanged.

    Raises:
        FedInvalidArgumentError: If the value is not a non-empty string
            or contains whitespace.
    """
    if not isinstance(iri, str) or not iri.strip():
        raise FedInvalidArgumentError(
            f"Invalid IRI {iri!r}: expected a non-empty string. "
            "Items must carry their own IRI before they are stored."
        )
    if any(character.isspace() for character in iri):
        raise FedInvalidArgumentError(f"Invalid IRI {iri!r}: whitespace is not allowed.")
    return iri


def validate_key_iri(iri: object) -> str:
    """Validate an IRI an item is stored under.

    A ``?query`` suffix is reserved for cursor IRIs, so stored keys
    may not carry one.

    Raises:
        FedInvalidArgumentError: If the IRI is invalid or has a query.
    """
    validate_iri(iri)
    if "?" in iri:
        raise FedInvalidArgumentError(
            f"Invalid item IRI {iri!r}: a query part is reserved for collection cursors."
        )
    return iri
