"""fedstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Callers can tell a missing key apart from every other failure.
"""

from __future__ import annotations


class FedError(Exception):
    """Base exception for all fedstore failures."""


class FedNotFoundError(FedError):
    """Raised when a requested key is absent from storage."""


class FedTypeMismatchError(FedError):
    """Raised when a stored value is not the expected item variant."""


class FedInvalidArgumentError(FedError):
    """Raised for empty items, missing IRIs, or malformed query IRIs."""


class FedInternalError(FedError):
    """Raised for encoding and collection materialization failures."""


class FedConfigError(FedError):
    """Raised for invalid runtime configuration."""


class FedUnauthorizedError(FedError):
    """Raised when a password check does not match the stored hash."""


class FedUnsupportedError(FedError):
    """Raised when a storage capability is disabled for this instance."""
