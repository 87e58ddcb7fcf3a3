"""Actor password store backed by bcrypt hashes."""

from __future__ import annotations

from typing import Any

import bcrypt

from core.constants import BCRYPT_ROUNDS, PASSWORD_PATH
from core.errors import FedInvalidArgumentError, FedNotFoundError, FedUnauthorizedError
from core.iri import add_path
from store.concurrent_map import ConcurrentMap


class PasswordStore:
    """Password hash persistence keyed by actor IRI."""

    def __init__(self, substrate: ConcurrentMap[Any], rounds: int = BCRYPT_ROUNDS) -> None:
        self._map = substrate
        self._rounds = rounds

    def password_set(self, iri: str, password: bytes | str) -> None:
        """Hash and store a password for an actor."""
        hashed = bcrypt.hashpw(_as_bytes(password), bcrypt.gensalt(rounds=self._rounds))
        self._map.put(add_path(iri, PASSWORD_PATH), hashed)

    def password_check(self, iri: str, password: bytes | str) -> None:
        """Verify a password against the stored hash.

        Raises:
            FedNotFoundError: If no password is stored for the IRI.
            FedUnauthorizedError: If the password does not match.
        """
        hashed = self._map.get(add_path(iri, PASSWORD_PATH))
        if hashed is None:
            raise FedNotFoundError(f"Unable to find password for iri {iri}.")
        if not bcrypt.checkpw(_as_bytes(password), hashed):
            raise FedUnauthorizedError(f"Invalid password for iri {iri}.")


def _as_bytes(password: bytes | str) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not isinstance(password, bytes) or not password:
        raise FedInvalidArgumentError("Password must be a non-empty string or bytes value.")
    return password
