"""Unit tests for the actor key pair store."""

from __future__ import annotations

from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from core.errors import FedInvalidArgumentError, FedNotFoundError
from store.concurrent_map import ConcurrentMap
from store.key_store import KeyStore

ACTOR_IRI = "https://example.com/~alice"


def _store() -> tuple[KeyStore, ConcurrentMap[Any]]:
    substrate: ConcurrentMap[Any] = ConcurrentMap(4)
    return KeyStore(substrate), substrate


def test_save_key_returns_pem_public_key() -> None:
    """Saving an RSA key should return its PEM public key record."""
    store, _ = _store()
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    public_key = store.save_key(ACTOR_IRI, private_key)

    assert public_key.id == f"{ACTOR_IRI}#main"
    assert public_key.owner == ACTOR_IRI
    assert public_key.public_key_pem.startswith("-----BEGIN PUBLIC KEY-----")


def test_load_key_returns_saved_key() -> None:
    """Loading should return the key stored for the actor."""
    store, substrate = _store()
    private_key = ed25519.Ed25519PrivateKey.generate()
    store.save_key(ACTOR_IRI, private_key)

    assert store.load_key(ACTOR_IRI) is private_key
    assert substrate.contains(f"{ACTOR_IRI}/privateKey")


def test_save_key_accepts_ec_keys() -> None:
    """EC keys should be supported."""
    store, _ = _store()

    public_key = store.save_key(ACTOR_IRI, ec.generate_private_key(ec.SECP256R1()))

    assert "PUBLIC KEY" in public_key.public_key_pem


def test_save_key_rejects_unsupported_values() -> None:
    """Non-key values should be rejected."""
    store, _ = _store()

    with pytest.raises(FedInvalidArgumentError):
        store.save_key(ACTOR_IRI, "not a key")  # type: ignore[arg-type]


def test_load_key_raises_not_found_without_key() -> None:
    """Loading an unknown actor's key should fail."""
    store, _ = _store()

    with pytest.raises(FedNotFoundError):
        store.load_key(ACTOR_IRI)
