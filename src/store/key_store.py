"""Actor key pair store.

This module keeps private keys next to their actor in the shared
concurrent map and derives the PEM public key an actor advertises.
"""

from __future__ import annotations

from typing import Any, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, rsa

from core.constants import PRIVATE_KEY_PATH
from core.errors import FedInvalidArgumentError, FedNotFoundError
from core.iri import add_path
from core.logging_config import get_logger
from core.types import PublicKey
from store.concurrent_map import ConcurrentMap

PrivateKey = Union[
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    dsa.DSAPrivateKey,
]
SUPPORTED_KEY_TYPES = (
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    dsa.DSAPrivateKey,
)

_LOGGER = get_logger(__name__)


class KeyStore:
    """Private key persistence keyed by actor IRI."""

    def __init__(self, substrate: ConcurrentMap[Any]) -> None:
        self._map = substrate

    def save_key(self, iri: str, private_key: PrivateKey) -> PublicKey:
        """Store a private key for an actor.

        Args:
            iri: Actor IRI.
            private_key: RSA, EC, Ed25519 or DSA private key.

        Returns:
            Public key record with id ``<iri>#main`` and PEM body.

        Raises:
            FedInvalidArgumentError: If the key type is unsupported.
        """
        if not isinstance(private_key, SUPPORTED_KEY_TYPES):
            raise FedInvalidArgumentError(
                f"Unsupported private key type {type(private_key).__name__}. "
                "Use an RSA, EC, Ed25519 or DSA key."
            )
        self._map.put(add_path(iri, PRIVATE_KEY_PATH), private_key)
        _LOGGER.info("private_key_saved", iri=iri, key_type=type(private_key).__name__)
        return PublicKey(
            id=f"{iri}#main",
            owner=iri,
            public_key_pem=public_key_pem(private_key),
        )

    def load_key(self, iri: str) -> PrivateKey:
        """Load the private key stored for an actor.

        Raises:
            FedNotFoundError: If no key is stored for the IRI.
        """
        private_key = self._map.get(add_path(iri, PRIVATE_KEY_PATH))
        if private_key is None:
            raise FedNotFoundError(f"Unable to find private key for iri {iri}.")
        return private_key


def public_key_pem(private_key: PrivateKey) -> str:
    """Encode the public half of a private key as PEM SubjectPublicKeyInfo."""
    encoded = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return encoded.decode("ascii")
