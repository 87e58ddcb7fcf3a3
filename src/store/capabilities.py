"""Storage capability descriptor.

This module resolves, once per storage instance, which collaborator
stores it exposes. Callers consult the descriptor instead of probing
the storage object at every call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from core.errors import FedUnsupportedError
from core.types import PublicKey


@runtime_checkable
class KeyStorage(Protocol):
    """Private key persistence keyed by actor IRI."""

    def save_key(self, iri: str, private_key: Any) -> PublicKey: ...

    def load_key(self, iri: str) -> Any: ...


@runtime_checkable
class PasswordStorage(Protocol):
    """Password hash persistence keyed by actor IRI."""

    def password_set(self, iri: str, password: bytes | str) -> None: ...

    def password_check(self, iri: str, password: bytes | str) -> None: ...


@runtime_checkable
class MetadataStorage(Protocol):
    """Opaque metadata persistence keyed by IRI."""

    def save_metadata(self, iri: str, value: Any) -> None: ...

    def load_metadata(self, iri: str) -> Any: ...


@runtime_checkable
class OAuthStorage(Protocol):
    """OAuth2 authorize, access, and refresh token persistence."""

    def get_client(self, client_id: str) -> Any: ...

    def save_authorize(self, data: Any) -> None: ...

    def load_authorize(self, code: str) -> Any: ...

    def remove_authorize(self, code: str) -> None: ...

    def save_access(self, data: Any) -> None: ...

    def load_access(self, token: str) -> Any: ...

    def remove_access(self, token: str) -> None: ...

    def load_refresh(self, token: str) -> Any: ...

    def remove_refresh(self, token: str) -> None: ...


@runtime_checkable
class ClientAdminStorage(Protocol):
    """OAuth2 client registration and listing."""

    def create_client(self, client: Any) -> None: ...

    def update_client(self, client: Any) -> None: ...

    def remove_client(self, client_id: str) -> None: ...

    def list_clients(self) -> list[Any]: ...


@dataclass(frozen=True)
class StorageCapabilities:
    """Which collaborator stores a storage instance exposes."""

    keys: bool = False
    passwords: bool = False
    metadata: bool = False
    oauth: bool = False
    client_admin: bool = False

    def supports(self, name: str) -> bool:
        """Return whether the named capability is available."""
        return bool(getattr(self, name, False))

    def require(self, name: str) -> None:
        """Fail unless the named capability is available.

        Raises:
            FedUnsupportedError: If the capability is disabled or unknown.
        """
        if not self.supports(name):
            raise FedUnsupportedError(
                f"Storage does not support '{name}' operations. "
                "Enable it through FEDSTORE_ENABLED_STORES."
            )


def resolve_capabilities(storage: object) -> StorageCapabilities:
    """Resolve the capability descriptor of a storage instance.

    Args:
        storage: Object exposing optional ``key_store``, ``password_store``,
            ``metadata_store`` and ``oauth_store`` attributes.

    Returns:
        Capability descriptor.
    """
    oauth_store = getattr(storage, "oauth_store", None)
    return StorageCapabilities(
        keys=isinstance(getattr(storage, "key_store", None), KeyStorage),
        passwords=isinstance(getattr(storage, "password_store", None), PasswordStorage),
        metadata=isinstance(getattr(storage, "metadata_store", None), MetadataStorage),
        oauth=isinstance(oauth_store, OAuthStorage),
        client_admin=isinstance(oauth_store, ClientAdminStorage),
    )
