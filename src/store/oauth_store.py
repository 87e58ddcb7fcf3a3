"""OAuth2 client and token store.

Clients, authorization codes, access tokens and refresh tokens live in
the shared concurrent map under ``oauth/...`` keys. A refresh token maps
to the access token it was issued with, so loading a refresh token
returns that access record.
"""

from __future__ import annotations

from typing import Any

from core.constants import (
    OAUTH_ACCESS_PREFIX,
    OAUTH_AUTHORIZE_PREFIX,
    OAUTH_CLIENTS_PREFIX,
    OAUTH_REFRESH_PREFIX,
)
from core.errors import FedInvalidArgumentError, FedNotFoundError
from core.iri import add_path
from core.logging_config import get_logger
from core.oauth_types import AccessData, AuthorizeData, OAuthClient
from store.concurrent_map import ConcurrentMap

_LOGGER = get_logger(__name__)


class OAuthStore:
    """OAuth2 persistence over the shared concurrent map."""

    def __init__(self, substrate: ConcurrentMap[Any]) -> None:
        self._map = substrate

    def create_client(self, client: OAuthClient) -> None:
        """Register a new client.

        Raises:
            FedInvalidArgumentError: If the client id is empty or taken.
        """
        key = _key(OAUTH_CLIENTS_PREFIX, client.id)
        _, existed = self._map.load_or_store(key, lambda: client)
        if existed:
            raise FedInvalidArgumentError(f"OAuth client {client.id} already exists.")
        _LOGGER.info("oauth_client_created", client_id=client.id)

    def update_client(self, client: OAuthClient) -> None:
        """Replace a registered client.

        Raises:
            FedNotFoundError: If the client is not registered.
        """
        key = _key(OAUTH_CLIENTS_PREFIX, client.id)
        if not self._map.contains(key):
            raise FedNotFoundError(f"Unable to find OAuth client {client.id}.")
        self._map.put(key, client)

    def remove_client(self, client_id: str) -> None:
        """Unregister a client; removing an unknown client is a no-op."""
        self._map.remove(_key(OAUTH_CLIENTS_PREFIX, client_id))

    def get_client(self, client_id: str) -> OAuthClient:
        """Return a registered client.

        Raises:
            FedNotFoundError: If the client is not registered.
        """
        return self._require(OAUTH_CLIENTS_PREFIX, client_id, "OAuth client")

    def list_clients(self) -> list[OAuthClient]:
        """Return every registered client ordered by id."""
        prefix = f"{OAUTH_CLIENTS_PREFIX}/"
        clients = []
        for key in self._map.keys_with_prefix(prefix):
            client = self._map.get(key)
            if client is not None:
                clients.append(client)
        return clients

    def save_authorize(self, data: AuthorizeData) -> None:
        """Store an authorization code."""
        self._map.put(_key(OAUTH_AUTHORIZE_PREFIX, data.code), data)

    def load_authorize(self, code: str) -> AuthorizeData:
        """Return an authorization code record.

        Raises:
            FedNotFoundError: If the code is unknown.
        """
        return self._require(OAUTH_AUTHORIZE_PREFIX, code, "authorization code")

    def remove_authorize(self, code: str) -> None:
        self._map.remove(_key(OAUTH_AUTHORIZE_PREFIX, code))

    def save_access(self, data: AccessData) -> None:
        """Store an access token and index its refresh token."""
        self._map.put(_key(OAUTH_ACCESS_PREFIX, data.access_token), data)
        if data.refresh_token:
            self._map.put(_key(OAUTH_REFRESH_PREFIX, data.refresh_token), data.access_token)
        _LOGGER.debug(
            "oauth_access_saved",
            client_id=data.client_id,
            has_refresh=bool(data.refresh_token),
        )

    def load_access(self, token: str) -> AccessData:
        """Return an access token record.

        Raises:
            FedNotFoundError: If the token is unknown.
        """
        return self._require(OAUTH_ACCESS_PREFIX, token, "access token")

    def remove_access(self, token: str) -> None:
        """Remove an access token together with its refresh token."""
        data = self._map.remove(_key(OAUTH_ACCESS_PREFIX, token))
        if data is not None and data.refresh_token:
            self._map.remove(_key(OAUTH_REFRESH_PREFIX, data.refresh_token))

    def load_refresh(self, token: str) -> AccessData:
        """Return the access record a refresh token was issued with.

        Raises:
            FedNotFoundError: If the refresh token or its access token is unknown.
        """
        access_token = self._require(OAUTH_REFRESH_PREFIX, token, "refresh token")
        return self.load_access(access_token)

    def remove_refresh(self, token: str) -> None:
        self._map.remove(_key(OAUTH_REFRESH_PREFIX, token))

    def _require(self, prefix: str, name: str, label: str) -> Any:
        value = self._map.get(_key(prefix, name))
        if value is None:
            raise FedNotFoundError(f"Unable to find {label} {name}.")
        return value


def _key(prefix: str, name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise FedInvalidArgumentError(f"OAuth key under {prefix} must be a non-empty string.")
    return add_path(prefix, name)
