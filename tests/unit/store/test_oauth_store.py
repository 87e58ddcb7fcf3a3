"""Unit tests for the OAuth2 client and token store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from core.errors import FedInvalidArgumentError, FedNotFoundError
from core.oauth_types import AccessData, AuthorizeData, OAuthClient
from store.concurrent_map import ConcurrentMap
from store.oauth_store import OAuthStore


def _store() -> OAuthStore:
    return OAuthStore(ConcurrentMap[Any](4))


def test_client_lifecycle() -> None:
    """Clients should be created, updated, listed and removed."""
    store = _store()
    store.create_client(OAuthClient(id="b", secret="s"))
    store.create_client(OAuthClient(id="a", secret="s"))

    store.update_client(OAuthClient(id="a", secret="rotated"))

    assert store.get_client("a").secret == "rotated"
    assert [client.id for client in store.list_clients()] == ["a", "b"]
    store.remove_client("a")
    with pytest.raises(FedNotFoundError):
        store.get_client("a")


def test_create_client_rejects_duplicate_id() -> None:
    """Registering the same client twice should fail."""
    store = _store()
    store.create_client(OAuthClient(id="a"))

    with pytest.raises(FedInvalidArgumentError):
        store.create_client(OAuthClient(id="a"))


def test_update_client_requires_existing_client() -> None:
    """Updating an unknown client should fail."""
    with pytest.raises(FedNotFoundError):
        _store().update_client(OAuthClient(id="ghost"))


def test_authorize_round_trip_and_removal() -> None:
    """Authorization codes should load until removed."""
    store = _store()
    data = AuthorizeData(code="code-1", client_id="a", redirect_uri="https://app.example/cb")
    store.save_authorize(data)

    assert store.load_authorize("code-1") == data
    store.remove_authorize("code-1")
    with pytest.raises(FedNotFoundError):
        store.load_authorize("code-1")


def test_refresh_token_resolves_access_data() -> None:
    """A refresh token should load the access record it came with."""
    store = _store()
    data = AccessData(access_token="access-1", client_id="a", refresh_token="refresh-1")
    store.save_access(data)

    assert store.load_access("access-1") == data
    assert store.load_refresh("refresh-1") == data


def test_remove_access_drops_refresh_token() -> None:
    """Removing an access token should also drop its refresh token."""
    store = _store()
    store.save_access(AccessData(access_token="access-1", client_id="a", refresh_token="refresh-1"))

    store.remove_access("access-1")

    with pytest.raises(FedNotFoundError):
        store.load_access("access-1")
    with pytest.raises(FedNotFoundError):
        store.load_refresh("refresh-1")


def test_remove_refresh_keeps_access_token() -> None:
    """Removing a refresh token should leave the access token usable."""
    store = _store()
    store.save_access(AccessData(access_token="access-1", client_id="a", refresh_token="refresh-1"))

    store.remove_refresh("refresh-1")

    assert store.load_access("access-1").client_id == "a"
    with pytest.raises(FedNotFoundError):
        store.load_refresh("refresh-1")


def test_empty_token_is_rejected() -> None:
    """Empty keys should be rejected before touching storage."""
    with pytest.raises(FedInvalidArgumentError):
        _store().load_access("")


def test_access_data_reports_expiry() -> None:
    """Access data should expire after its lifetime."""
    issued = datetime.now(timezone.utc) - timedelta(hours=2)

    assert AccessData(access_token="t", client_id="a", created_at=issued).expired
    assert not AccessData(access_token="t", client_id="a").expired
