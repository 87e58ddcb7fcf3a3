"""OAuth2 record types stored alongside federated items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


@dataclass(frozen=True)
class OAuthClient:
    """Registered OAuth2 client application.

    Attributes:
        id: Client identifier.
        secret: Client secret.
        redirect_uri: Registered redirect URI.
        user_data: Opaque application data, usually the owning actor IRI.
    """

    id: str
    secret: str = ""
    redirect_uri: str = ""
    user_data: str | None = None


@dataclass(frozen=True)
class AuthorizeData:
    """Issued authorization code."""

    code: str
    client_id: str
    expires_in: int = 600
    scope: str = ""
    redirect_uri: str = ""
    state: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_data: str | None = None

    @property
    def expired(self) -> bool:
        """Whether the code is past its lifetime."""
        return _is_expired(self.created_at, self.expires_in)


@dataclass(frozen=True)
class AccessData:
    """Issued access token with its optional refresh token."""

    access_token: str
    client_id: str
    refresh_token: str = ""
    expires_in: int = 3600
    scope: str = ""
    redirect_uri: str = ""
    authorize_code: str = ""
    previous_access_token: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_data: str | None = None

    @property
    def expired(self) -> bool:
        """Whether the token is past its lifetime."""
        return _is_expired(self.created_at, self.expires_in)


def _is_expired(created_at: datetime, expires_in: int) -> bool:
    return datetime.now(timezone.utc) > created_at + timedelta(seconds=expires_in)
