"""Records exchanged with the authentication framework."""

from __future__ import annotations

from datetime import datetime
from types import UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field


class AdapterModel(BaseModel):
    """Base for adapter records.

    Field names are snake_case and carry the framework's camelCase names as
    aliases. Unknown fields are kept so profile and token data survive a
    round trip through the store.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_record(self) -> dict[str, Any]:
        """Dump the fields that were set, keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    @classmethod
    def string_fields(cls) -> frozenset[str]:
        """Wire and attribute names of the fields declared as text."""
        names = set()
        for name, field in cls.model_fields.items():
            annotation = field.annotation
            if get_origin(annotation) in (Union, UnionType):
                is_text = str in get_args(annotation)
            else:
                is_text = annotation is str
            if is_text:
                names.update(n for n in (name, field.alias) if n)
        return frozenset(names)


class AdapterUser(AdapterModel):
    """User record. An instance with no fields is the placeholder user."""

    id: str | None = Field(default=None, description="Generated user identifier")
    email: str | None = Field(default=None, description="Unique email address")
    email_verified: datetime | None = Field(
        default=None, alias="emailVerified", description="Email verification time"
    )
    name: str | None = Field(default=None, description="Display name")
    image: str | None = Field(default=None, description="Avatar URL")


class UserUpdate(AdapterUser):
    """Partial user. Only explicitly set fields are merged."""


class AccountKey(BaseModel):
    """Natural key of a linked account."""

    model_config = ConfigDict(populate_by_name=True)

    provider: str = Field(description="Provider identifier, e.g. 'github'")
    provider_account_id: str = Field(
        alias="providerAccountId", description="Account id at the provider"
    )


class AdapterAccount(AdapterModel):
    """Provider account linked to a user."""

    user_id: str = Field(alias="userId", description="Owning user id")
    type: str = Field(default="oauth", description="Account type")
    provider: str = Field(description="Provider identifier")
    provider_account_id: str = Field(
        alias="providerAccountId", description="Account id at the provider"
    )
    access_token: str | None = Field(default=None, description="OAuth access token")
    refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    expires_at: int | None = Field(
        default=None, description="Access token expiry as epoch seconds"
    )
    token_type: str | None = Field(default=None, description="OAuth token type")
    scope: str | None = Field(default=None, description="Granted scopes")
    id_token: str | None = Field(default=None, description="OIDC ID token")
    session_state: str | None = Field(default=None, description="OIDC session state")

    @property
    def key(self) -> AccountKey:
        return AccountKey(
            provider=self.provider, provider_account_id=self.provider_account_id
        )


class AdapterSession(AdapterModel):
    """Database session for a signed-in user."""

    session_token: str = Field(alias="sessionToken", description="Opaque session token")
    user_id: str = Field(alias="userId", description="Owning user id")
    expires: datetime = Field(description="Session expiry instant")


class SessionUpdate(AdapterModel):
    """Partial session. The token is required to locate the record."""

    session_token: str = Field(alias="sessionToken", description="Opaque session token")
    user_id: str | None = Field(default=None, alias="userId")
    expires: datetime | None = Field(default=None)


class SessionAndUser(BaseModel):
    """A session together with its owning user."""

    session: AdapterSession
    user: AdapterUser


class VerificationToken(AdapterModel):
    """Single-use token, e.g. for email sign-in links."""

    identifier: str = Field(description="Who the token was issued for")
    token: str = Field(description="Token value")
    expires: datetime | None = Field(default=None, description="Token expiry instant")
