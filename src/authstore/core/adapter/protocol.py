"""Adapter contract expected by the authentication framework."""

from __future__ import annotations

from typing import Protocol

from authstore.core.models import (
    AccountKey,
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionAndUser,
    SessionUpdate,
    UserUpdate,
    VerificationToken,
)


class AuthAdapter(Protocol):
    """Storage operations the authentication framework calls."""

    async def create_user(self, user: AdapterUser) -> AdapterUser | None:
        """Persist a new user and return it with its generated id."""
        ...

    async def get_user(self, user_id: str) -> AdapterUser | None: ...

    async def get_user_by_email(self, email: str) -> AdapterUser | None: ...

    async def get_user_by_account(self, account_key: AccountKey) -> AdapterUser | None: ...

    async def update_user(self, user: UserUpdate) -> AdapterUser | None:
        """Merge the set fields of ``user`` over the stored user."""
        ...

    async def delete_user(self, user_id: str) -> AdapterUser | None: ...

    async def link_account(self, account: AdapterAccount) -> AdapterAccount | None: ...

    async def unlink_account(self, account_key: AccountKey) -> AdapterAccount | None: ...

    async def create_session(self, session: AdapterSession) -> AdapterSession | None: ...

    async def get_session_and_user(self, session_token: str) -> SessionAndUser | None: ...

    async def update_session(
        self, session: SessionUpdate
    ) -> AdapterSession | SessionUpdate | None:
        """Merge the set fields of ``session`` over the stored session."""
        ...

    async def delete_session(self, session_token: str) -> AdapterSession | None: ...

    async def create_verification_token(
        self, verification_token: VerificationToken
    ) -> VerificationToken | None: ...

    async def use_verification_token(
        self, identifier: str, token: str
    ) -> VerificationToken | None:
        """Return the token and delete it so it cannot be used again."""
        ...
