"""Basic adapter scenarios, checked against what is actually in the store.

Each test drives the adapter through its public operations and then reads the
backend directly, so the stored layout is verified along with the results.
"""

from datetime import datetime, timedelta, timezone

import pytest

from authstore.core.adapter import KeyValueAdapter
from authstore.core.models import (
    AccountKey,
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionUpdate,
    UserUpdate,
    VerificationToken,
)
from authstore.core.storage.backend import InMemoryKeyValueBackend
from authstore.core.storage.codec import decode_record
from authstore.runtime.config.config_data import KeyPrefixConfig


class StoreInspector:
    """Reads records straight from the backend."""

    def __init__(self, backend: InMemoryKeyValueBackend, base: str):
        self._backend = backend
        self._base = base

    async def _record(self, key: str):
        value = await self._backend.get(self._base + key)
        return decode_record(value) if value is not None else None

    async def user(self, user_id: str):
        return await self._record(f"user:{user_id}")

    async def account(self, provider: str, provider_account_id: str):
        return await self._record(f"user:account:{provider}:{provider_account_id}")

    async def session(self, session_token: str):
        return await self._record(f"user:session:{session_token}")

    async def verification_token(self, identifier: str, token: str):
        return await self._record(f"user:token:{identifier}:{token}")


@pytest.fixture
def store():
    backend = InMemoryKeyValueBackend()
    adapter = KeyValueAdapter(backend, keys=KeyPrefixConfig(base="testApp:"))
    return adapter, StoreInspector(backend, "testApp:")


@pytest.fixture
def session_expires() -> datetime:
    return (datetime.now(timezone.utc) + timedelta(days=30)).replace(microsecond=0)


@pytest.mark.asyncio
async def test_user_lifecycle(store):
    adapter, db = store

    user = await adapter.create_user(
        AdapterUser(email="fill@murray.com", name="Fill Murray", image="https://www.fillmurray.com/460/300")
    )
    assert await db.user(user.id) == user.to_record()
    assert await adapter.get_user(user.id) == user
    assert (await adapter.get_user_by_email("fill@murray.com")).id == user.id

    verified = datetime(2024, 6, 1, tzinfo=timezone.utc)
    updated = await adapter.update_user(UserUpdate(id=user.id, emailVerified=verified))
    assert (await db.user(user.id))["emailVerified"] == verified
    assert updated.name == "Fill Murray"

    assert await adapter.delete_user(user.id) == updated
    assert await db.user(user.id) is None
    assert await adapter.get_user_by_email("fill@murray.com") is None


@pytest.mark.asyncio
async def test_email_and_account_scenario(store):
    adapter, db = store
    expires_at = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())

    user = await adapter.create_user(AdapterUser(email="a@b.com"))
    assert (await adapter.get_user_by_email("a@b.com")).id == user.id

    await adapter.link_account(
        AdapterAccount(
            provider="github", providerAccountId="42", userId=user.id, expires_at=expires_at
        )
    )
    stored_account = await db.account("github", "42")
    assert stored_account["userId"] == user.id
    assert stored_account["expires_at"] == expires_at

    owner = await adapter.get_user_by_account(AccountKey(provider="github", providerAccountId="42"))
    assert owner == user

    await adapter.unlink_account(AccountKey(provider="github", providerAccountId="42"))
    assert await db.account("github", "42") is None


@pytest.mark.asyncio
async def test_session_lifecycle(store, session_expires):
    adapter, db = store
    user = await adapter.create_user(AdapterUser(email="s@b.com"))

    session = await adapter.create_session(
        AdapterSession(sessionToken="session-token", userId=user.id, expires=session_expires)
    )
    assert await db.session("session-token") == session.to_record()

    result = await adapter.get_session_and_user("session-token")
    assert result.session == session
    assert result.user == user

    later = session_expires + timedelta(days=1)
    updated = await adapter.update_session(SessionUpdate(sessionToken="session-token", expires=later))
    assert (await db.session("session-token"))["expires"] == later
    assert updated.user_id == user.id

    assert (await adapter.delete_session("session-token")).expires == later
    assert await db.session("session-token") is None


@pytest.mark.asyncio
async def test_verification_token_lifecycle(store, session_expires):
    adapter, db = store
    token = VerificationToken(identifier="info@example.com", token="secret-token", expires=session_expires)

    await adapter.create_verification_token(token)
    assert await db.verification_token("info@example.com", "secret-token") == token.to_record()

    assert await adapter.use_verification_token("info@example.com", "secret-token") == token
    assert await db.verification_token("info@example.com", "secret-token") is None
    assert await adapter.use_verification_token("info@example.com", "secret-token") is None
