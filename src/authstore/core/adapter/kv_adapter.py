"""Key-value adapter for the authentication framework.

Maps users, linked accounts, sessions and verification tokens onto a flat
key space:

- ``user:<id>``: user record
- ``user:email:<email>``: id of the user with that email
- ``user:account:<provider>:<providerAccountId>``: account record
- ``user:session:<sessionToken>``: session record
- ``user:token:<identifier>:<token>``: verification token record

Accounts and sessions are given a backend expiry so the store removes them
once their expiry instant passes. Nothing here is transactional; each
operation is a short sequence of single-key calls.

With the default ``suppress`` error policy a backend failure is reported to
the caller exactly like a missing record (``None``), so "store is down" and
"no such record" look the same. Failures are still logged. Use the ``raise``
policy to get :class:`~authstore.core.errors.BackendError` instead.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, TypeVar

from loguru import logger
from pydantic import ValidationError

from authstore.core.errors import BackendError, RecordDecodeError
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
from authstore.core.models.adapter import AdapterModel
from authstore.core.storage.backend import KeyValueBackend
from authstore.core.storage.codec import decode_record, encode_record
from authstore.core.storage.keys import KeyLayout
from authstore.runtime.config.config_data import (
    AdapterConfig,
    ConfigData,
    KeyPrefixConfig,
)

M = TypeVar("M", bound=AdapterModel)


class KeyValueAdapter:
    """Authentication adapter backed by a :class:`KeyValueBackend`."""

    def __init__(
        self,
        backend: KeyValueBackend,
        keys: KeyPrefixConfig | None = None,
        options: AdapterConfig | None = None,
    ):
        self._backend = backend
        self._keys = KeyLayout(keys)
        self._options = options or AdapterConfig()

    @classmethod
    def from_config(cls, backend: KeyValueBackend, config: ConfigData) -> "KeyValueAdapter":
        """Build an adapter from loaded configuration."""
        return cls(backend, keys=config.keys, options=config.adapter)

    @property
    def keys(self) -> KeyLayout:
        return self._keys

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    # Helpers

    async def _get_object(self, key: str, model: type[M]) -> M | None:
        value = await self._backend.get(key)
        if value is None:
            return None

        try:
            record = decode_record(
                value, self._options.date_decoding, keep=model.string_fields()
            )
            return model.model_validate(record)
        except (RecordDecodeError, ValidationError) as e:
            logger.warning("Ignoring malformed record at {}: {}", key, e)
            return None

    async def _save_object(self, key: str, obj: M) -> M:
        await self._backend.set(key, encode_record(obj.to_record()))
        return obj

    async def _expire(self, key: str, when: datetime) -> None:
        try:
            await self._backend.expire_at(key, when)
        except BackendError as e:
            if self._options.error_policy == "raise":
                raise
            logger.warning("Could not set expiry on {}: {}", key, e)

    def _failed(self, operation: str, error: BackendError, fallback: Any = None) -> Any:
        if self._options.error_policy == "raise":
            raise error
        logger.warning(
            "{} failed, treating as not found",
            operation,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        return fallback

    async def _set_user(self, user: AdapterUser) -> AdapterUser:
        user_id = str(uuid.uuid4())
        record = user.to_record()
        record["id"] = user_id
        created = AdapterUser.model_validate(record)

        if created.email:
            await self._backend.set(self._keys.email(created.email), user_id)

        logger.debug("Creating user {}", user_id)
        return await self._save_object(self._keys.user(user_id), created)

    # Users

    async def create_user(self, user: AdapterUser) -> AdapterUser | None:
        """Store a new user under a generated id, indexing its email."""
        try:
            return await self._set_user(user)
        except BackendError as e:
            return self._failed("create_user", e)

    async def get_user(self, user_id: str) -> AdapterUser | None:
        try:
            return await self._get_object(self._keys.user(user_id), AdapterUser)
        except BackendError as e:
            return self._failed("get_user", e)

    async def get_user_by_email(self, email: str) -> AdapterUser | None:
        try:
            user_id = await self._backend.get(self._keys.email(email))
            if not user_id:
                return None
            return await self._get_object(self._keys.user(user_id), AdapterUser)
        except BackendError as e:
            return self._failed("get_user_by_email", e)

    async def update_user(self, user: UserUpdate) -> AdapterUser | None:
        """Merge the set fields of ``user`` over the stored record.

        A user without an id is created instead. If the email changes the
        email index entry moves with it.
        """
        if not user.id:
            return await self.create_user(user)

        key = self._keys.user(user.id)
        try:
            previous = await self._get_object(key, AdapterUser)
            record = previous.to_record() if previous else {}
            record.update(user.to_record())
            merged = AdapterUser.model_validate(record)
            await self._save_object(key, merged)

            old_email = previous.email if previous else None
            if merged.email != old_email:
                if old_email:
                    await self._backend.delete(self._keys.email(old_email))
                if merged.email:
                    await self._backend.set(self._keys.email(merged.email), user.id)
            return merged
        except BackendError as e:
            return self._failed("update_user", e)

    async def delete_user(self, user_id: str) -> AdapterUser | None:
        """Delete a user, returning the removed record.

        The email index entry is removed only while it still points at this
        user.
        """
        key = self._keys.user(user_id)
        try:
            user = await self._get_object(key, AdapterUser)
            if user is None:
                return None

            if user.email:
                email_key = self._keys.email(user.email)
                if await self._backend.get(email_key) == user_id:
                    await self._backend.delete(email_key)
            await self._backend.delete(key)
            logger.debug("Deleted user {}", user_id)
            return user
        except BackendError as e:
            return self._failed("delete_user", e)

    # Accounts

    async def get_user_by_account(self, account_key: AccountKey) -> AdapterUser | None:
        """Get the user that owns a provider account."""
        key = self._keys.account(account_key.provider, account_key.provider_account_id)
        try:
            account = await self._get_object(key, AdapterAccount)
            if account is None:
                return None
            return await self._get_object(self._keys.user(account.user_id), AdapterUser)
        except BackendError as e:
            return self._failed("get_user_by_account", e)

    async def link_account(self, account: AdapterAccount) -> AdapterAccount | None:
        """Store an account; it expires together with its access token."""
        key = self._keys.account(account.provider, account.provider_account_id)
        try:
            await self._save_object(key, account)
            if account.expires_at is not None:
                await self._expire(
                    key, datetime.fromtimestamp(account.expires_at, tz=timezone.utc)
                )
            return account
        except BackendError as e:
            return self._failed("link_account", e)

    async def unlink_account(self, account_key: AccountKey) -> AdapterAccount | None:
        key = self._keys.account(account_key.provider, account_key.provider_account_id)
        try:
            account = await self._get_object(key, AdapterAccount)
            if account is None:
                return None
            await self._backend.delete(key)
            return account
        except BackendError as e:
            return self._failed("unlink_account", e)

    # Sessions

    async def create_session(self, session: AdapterSession) -> AdapterSession | None:
        """Store a session.

        Both the session key and the owning user's key are set to expire at
        ``session.expires``.
        """
        key = self._keys.session(session.session_token)
        try:
            await self._save_object(key, session)
            await self._expire(key, session.expires)
            await self._expire(self._keys.user(session.user_id), session.expires)
            return session
        except BackendError as e:
            return self._failed("create_session", e)

    async def get_session_and_user(self, session_token: str) -> SessionAndUser | None:
        """Get a session and its user.

        The user is an empty placeholder when the session's user record is
        missing.
        """
        try:
            session = await self._get_object(
                self._keys.session(session_token), AdapterSession
            )
            if session is None:
                return None

            user = await self._get_object(self._keys.user(session.user_id), AdapterUser)
            return SessionAndUser(session=session, user=user or AdapterUser())
        except BackendError as e:
            return self._failed("get_session_and_user", e)

    async def update_session(
        self, session: SessionUpdate
    ) -> AdapterSession | SessionUpdate | None:
        """Merge the set fields of ``session`` over the stored session.

        Returns the input unchanged if the merge cannot be completed.
        """
        key = self._keys.session(session.session_token)
        try:
            previous = await self._get_object(key, AdapterSession)
            record = previous.to_record() if previous else {}
            record.update(session.to_record())
            merged = AdapterSession.model_validate(record)

            # SET drops the TTL
            await self._save_object(key, merged)
            await self._expire(key, merged.expires)
            return merged
        except BackendError as e:
            return self._failed("update_session", e, fallback=session)
        except ValidationError as e:
            logger.warning("Cannot merge session update for {}: {}", key, e)
            return session

    async def delete_session(self, session_token: str) -> AdapterSession | None:
        key = self._keys.session(session_token)
        try:
            session = await self._get_object(key, AdapterSession)
            if session is None:
                return None
            await self._backend.delete(key)
            return session
        except BackendError as e:
            return self._failed("delete_session", e)

    # Verification tokens

    async def create_verification_token(
        self, verification_token: VerificationToken
    ) -> VerificationToken | None:
        key = self._keys.verification_token(
            verification_token.identifier, verification_token.token
        )
        try:
            await self._save_object(key, verification_token)
            if verification_token.expires is not None:
                await self._expire(key, verification_token.expires)
            return verification_token
        except BackendError as e:
            return self._failed("create_verification_token", e)

    async def use_verification_token(
        self, identifier: str, token: str
    ) -> VerificationToken | None:
        """Return a verification token and delete it.

        The key is deleted whether or not a readable token was found.
        """
        key = self._keys.verification_token(identifier, token)
        try:
            verification_token = await self._get_object(key, VerificationToken)
            await self._backend.delete(key)
            return verification_token
        except BackendError as e:
            return self._failed("use_verification_token", e)
