"""Backend key construction."""

from __future__ import annotations

from loguru import logger

from authstore.runtime.config.config_data import KeyPrefixConfig

SEPARATOR = ":"


class KeyLayout:
    """Builds backend keys for every record kind.

    Composite natural keys are joined with ``SEPARATOR`` as-is. Components
    containing the separator are not escaped, so ``("a:b", "c")`` and
    ``("a", "b:c")`` map to the same key.
    """

    def __init__(self, prefixes: KeyPrefixConfig | None = None):
        prefixes = prefixes or KeyPrefixConfig()
        self._user = prefixes.resolved("user")
        self._email = prefixes.resolved("email")
        self._account = prefixes.resolved("account")
        self._session = prefixes.resolved("session")
        self._verification_token = prefixes.resolved("verification_token")

    def user(self, user_id: str) -> str:
        return f"{self._user}{user_id}"

    def email(self, email: str) -> str:
        return f"{self._email}{email}"

    def account(self, provider: str, provider_account_id: str) -> str:
        return self._account + self._join(provider, provider_account_id)

    def session(self, session_token: str) -> str:
        return f"{self._session}{session_token}"

    def verification_token(self, identifier: str, token: str) -> str:
        return self._verification_token + self._join(identifier, token)

    @staticmethod
    def _join(*components: str) -> str:
        for component in components:
            if SEPARATOR in component:
                logger.warning(
                    "Key component {!r} contains separator {!r}; key may collide",
                    component,
                    SEPARATOR,
                )
        return SEPARATOR.join(components)
