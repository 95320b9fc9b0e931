from datetime import datetime

from authstore.core.errors import BackendError
from authstore.core.storage.backend import KeyValueBackend


class FailingBackend(KeyValueBackend):
    """Backend whose every call fails, as if the store were down."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        raise BackendError("get", key, "connection refused")

    async def set(self, key: str, value: str) -> None:
        self.calls.append(("set", key))
        raise BackendError("set", key, "connection refused")

    async def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        raise BackendError("delete", key, "connection refused")

    async def expire_at(self, key: str, when: datetime) -> bool:
        self.calls.append(("expire_at", key))
        raise BackendError("expire_at", key, "connection refused")

    async def ping(self) -> bool:
        return False
