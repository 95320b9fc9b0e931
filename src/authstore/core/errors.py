"""Exception hierarchy for the key-value adapter."""


class AuthStoreError(Exception):
    """Base class for every error raised by authstore."""


class BackendError(AuthStoreError, RuntimeError):
    """The key-value backend failed to complete an operation."""

    def __init__(self, operation: str, key: str | None = None, message: str = ""):
        self.operation = operation
        self.key = key
        detail = f"{operation} failed"
        if key is not None:
            detail += f" for key '{key}'"
        if message:
            detail += f": {message}"
        super().__init__(detail)


class RecordDecodeError(AuthStoreError, ValueError):
    """A stored value could not be decoded into a record."""
