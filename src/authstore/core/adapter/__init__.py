"""Authentication framework adapter."""

from .kv_adapter import KeyValueAdapter
from .protocol import AuthAdapter

__all__ = ["AuthAdapter", "KeyValueAdapter"]
