"""Key-value storage primitives used by the adapter."""

from .backend import InMemoryKeyValueBackend, KeyValueBackend, RedisKeyValueBackend
from .codec import decode_record, encode_record, hydrate_dates
from .keys import KeyLayout

__all__ = [
    "InMemoryKeyValueBackend",
    "KeyLayout",
    "KeyValueBackend",
    "RedisKeyValueBackend",
    "decode_record",
    "encode_record",
    "hydrate_dates",
]
