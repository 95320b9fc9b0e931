"""Adapter record models."""

from .adapter import (
    AccountKey,
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionAndUser,
    SessionUpdate,
    UserUpdate,
    VerificationToken,
)

__all__ = [
    "AccountKey",
    "AdapterAccount",
    "AdapterSession",
    "AdapterUser",
    "SessionAndUser",
    "SessionUpdate",
    "UserUpdate",
    "VerificationToken",
]
