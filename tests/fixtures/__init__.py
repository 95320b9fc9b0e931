"""Shared pytest fixtures for adapter tests."""

from .store import *  # noqa: F401,F403
