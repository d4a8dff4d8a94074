"""Base abstractions for the asynchronous key-value store."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class KeyValueStoreError(RuntimeError):
    """Raised when a store backend cannot complete a read or write."""


class KeyValueStore(ABC):
    """String-keyed persistent store with a single logical namespace.

    Values are opaque strings; callers serialise their own payloads. There are
    no transactions, so multi-key updates are not atomic.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    async def remove_many(self, keys: Iterable[str]) -> None:
        """Delete every key in ``keys`` in one operation."""


__all__ = ["KeyValueStore", "KeyValueStoreError"]
