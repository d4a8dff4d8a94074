"""Store-backed snapshot collections with a load-then-persist lifecycle."""
from __future__ import annotations

import json
from typing import Any, Callable, Generic, Optional, TypeVar

from vocab_master import logging_manager as log_mgr

from .kv_store_base import KeyValueStore, KeyValueStoreError

logger = log_mgr.get_logger().getChild("storage.collection")

T = TypeVar("T")


class CollectionNotLoadedError(RuntimeError):
    """Raised when a collection is used before :meth:`PersistedCollection.load`."""


class PersistedCollection(Generic[T]):
    """In-memory live copy of one collection mirrored to a single store key.

    The whole collection is written as a JSON snapshot after every change, so
    concurrent writers resolve as last-write-wins rather than merging deltas.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        *,
        decode: Callable[[Any], T],
        encode: Callable[[T], Any],
        default: Callable[[], T],
    ) -> None:
        self._store = store
        self._key = key
        self._decode = decode
        self._encode = encode
        self._default = default
        self._value: Optional[T] = None
        self._loaded = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def value(self) -> T:
        if not self._loaded:
            raise CollectionNotLoadedError(f"Collection {self._key!r} has not been loaded")
        return self._value  # type: ignore[return-value]

    async def load(self) -> T:
        """Read the snapshot, falling back to the empty value on any failure."""
        value = self._default()
        try:
            raw = await self._store.get(self._key)
            if raw is not None:
                value = self._decode(json.loads(raw))
        except (KeyValueStoreError, ValueError, TypeError, KeyError) as exc:
            logger.warning(
                "Failed to load %s; starting from an empty collection: %s",
                self._key,
                exc,
                extra={"event": "storage.collection.load_failed", "collection": self._key},
            )
            value = self._default()
        self._value = value
        self._loaded = True
        return value

    async def replace(self, value: T) -> bool:
        """Swap in ``value`` and mirror it to the store.

        The in-memory copy is updated even when persistence fails; the failure
        is logged and reported through the return value.
        """
        self._value = value
        self._loaded = True
        try:
            await self._store.set(self._key, json.dumps(self._encode(value), ensure_ascii=False))
        except (KeyValueStoreError, OSError) as exc:
            logger.error(
                "Failed to persist %s: %s",
                self._key,
                exc,
                extra={"event": "storage.collection.save_failed", "collection": self._key},
            )
            return False
        return True


__all__ = ["CollectionNotLoadedError", "PersistedCollection"]
