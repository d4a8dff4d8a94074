"""Cache manager for fetched definitions.

The manager owns two things: the cache index, a persisted mapping of cache key
to last-write timestamp, and the entries themselves, stored one per key in the
key-value store. The index may list keys whose entry has gone missing; every
read path reconciles such keys away before returning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vocab_master import logging_manager as log_mgr
from vocab_master.clock import Clock, now_ms
from vocab_master.storage import KeyValueStore, PersistedCollection

from .keys import RequestParams, derive_key
from .models import CacheEntry, CacheIndex, DefinitionResult

logger = log_mgr.get_logger().getChild("lookup_cache")


@dataclass(frozen=True)
class CacheClearResult:
    """Outcome of :meth:`DefinitionCache.clear`."""

    count: int
    """Number of keys targeted by the bulk removal."""

    error: Optional[str] = None
    """Set when the bulk removal failed; the index is empty regardless."""

    @property
    def ok(self) -> bool:
        return self.error is None


class DefinitionCache:
    """Lookup, write-through and bulk clear for cached definitions."""

    def __init__(
        self,
        store: KeyValueStore,
        index: PersistedCollection[CacheIndex],
        *,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._index = index
        self._clock = clock

    @property
    def index(self) -> CacheIndex:
        """Return a copy of the current index."""
        return dict(self._index.value)

    def __len__(self) -> int:
        return len(self._index.value)

    def __contains__(self, params: object) -> bool:
        if not isinstance(params, RequestParams):
            return False
        return derive_key(params) in self._index.value

    async def lookup(self, params: RequestParams) -> Optional[CacheEntry]:
        """Return the cached entry for ``params`` or ``None``.

        Keys missing from the index short-circuit without store I/O. An indexed
        key whose entry cannot be read is dropped from the index.
        """
        key = derive_key(params)
        if key not in self._index.value:
            return None

        with log_mgr.log_context(cache_key=key):
            try:
                raw = await self._store.get(key)
            except Exception as exc:
                await self._heal(key, reason=f"read failed: {exc}")
                return None

            if raw is None:
                await self._heal(key, reason="entry missing from store")
                return None

            try:
                entry = DefinitionResult.from_json(raw)
            except (ValueError, TypeError) as exc:
                await self._heal(key, reason=f"entry could not be decoded: {exc}")
                return None

            logger.debug("Cache hit", extra={"event": "cache.lookup.hit"})
            return entry.with_cache_metadata(cache_hit=True)

    async def store(self, params: RequestParams, result: DefinitionResult) -> bool:
        """Write ``result`` under the key for ``params`` and index it.

        Returns ``False`` when the store write fails; the index is then left
        untouched so it never points at a write that did not happen.
        """
        key = derive_key(params)
        saved_at = self._clock()
        entry = result.with_cache_metadata(saved_at=saved_at)
        with log_mgr.log_context(cache_key=key):
            try:
                await self._store.set(key, entry.to_json())
            except Exception as exc:
                logger.error(
                    "Cache write failed: %s",
                    exc,
                    extra={"event": "cache.store.failed"},
                )
                return False

            index = dict(self._index.value)
            index[key] = saved_at
            await self._index.replace(index)
            logger.debug("Cached definition", extra={"event": "cache.store.ok"})
        return True

    async def clear(self) -> CacheClearResult:
        """Remove every indexed entry and reset the index to empty."""
        keys = list(self._index.value)
        error: Optional[str] = None
        if keys:
            try:
                await self._store.remove_many(keys)
            except Exception as exc:
                error = str(exc)
                logger.error(
                    "Bulk cache removal failed for %d key(s): %s",
                    len(keys),
                    exc,
                    extra={"event": "cache.clear.failed"},
                )
        # An empty index is always consistent with whatever entries remain.
        await self._index.replace({})
        logger.info(
            "Cleared %d cached definition(s)",
            len(keys),
            extra={"event": "cache.clear.done", "status": "error" if error else "ok"},
        )
        return CacheClearResult(count=len(keys), error=error)

    async def _heal(self, key: str, *, reason: str) -> None:
        logger.warning(
            "Cache inconsistency (%s); removing key from index",
            reason,
            extra={"event": "cache.lookup.healed"},
        )
        index = dict(self._index.value)
        if index.pop(key, None) is not None:
            await self._index.replace(index)


__all__ = ["CacheClearResult", "DefinitionCache"]
