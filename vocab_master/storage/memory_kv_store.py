"""In-memory key-value store for ephemeral sessions."""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from .kv_store_base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Keep values in a plain dictionary; nothing survives the process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in list(keys):
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["MemoryKeyValueStore"]
