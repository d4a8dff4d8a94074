"""Key-value persistence for vocab-master."""
from .collection import CollectionNotLoadedError, PersistedCollection
from .json_kv_store import JsonFileKeyValueStore
from .kv_store_base import KeyValueStore, KeyValueStoreError
from .memory_kv_store import MemoryKeyValueStore

__all__ = [
    "CollectionNotLoadedError",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "KeyValueStoreError",
    "MemoryKeyValueStore",
    "PersistedCollection",
]
