"""Local cache of definitions fetched from the Define Service.

Key Components:
    - RequestParams / derive_key: canonical identity of a request
    - DefinitionResult: a definition payload as displayed and stored
    - DefinitionCache: index-backed lookup, write-through and bulk clear

Usage Example:
    from vocab_master.lookup_cache import DefinitionCache, RequestParams

    cache = DefinitionCache(store, index_collection)
    params = RequestParams(word="Ephemeral", length=25, tone="formal")
    entry = await cache.lookup(params)
    if entry is None:
        await cache.store(params, fetched)
"""

from .keys import (
    CACHE_KEY_PREFIX,
    NormalizedParams,
    RequestParams,
    coerce_length,
    derive_key,
    normalize_params,
    optional_text,
)
from .models import (
    CacheEntry,
    CacheIndex,
    DefinitionConfig,
    DefinitionResult,
    decode_cache_index,
    encode_cache_index,
)
from .cache_manager import CacheClearResult, DefinitionCache

__all__ = [
    # Keys
    "CACHE_KEY_PREFIX",
    "NormalizedParams",
    "RequestParams",
    "coerce_length",
    "derive_key",
    "normalize_params",
    "optional_text",
    # Models
    "CacheEntry",
    "CacheIndex",
    "DefinitionConfig",
    "DefinitionResult",
    "decode_cache_index",
    "encode_cache_index",
    # Cache manager
    "CacheClearResult",
    "DefinitionCache",
]
