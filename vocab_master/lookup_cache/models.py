"""Data models for the definition cache.

A :class:`DefinitionResult` is what the Define Service returns, enriched with
the locally tracked ``requestedLength``, ``savedAt`` and ``cacheHit`` fields.
The stored cache entry is the same structure serialised with ``savedAt`` set.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .keys import coerce_length

_KNOWN_FIELDS = frozenset(
    {"word", "result", "actualLength", "status", "config", "requestedLength", "savedAt", "cacheHit"}
)


@dataclass(frozen=True, slots=True)
class DefinitionConfig:
    """Effective generation settings echoed back by the Define Service."""

    tone: Optional[str] = None
    context: Optional[str] = None
    effective_lang: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tone": self.tone,
            "context": self.context,
            "effectiveLang": self.effective_lang,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DefinitionConfig":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise TypeError("config must be a mapping")
        return cls(
            tone=data.get("tone"),
            context=data.get("context"),
            effective_lang=data.get("effectiveLang"),
        )


@dataclass(frozen=True, slots=True)
class DefinitionResult:
    """A definition as displayed, cached and summarised into history."""

    word: str
    result: str
    actual_length: int = 0
    status: str = ""
    config: DefinitionConfig = field(default_factory=DefinitionConfig)
    requested_length: int = 0
    cache_hit: bool = False
    saved_at: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    """Any additional response fields, preserved verbatim."""

    def with_cache_metadata(
        self,
        *,
        cache_hit: Optional[bool] = None,
        saved_at: Optional[int] = None,
        requested_length: Optional[int] = None,
    ) -> "DefinitionResult":
        """Return a copy with the locally tracked fields replaced."""
        updates: Dict[str, Any] = {}
        if cache_hit is not None:
            updates["cache_hit"] = cache_hit
        if saved_at is not None:
            updates["saved_at"] = saved_at
        if requested_length is not None:
            updates["requested_length"] = requested_length
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "word": self.word,
                "result": self.result,
                "actualLength": self.actual_length,
                "status": self.status,
                "config": self.config.to_dict(),
                "requestedLength": self.requested_length,
                "cacheHit": self.cache_hit,
            }
        )
        if self.saved_at is not None:
            payload["savedAt"] = self.saved_at
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefinitionResult":
        if not isinstance(data, dict):
            raise TypeError("definition payload must be a JSON object")
        if "word" not in data or "result" not in data:
            raise ValueError("definition payload is missing 'word' or 'result'")
        saved_at = data.get("savedAt")
        return cls(
            word=str(data["word"]),
            result=str(data["result"]),
            actual_length=coerce_length(data.get("actualLength")),
            status=str(data.get("status") or ""),
            config=DefinitionConfig.from_dict(data.get("config")),
            requested_length=coerce_length(data.get("requestedLength")),
            cache_hit=bool(data.get("cacheHit", False)),
            saved_at=int(saved_at) if saved_at is not None else None,
            extra={key: value for key, value in data.items() if key not in _KNOWN_FIELDS},
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "DefinitionResult":
        return cls.from_dict(json.loads(json_str))


CacheEntry = DefinitionResult
"""Alias used where a value is known to come from the cache store."""

CacheIndex = Dict[str, int]
"""Cache key -> last write timestamp in epoch milliseconds."""


def decode_cache_index(data: Any) -> CacheIndex:
    if not isinstance(data, dict):
        raise TypeError("cache index must be a JSON object")
    return {str(key): int(value) for key, value in data.items()}


def encode_cache_index(index: CacheIndex) -> Dict[str, int]:
    return dict(index)


__all__ = [
    "CacheEntry",
    "CacheIndex",
    "DefinitionConfig",
    "DefinitionResult",
    "decode_cache_index",
    "encode_cache_index",
]
