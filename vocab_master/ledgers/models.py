"""Data models for the history ledger, favorites and quiz list."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from vocab_master.lookup_cache import DefinitionResult, RequestParams, coerce_length, normalize_params

IdentityTuple = Tuple[str, int, str, str, str]


def _required_word(data: Dict[str, Any], label: str) -> str:
    word = data.get("word")
    if not isinstance(word, str) or not word.strip():
        raise TypeError(f"{label} word must be a non-empty string")
    return word


def _optional_field(data: Dict[str, Any], name: str) -> Optional[str]:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be a string or null")
    return value


class SortOrder(str, Enum):
    """Presentation orderings for history and favorites."""

    NEWEST = "newest"
    OLDEST = "oldest"
    A_Z = "a-z"
    Z_A = "z-a"


@dataclass(frozen=True, slots=True)
class HistoryOutcome:
    """Summary of the response a history item produced."""

    actual_length: int = 0
    status: str = ""
    effective_lang: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actualLength": self.actual_length,
            "status": self.status,
            "effectiveLang": self.effective_lang,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HistoryOutcome":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise TypeError("history result must be a mapping")
        return cls(
            actual_length=coerce_length(data.get("actualLength")),
            status=str(data.get("status") or ""),
            effective_lang=_optional_field(data, "effectiveLang"),
        )


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """One past request and the summary of its outcome."""

    word: str
    length: int
    tone: Optional[str] = None
    context: Optional[str] = None
    lang: Optional[str] = None
    timestamp: int = 0
    result: HistoryOutcome = field(default_factory=HistoryOutcome)

    def identity(self) -> IdentityTuple:
        """Normalized ``(word, length, tone, context, lang)`` used for dedup."""
        normalized = normalize_params(self.to_request_params())
        return (
            normalized.word,
            normalized.length,
            normalized.tone,
            normalized.context,
            normalized.lang,
        )

    @classmethod
    def from_definition(cls, definition: DefinitionResult) -> "HistoryItem":
        """Summarise a displayed definition using its echoed request settings."""
        return cls(
            word=definition.word,
            length=definition.requested_length,
            tone=definition.config.tone,
            context=definition.config.context,
            lang=definition.config.effective_lang,
            result=HistoryOutcome(
                actual_length=definition.actual_length,
                status=definition.status,
                effective_lang=definition.config.effective_lang,
            ),
        )

    def to_request_params(self) -> RequestParams:
        return RequestParams(
            word=self.word,
            length=self.length,
            tone=self.tone,
            context=self.context,
            lang=self.lang,
        )

    def with_timestamp(self, timestamp: int) -> "HistoryItem":
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "length": self.length,
            "tone": self.tone,
            "context": self.context,
            "lang": self.lang,
            "timestamp": self.timestamp,
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        if not isinstance(data, dict):
            raise TypeError("history item must be a mapping")
        return cls(
            word=_required_word(data, "history"),
            length=coerce_length(data.get("length")),
            tone=_optional_field(data, "tone"),
            context=_optional_field(data, "context"),
            lang=_optional_field(data, "lang"),
            timestamp=int(data.get("timestamp") or 0),
            result=HistoryOutcome.from_dict(data.get("result")),
        )


@dataclass(frozen=True, slots=True)
class FavoriteItem:
    word: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FavoriteItem":
        if not isinstance(data, dict):
            raise TypeError("favorite must be a mapping")
        return cls(word=_required_word(data, "favorite"), timestamp=int(data.get("timestamp") or 0))


@dataclass(frozen=True, slots=True)
class QuizItem:
    word: str
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "id": self.id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuizItem":
        if not isinstance(data, dict):
            raise TypeError("quiz item must be a mapping")
        item_id = data.get("id")
        if not isinstance(item_id, str) or not item_id:
            raise TypeError("quiz item id must be a non-empty string")
        return cls(word=_required_word(data, "quiz"), id=item_id)


T = TypeVar("T")


def decode_list(factory: Callable[[Dict[str, Any]], T]) -> Callable[[Any], List[T]]:
    """Return a decoder turning a JSON array into a list of ``factory`` items."""

    def _decode(data: Any) -> List[T]:
        if not isinstance(data, list):
            raise TypeError("expected a JSON array")
        return [factory(item) for item in data]

    return _decode


def encode_list(items: Iterable[Any]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]


def sort_view(
    items: Iterable[T],
    order: SortOrder | str,
    *,
    word: Callable[[T], str],
    timestamp: Callable[[T], int],
) -> List[T]:
    """Return a sorted copy of ``items``; the input is never reordered."""
    order = SortOrder(order)
    if order is SortOrder.A_Z:
        return sorted(items, key=lambda item: (word(item) or "").casefold())
    if order is SortOrder.Z_A:
        return sorted(items, key=lambda item: (word(item) or "").casefold(), reverse=True)
    if order is SortOrder.OLDEST:
        return sorted(items, key=lambda item: timestamp(item) or 0)
    return sorted(items, key=lambda item: timestamp(item) or 0, reverse=True)


__all__ = [
    "FavoriteItem",
    "HistoryItem",
    "HistoryOutcome",
    "IdentityTuple",
    "QuizItem",
    "SortOrder",
    "decode_list",
    "encode_list",
    "sort_view",
]
