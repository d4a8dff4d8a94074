"""Request parameters and deterministic cache-key derivation.

Two requests share a cache entry exactly when their normalized parameters are
equal. Normalization is total: any combination of missing or malformed
optional fields maps to a well-defined key.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

CACHE_KEY_PREFIX = "@DefinitionCache:"

DEFAULT_TONE = "neutral"
DEFAULT_CONTEXT = "none"
DEFAULT_LANG = "auto"

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class RequestParams:
    """Semantic parameters of a definition request as entered by the user."""

    word: str = ""
    length: Any = None
    tone: Optional[str] = None
    context: Optional[str] = None
    lang: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequestParams":
        return cls(
            word=str(data.get("word") or ""),
            length=data.get("length"),
            tone=optional_text(data.get("tone")),
            context=optional_text(data.get("context")),
            lang=optional_text(data.get("lang")),
        )


@dataclass(frozen=True)
class NormalizedParams:
    """Canonical form of :class:`RequestParams`; every field is populated."""

    word: str
    length: int
    tone: str
    context: str
    lang: str


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_length(value: Any) -> int:
    """Parse ``value`` as a base-10 integer, returning 0 when that is impossible.

    Strings contribute their leading integer (``"25 words"`` -> 25); floats
    are truncated toward zero.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    match = _LEADING_INTEGER.match(str(value))
    if match is None:
        return 0
    return int(match.group(1))


def normalize_params(params: RequestParams) -> NormalizedParams:
    return NormalizedParams(
        word=(params.word or "").strip().lower(),
        length=coerce_length(params.length),
        tone=(params.tone or DEFAULT_TONE).lower(),
        context=(params.context or DEFAULT_CONTEXT).lower(),
        lang=(params.lang or DEFAULT_LANG).lower(),
    )


def derive_key(params: RequestParams) -> str:
    """Return the canonical cache key for ``params``.

    The key is ``CACHE_KEY_PREFIX`` followed by a compact JSON object whose
    fields are emitted in sorted name order.
    """
    normalized = asdict(normalize_params(params))
    body = json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"{CACHE_KEY_PREFIX}{body}"


__all__ = [
    "CACHE_KEY_PREFIX",
    "DEFAULT_CONTEXT",
    "DEFAULT_LANG",
    "DEFAULT_TONE",
    "NormalizedParams",
    "RequestParams",
    "coerce_length",
    "derive_key",
    "normalize_params",
    "optional_text",
]
