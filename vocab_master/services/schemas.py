"""Pydantic schemas for the Define Service request/response contract."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from vocab_master.lookup_cache import (
    DefinitionConfig,
    DefinitionResult,
    RequestParams,
    coerce_length,
    optional_text,
)


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase for JSON serialization."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class CamelModel(BaseModel):
    """Base model that serializes to camelCase for the service."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class DefineRequest(CamelModel):
    """Body of ``POST /api/define``; empty optional fields are omitted."""

    word: str = Field(..., min_length=1)
    length: int = Field(..., ge=1)
    tone: Optional[str] = None
    context: Optional[str] = None
    lang: Optional[str] = None

    @classmethod
    def from_params(cls, params: RequestParams) -> "DefineRequest":
        return cls(
            word=(params.word or "").strip(),
            length=coerce_length(params.length),
            tone=optional_text(params.tone),
            context=optional_text(params.context),
            lang=optional_text(params.lang),
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DefineResponseConfig(CamelModel):
    tone: Optional[str] = None
    context: Optional[str] = None
    effective_lang: Optional[str] = None


class DefineResponse(CamelModel):
    """Successful Define Service payload; unknown fields are kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        extra="allow",
    )

    word: str
    result: str
    actual_length: int = 0
    status: str = ""
    config: DefineResponseConfig = Field(default_factory=DefineResponseConfig)

    def to_definition(self) -> DefinitionResult:
        return DefinitionResult(
            word=self.word,
            result=self.result,
            actual_length=self.actual_length,
            status=self.status,
            config=DefinitionConfig(
                tone=self.config.tone,
                context=self.config.context,
                effective_lang=self.config.effective_lang,
            ),
            extra=dict(self.model_extra or {}),
        )


class DefineErrorResponse(BaseModel):
    """Non-2xx payload; ``message`` is shown verbatim when present."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None


__all__ = [
    "CamelModel",
    "DefineErrorResponse",
    "DefineRequest",
    "DefineResponse",
    "DefineResponseConfig",
    "to_camel",
]
