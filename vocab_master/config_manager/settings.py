"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from vocab_master import logging_manager

from .constants import (
    DEFAULT_DEFINE_ENDPOINT,
    DEFAULT_REQUESTED_LENGTH,
    DEFAULT_STORAGE_PATH,
    HISTORY_MAX_ITEMS,
    MAX_REQUESTED_LENGTH,
)

logger = logging_manager.get_logger().getChild("config")


class VocabMasterSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="ignore")

    define_endpoint: str = DEFAULT_DEFINE_ENDPOINT
    define_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    max_requested_length: int = Field(default=MAX_REQUESTED_LENGTH, ge=1)
    history_max_items: int = Field(default=HISTORY_MAX_ITEMS, ge=1)
    default_requested_length: int = Field(default=DEFAULT_REQUESTED_LENGTH, ge=1)
    storage_path: str = str(DEFAULT_STORAGE_PATH)
    debug: bool = False


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    define_endpoint: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("VOCAB_MASTER_DEFINE_ENDPOINT", "DEFINE_ENDPOINT"),
    )
    define_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_DEFINE_TIMEOUT")
    )
    max_requested_length: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_MAX_REQUESTED_LENGTH")
    )
    history_max_items: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_HISTORY_MAX_ITEMS")
    )
    default_requested_length: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_DEFAULT_LENGTH")
    )
    storage_path: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_STORAGE_PATH")
    )
    debug: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("VOCAB_MASTER_DEBUG")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: VocabMasterSettings, updates: Dict[str, Any]
) -> VocabMasterSettings:
    """Return a validated copy of ``settings`` updated with ``updates``."""

    if not updates:
        return settings
    payload = settings.model_dump()
    payload.update(updates)
    return VocabMasterSettings.model_validate(payload)


__all__ = [
    "EnvironmentOverrides",
    "VocabMasterSettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
