"""Build settings from the JSON config file, the environment and CLI flags."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from vocab_master import logging_manager

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH
from .settings import VocabMasterSettings, apply_settings_updates, load_environment_overrides

logger = logging_manager.get_logger().getChild("config")

_ACTIVE_SETTINGS: Optional[VocabMasterSettings] = None


class ConfigurationError(RuntimeError):
    """Raised when the layered configuration fails validation."""


def _read_config_json(path: Optional[Path], label: str = "configuration") -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        logger.debug("No %s found at %s.", label, path, extra={"event": "config.file.missing"})
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning(
            "Skipping %s config at %s: %s",
            label,
            path,
            exc,
            extra={"event": "config.file.invalid"},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring %s at %s: expected a JSON object.",
            label,
            path,
            extra={"event": "config.file.invalid"},
        )
        return {}
    return data


def _resolve_override_path(config_file: Optional[str]) -> Path:
    if not config_file:
        return DEFAULT_LOCAL_CONFIG_PATH
    override_path = Path(config_file).expanduser()
    if not override_path.is_absolute():
        override_path = (Path.cwd() / override_path).resolve()
    return override_path


def load_configuration(
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> VocabMasterSettings:
    """Load the layered configuration and make it the active settings.

    Layers, lowest precedence first: model defaults, ``conf/config.json``,
    ``conf/config.local.json`` (or ``config_file``), ``VOCAB_MASTER_*``
    environment variables, then explicit ``overrides`` such as CLI flags.
    """

    global _ACTIVE_SETTINGS

    payload: Dict[str, Any] = {}
    payload.update(_read_config_json(DEFAULT_CONFIG_PATH, label="default configuration"))
    payload.update(
        _read_config_json(_resolve_override_path(config_file), label="local configuration")
    )

    try:
        settings = VocabMasterSettings.model_validate(payload)
        settings = apply_settings_updates(settings, load_environment_overrides())
        explicit = {key: value for key, value in (overrides or {}).items() if value is not None}
        settings = apply_settings_updates(settings, explicit)
    except ValidationError as exc:
        raise ConfigurationError("Invalid configuration detected") from exc

    _ACTIVE_SETTINGS = settings
    return settings


def get_settings() -> VocabMasterSettings:
    """Return the currently loaded :class:`VocabMasterSettings` instance."""

    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        settings = VocabMasterSettings()
        _ACTIVE_SETTINGS = apply_settings_updates(settings, load_environment_overrides())
    return _ACTIVE_SETTINGS


def reset_settings() -> None:
    """Forget the active settings so the next access reloads them."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


__all__ = ["ConfigurationError", "get_settings", "load_configuration", "reset_settings"]
