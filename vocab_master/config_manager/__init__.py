"""High-level configuration management for vocab-master."""
from __future__ import annotations

from .constants import (
    CONF_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DEFINE_ENDPOINT,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_REQUESTED_LENGTH,
    DEFAULT_STORAGE_PATH,
    HISTORY_MAX_ITEMS,
    MAX_REQUESTED_LENGTH,
)
from .loader import ConfigurationError, get_settings, load_configuration, reset_settings
from .settings import (
    EnvironmentOverrides,
    VocabMasterSettings,
    apply_settings_updates,
    load_environment_overrides,
)

__all__ = [
    "CONF_DIR",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DEFINE_ENDPOINT",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_REQUESTED_LENGTH",
    "DEFAULT_STORAGE_PATH",
    "EnvironmentOverrides",
    "HISTORY_MAX_ITEMS",
    "MAX_REQUESTED_LENGTH",
    "VocabMasterSettings",
    "apply_settings_updates",
    "get_settings",
    "load_configuration",
    "load_environment_overrides",
    "reset_settings",
]
