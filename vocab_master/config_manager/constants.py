"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = MODULE_DIR.parent.parent.resolve()
CONF_DIR = PROJECT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_API_BASE_URL = "https://define-i05a.onrender.com"
DEFAULT_DEFINE_ENDPOINT = f"{DEFAULT_API_BASE_URL}/api/define"
DEFAULT_STORAGE_PATH = Path("storage") / "vocab_master.json"

MAX_REQUESTED_LENGTH = 250
HISTORY_MAX_ITEMS = 50
DEFAULT_REQUESTED_LENGTH = 30

ENV_PREFIX = "VOCAB_MASTER_"

__all__ = [
    "CONF_DIR",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DEFINE_ENDPOINT",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_REQUESTED_LENGTH",
    "DEFAULT_STORAGE_PATH",
    "ENV_PREFIX",
    "HISTORY_MAX_ITEMS",
    "MAX_REQUESTED_LENGTH",
    "MODULE_DIR",
    "PROJECT_DIR",
]
