"""Local filesystem-backed key-value store implementation."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from vocab_master import logging_manager as log_mgr

from .kv_store_base import KeyValueStore, KeyValueStoreError

logger = log_mgr.get_logger().getChild("storage.json")

_FORMAT_VERSION = 1


def _atomic_write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")
    tmp_path.replace(path)


class JsonFileKeyValueStore(KeyValueStore):
    """Persist every key in a single JSON document.

    The document is re-read on each access so that changes made by another
    process (or by hand) are observed, and rewritten atomically on each write.
    Reads of an unreadable document raise; a write moves it aside to
    ``<name>.corrupt`` and starts a fresh one.
    """

    def __init__(self, storage_path: Path) -> None:
        self._storage_path = Path(storage_path)

    @property
    def storage_path(self) -> Path:
        return self._storage_path

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise KeyValueStoreError(f"Value for {key!r} must be a string")
        entries = self._load_for_write()
        entries[key] = value
        self._save(entries)

    async def remove(self, key: str) -> None:
        entries = self._load_for_write()
        if entries.pop(key, None) is not None:
            self._save(entries)

    async def remove_many(self, keys: Iterable[str]) -> None:
        entries = self._load_for_write()
        removed = 0
        for key in list(keys):
            if entries.pop(key, None) is not None:
                removed += 1
        if removed:
            self._save(entries)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, str]:
        if not self._storage_path.exists():
            return {}
        try:
            payload = json.loads(self._storage_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise KeyValueStoreError(f"Unable to read {self._storage_path}: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("entries"), dict):
            raise KeyValueStoreError(f"Unexpected document layout in {self._storage_path}")
        return {
            str(key): value
            for key, value in payload["entries"].items()
            if isinstance(value, str)
        }

    def _load_for_write(self) -> Dict[str, str]:
        """Like :meth:`_load`, but an unreadable document is set aside and replaced."""
        try:
            return self._load()
        except KeyValueStoreError as exc:
            corrupt_path = self._storage_path.with_suffix(self._storage_path.suffix + ".corrupt")
            try:
                self._storage_path.replace(corrupt_path)
            except OSError as move_exc:
                raise KeyValueStoreError(
                    f"Unable to move aside {self._storage_path}: {move_exc}"
                ) from move_exc
            logger.warning(
                "Moved unreadable store to %s; starting a new document: %s",
                corrupt_path,
                exc,
                extra={"event": "storage.json.recovered"},
            )
            return {}

    def _save(self, entries: Dict[str, str]) -> None:
        payload = {"version": _FORMAT_VERSION, "entries": entries}
        try:
            _atomic_write_json(self._storage_path, payload)
        except OSError as exc:
            raise KeyValueStoreError(f"Unable to write {self._storage_path}: {exc}") from exc


__all__ = ["JsonFileKeyValueStore"]
