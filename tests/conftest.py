"""Shared fixtures and test doubles for the vocab-master test-suite."""

from __future__ import annotations

import os
import tempfile
from typing import Iterable, List, Optional, Set

# Keep test logs out of the project tree; must run before vocab_master is imported.
os.environ.setdefault("VOCAB_MASTER_LOG_DIR", tempfile.mkdtemp(prefix="vocab-master-logs-"))

import pytest

from vocab_master.config_manager import VocabMasterSettings, reset_settings
from vocab_master.lookup_cache import DefinitionConfig, DefinitionResult
from vocab_master.services import DefineRequest
from vocab_master.storage import KeyValueStoreError, MemoryKeyValueStore

_ENV_VARS = (
    "VOCAB_MASTER_DEFINE_ENDPOINT",
    "DEFINE_ENDPOINT",
    "VOCAB_MASTER_DEFINE_TIMEOUT",
    "VOCAB_MASTER_MAX_REQUESTED_LENGTH",
    "VOCAB_MASTER_HISTORY_MAX_ITEMS",
    "VOCAB_MASTER_DEFAULT_LENGTH",
    "VOCAB_MASTER_STORAGE_PATH",
    "VOCAB_MASTER_DEBUG",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class StepClock:
    """Deterministic millisecond clock that advances on every call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1_000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class FlakyStore(MemoryKeyValueStore):
    """Memory store whose operations can be made to fail on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.get_calls: List[str] = []
        self.fail_get_keys: Set[str] = set()
        self.fail_set_prefix: Optional[str] = None
        self.fail_remove_many = False

    async def get(self, key: str) -> Optional[str]:
        self.get_calls.append(key)
        if key in self.fail_get_keys:
            raise KeyValueStoreError(f"read failed for {key}")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set_prefix is not None and key.startswith(self.fail_set_prefix):
            raise KeyValueStoreError(f"write failed for {key}")
        await super().set(key, value)

    async def remove_many(self, keys: Iterable[str]) -> None:
        if self.fail_remove_many:
            raise KeyValueStoreError("bulk remove failed")
        await super().remove_many(keys)


class FakeFetcher:
    """Stand-in for the Define Service that echoes the request back."""

    def __init__(self) -> None:
        self.requests: List[DefineRequest] = []
        self.error: Optional[Exception] = None

    async def define(self, request: DefineRequest) -> DefinitionResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return make_definition(
            request.word,
            actual_length=request.length,
            tone=request.tone or "neutral",
            context=request.context or "none",
            effective_lang=request.lang or "en",
        )


def make_definition(
    word: str,
    *,
    result: Optional[str] = None,
    actual_length: int = 25,
    tone: Optional[str] = "neutral",
    context: Optional[str] = "none",
    effective_lang: Optional[str] = "en",
) -> DefinitionResult:
    return DefinitionResult(
        word=word,
        result=result or f"Definition of {word}.",
        actual_length=actual_length,
        status="ok",
        config=DefinitionConfig(tone=tone, context=context, effective_lang=effective_lang),
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def definition_factory():
    return make_definition


@pytest.fixture
def memory_settings() -> VocabMasterSettings:
    return VocabMasterSettings(storage_path=":memory:")
