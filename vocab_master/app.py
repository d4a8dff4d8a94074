"""Wire settings, storage and services into one application object."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from vocab_master import logging_manager as log_mgr
from vocab_master.clock import Clock, now_ms
from vocab_master.config_manager import VocabMasterSettings, get_settings
from vocab_master.ledgers import FavoritesSet, HistoryItem, HistoryLedger, QuizList
from vocab_master.lookup_cache import CacheClearResult, DefinitionCache, RequestParams
from vocab_master.notifications import Notice, NoticeBoard
from vocab_master.repository import StateRepository
from vocab_master.services import (
    DefineOutcome,
    DefineServiceClient,
    DefinitionFetcher,
    RequestOrchestrator,
)
from vocab_master.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

logger = log_mgr.get_logger().getChild("app")

CACHE_CLEAR_FAILED_MESSAGE = "Cache clear failed. Some items might remain."


def build_store(settings: VocabMasterSettings) -> KeyValueStore:
    """Return the key-value backend configured by ``settings.storage_path``.

    ``":memory:"`` selects a process-local store with no persistence.
    """
    if settings.storage_path == ":memory:":
        logger.debug("Using in-memory store", extra={"event": "app.store.memory"})
        return MemoryKeyValueStore()
    path = Path(settings.storage_path).expanduser()
    logger.debug("Using JSON store at %s", path, extra={"event": "app.store.json"})
    return JsonFileKeyValueStore(path)


class VocabMaster:
    """Single entry point used by the CLI and by embedding callers."""

    def __init__(
        self,
        settings: Optional[VocabMasterSettings] = None,
        *,
        store: Optional[KeyValueStore] = None,
        fetcher: Optional[DefinitionFetcher] = None,
        clock: Clock = now_ms,
        quiz_id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store if store is not None else build_store(self.settings)
        self.notices = NoticeBoard()
        self.repository = StateRepository(self.store)
        self.cache = DefinitionCache(self.store, self.repository.cache_index, clock=clock)
        self.history = HistoryLedger(
            self.repository.history,
            max_items=self.settings.history_max_items,
            clock=clock,
            notices=self.notices,
        )
        self.favorites = FavoritesSet(self.repository.favorites, clock=clock, notices=self.notices)
        quiz_kwargs: dict[str, Any] = {}
        if quiz_id_factory is not None:
            quiz_kwargs["id_factory"] = quiz_id_factory
        self.quiz_list = QuizList(self.repository.quiz_list, notices=self.notices, **quiz_kwargs)

        self._owned_client: Optional[DefineServiceClient] = None
        if fetcher is None:
            self._owned_client = DefineServiceClient(
                self.settings.define_endpoint,
                timeout_seconds=self.settings.define_timeout_seconds,
            )
            fetcher = self._owned_client
        self.orchestrator = RequestOrchestrator(
            self.cache,
            self.history,
            fetcher,
            max_requested_length=self.settings.max_requested_length,
            notices=self.notices,
            wait_ready=self.repository.wait_ready,
        )

    async def initialize(self) -> None:
        await self.repository.initialize()

    async def define(
        self,
        word: str,
        length: Any,
        tone: Optional[str] = None,
        context: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> DefineOutcome:
        params = RequestParams(word=word, length=length, tone=tone, context=context, lang=lang)
        return await self.orchestrator.define(params)

    async def replay(self, item: HistoryItem) -> DefineOutcome:
        return await self.orchestrator.replay(item)

    async def define_featured(self) -> DefineOutcome:
        return await self.orchestrator.define_featured()

    async def clear_cache(self) -> CacheClearResult:
        """Clear cached definitions and announce the outcome."""
        await self.repository.wait_ready()
        outcome = await self.cache.clear()
        if outcome.ok:
            self.notices.publish(
                Notice.success(f"{outcome.count} definition(s) cleared from cache.")
            )
        else:
            self.notices.publish(Notice.error(CACHE_CLEAR_FAILED_MESSAGE))
        return outcome

    async def clear_history(self) -> int:
        await self.repository.wait_ready()
        return await self.history.confirm_clear()

    async def quiz_definition(self, item_id: str) -> Optional[str]:
        """Return cached definition text for a quiz item, never touching the network.

        The lookup uses the configured default length with no tone, context or
        language, so only definitions requested with those settings match.
        """
        await self.repository.wait_ready()
        item = self.quiz_list.get(item_id)
        if item is None:
            return None
        entry = await self.cache.lookup(
            RequestParams(word=item.word, length=self.settings.default_requested_length)
        )
        return entry.result if entry is not None else None

    async def aclose(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.aclose()

    async def __aenter__(self) -> "VocabMaster":
        await self.initialize()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


__all__ = ["CACHE_CLEAR_FAILED_MESSAGE", "VocabMaster", "build_store"]
