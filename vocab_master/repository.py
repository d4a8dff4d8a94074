"""Process-wide persisted state with an explicit load phase."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from vocab_master import logging_manager as log_mgr
from vocab_master.ledgers import FavoriteItem, HistoryItem, QuizItem, decode_list, encode_list
from vocab_master.lookup_cache import CacheIndex, decode_cache_index, encode_cache_index
from vocab_master.storage import KeyValueStore, PersistedCollection

logger = log_mgr.get_logger().getChild("repository")

FAVORITES_KEY = "@VocabMaster:favorites_v2"
HISTORY_KEY = "@VocabMaster:history_v2"
QUIZ_LIST_KEY = "@VocabMaster:quizList_v2"
CACHE_INDEX_KEY = "@VocabMaster:definitionsCacheIndex_v2"


class RepositoryInitError(RuntimeError):
    """Raised to waiters when the initial load of persisted state failed."""


class StateRepository:
    """Own the four persisted collections and their single initialization.

    Collections are readable only after :meth:`initialize` completes;
    :meth:`wait_ready` lets dependent operations suspend until then.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.favorites: PersistedCollection[List[FavoriteItem]] = PersistedCollection(
            store,
            FAVORITES_KEY,
            decode=decode_list(FavoriteItem.from_dict),
            encode=encode_list,
            default=list,
        )
        self.history: PersistedCollection[List[HistoryItem]] = PersistedCollection(
            store,
            HISTORY_KEY,
            decode=decode_list(HistoryItem.from_dict),
            encode=encode_list,
            default=list,
        )
        self.quiz_list: PersistedCollection[List[QuizItem]] = PersistedCollection(
            store,
            QUIZ_LIST_KEY,
            decode=decode_list(QuizItem.from_dict),
            encode=encode_list,
            default=list,
        )
        self.cache_index: PersistedCollection[CacheIndex] = PersistedCollection(
            store,
            CACHE_INDEX_KEY,
            decode=decode_cache_index,
            encode=encode_cache_index,
            default=dict,
        )
        self._ready = asyncio.Event()
        self._initializing = False
        self._failure: Optional[BaseException] = None

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set() and self._failure is None

    async def initialize(self) -> None:
        """Load every collection once; later calls wait for the first load.

        A load that fails unexpectedly still releases waiters: they receive
        :class:`RepositoryInitError` instead of blocking forever.
        """
        if self._ready.is_set() or self._initializing:
            await self.wait_ready()
            return
        self._initializing = True
        try:
            for collection in (self.favorites, self.history, self.quiz_list, self.cache_index):
                await collection.load()
        except Exception as exc:
            self._failure = exc
            logger.error(
                "Persisted state failed to load: %s",
                exc,
                exc_info=True,
                extra={"event": "repository.failed"},
            )
            raise
        finally:
            self._initializing = False
            self._ready.set()
        logger.info(
            "Loaded persisted state",
            extra={
                "event": "repository.ready",
                "favorites": len(self.favorites.value),
                "history": len(self.history.value),
                "quiz_list": len(self.quiz_list.value),
                "cached_definitions": len(self.cache_index.value),
            },
        )

    async def wait_ready(self) -> None:
        await self._ready.wait()
        if self._failure is not None:
            raise RepositoryInitError("Persisted state could not be loaded") from self._failure


__all__ = [
    "CACHE_INDEX_KEY",
    "FAVORITES_KEY",
    "HISTORY_KEY",
    "QUIZ_LIST_KEY",
    "RepositoryInitError",
    "StateRepository",
]
