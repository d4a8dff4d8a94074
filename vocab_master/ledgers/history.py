"""Bounded, deduplicated search history."""

from __future__ import annotations

from typing import List, Optional, Tuple

from vocab_master import logging_manager as log_mgr
from vocab_master.clock import Clock, now_ms
from vocab_master.config_manager import HISTORY_MAX_ITEMS
from vocab_master.notifications import Notice, NoticeBoard
from vocab_master.storage import PersistedCollection

from .models import HistoryItem, SortOrder, sort_view

logger = log_mgr.get_logger().getChild("ledgers.history")


class HistoryLedger:
    """Newest-first log of requests, at most one item per identity tuple.

    Stored order is insertion order (newest first). Sorting for presentation
    goes through :meth:`sorted_items` and never touches the stored list.
    """

    def __init__(
        self,
        collection: PersistedCollection[List[HistoryItem]],
        *,
        max_items: int = HISTORY_MAX_ITEMS,
        clock: Clock = now_ms,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self._collection = collection
        self._max_items = max_items
        self._clock = clock
        self._notices = notices

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def items(self) -> Tuple[HistoryItem, ...]:
        return tuple(self._collection.value)

    def __len__(self) -> int:
        return len(self._collection.value)

    async def record(self, item: HistoryItem) -> Optional[HistoryItem]:
        """Prepend ``item`` with a fresh timestamp, replacing any equivalent item.

        Items without a word are ignored and ``None`` is returned.
        """
        if not item.word or not item.word.strip():
            return None
        fresh = item.with_timestamp(self._clock())
        identity = fresh.identity()
        remaining = [existing for existing in self._collection.value if existing.identity() != identity]
        updated = [fresh, *remaining][: self._max_items]
        await self._collection.replace(updated)
        logger.debug(
            "Recorded history item for %s",
            fresh.word,
            extra={"event": "history.recorded", "history_size": len(updated)},
        )
        return fresh

    async def confirm_clear(self) -> int:
        """Delete every history item; callers must have obtained user consent."""
        removed = len(self._collection.value)
        await self._collection.replace([])
        logger.info("Cleared %d history item(s)", removed, extra={"event": "history.cleared"})
        self._notify(Notice.success("Search History Cleared"))
        return removed

    def sorted_items(self, order: SortOrder | str = SortOrder.NEWEST) -> List[HistoryItem]:
        return sort_view(
            self._collection.value,
            order,
            word=lambda item: item.word,
            timestamp=lambda item: item.timestamp,
        )

    def _notify(self, notice: Notice) -> Notice:
        if self._notices is not None:
            self._notices.publish(notice)
        return notice


__all__ = ["HistoryLedger"]
