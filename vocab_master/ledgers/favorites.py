"""Favorite words and the quiz list."""

from __future__ import annotations

import uuid
from typing import Callable, List, Optional, Tuple

from vocab_master import logging_manager as log_mgr
from vocab_master.clock import Clock, now_ms
from vocab_master.notifications import Notice, NoticeBoard
from vocab_master.storage import PersistedCollection

from .models import FavoriteItem, QuizItem, SortOrder, sort_view

logger = log_mgr.get_logger().getChild("ledgers.favorites")


def _clean_word(word: Optional[str]) -> str:
    return (word or "").strip()


class _WordSet:
    """Shared notice plumbing for the case-insensitive word collections."""

    def __init__(self, notices: Optional[NoticeBoard]) -> None:
        self._notices = notices

    def _notify(self, notice: Notice) -> Notice:
        if self._notices is not None:
            self._notices.publish(notice)
        return notice


class FavoritesSet(_WordSet):
    """Favorite words, unique by case-insensitive word, newest first."""

    def __init__(
        self,
        collection: PersistedCollection[List[FavoriteItem]],
        *,
        clock: Clock = now_ms,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        super().__init__(notices)
        self._collection = collection
        self._clock = clock

    @property
    def items(self) -> Tuple[FavoriteItem, ...]:
        return tuple(self._collection.value)

    def __len__(self) -> int:
        return len(self._collection.value)

    def is_favorite(self, word: Optional[str]) -> bool:
        cleaned = _clean_word(word)
        if not cleaned:
            return False
        folded = cleaned.casefold()
        return any(item.word.casefold() == folded for item in self._collection.value)

    async def add(self, word: Optional[str]) -> Notice:
        cleaned = _clean_word(word)
        if not cleaned:
            return self._notify(Notice.info("Nothing to favorite."))
        if self.is_favorite(cleaned):
            return self._notify(Notice.info(f"{cleaned} is already in favorites."))
        item = FavoriteItem(word=cleaned, timestamp=self._clock())
        await self._collection.replace([item, *self._collection.value])
        logger.debug("Favorited %s", cleaned, extra={"event": "favorites.added"})
        return self._notify(Notice.success(f"Favorited: {cleaned}"))

    async def remove(self, word: Optional[str]) -> Notice:
        cleaned = _clean_word(word)
        if not cleaned:
            return self._notify(Notice.info("Nothing to unfavorite."))
        folded = cleaned.casefold()
        current = self._collection.value
        remaining = [item for item in current if item.word.casefold() != folded]
        if len(remaining) == len(current):
            return self._notify(Notice.info(f"{cleaned} is not in favorites."))
        await self._collection.replace(remaining)
        logger.debug("Unfavorited %s", cleaned, extra={"event": "favorites.removed"})
        return self._notify(Notice.info(f"Unfavorited: {cleaned}"))

    async def toggle(self, word: Optional[str]) -> Notice:
        if self.is_favorite(word):
            return await self.remove(word)
        return await self.add(word)

    def sorted_items(self, order: SortOrder | str = SortOrder.NEWEST) -> List[FavoriteItem]:
        return sort_view(
            self._collection.value,
            order,
            word=lambda item: item.word,
            timestamp=lambda item: item.timestamp,
        )


class QuizList(_WordSet):
    """Words queued for review; each item keeps the id it was created with."""

    def __init__(
        self,
        collection: PersistedCollection[List[QuizItem]],
        *,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        super().__init__(notices)
        self._collection = collection
        self._id_factory = id_factory

    @property
    def items(self) -> Tuple[QuizItem, ...]:
        return tuple(self._collection.value)

    def __len__(self) -> int:
        return len(self._collection.value)

    def get(self, item_id: str) -> Optional[QuizItem]:
        for item in self._collection.value:
            if item.id == item_id:
                return item
        return None

    def contains(self, word: Optional[str]) -> bool:
        folded = _clean_word(word).casefold()
        if not folded:
            return False
        return any(item.word.casefold() == folded for item in self._collection.value)

    async def add(self, word: Optional[str]) -> Notice:
        cleaned = _clean_word(word)
        if not cleaned:
            return self._notify(Notice.info("Nothing to add to the Quiz list."))
        if self.contains(cleaned):
            return self._notify(Notice.info(f"{cleaned} is already in the Quiz list."))
        item = QuizItem(word=cleaned, id=self._id_factory())
        await self._collection.replace([item, *self._collection.value])
        logger.debug("Queued %s for quiz", cleaned, extra={"event": "quiz.added", "quiz_id": item.id})
        return self._notify(Notice.success(f"Added to Quiz List: {cleaned}"))

    async def remove(self, item_id: str) -> Notice:
        current = self._collection.value
        removed = [item for item in current if item.id == item_id]
        if not removed:
            return self._notify(Notice.info("That word is no longer in the Quiz list."))
        await self._collection.replace([item for item in current if item.id != item_id])
        logger.debug("Removed quiz item %s", item_id, extra={"event": "quiz.removed"})
        return self._notify(Notice.info(f"Removed from Quiz List: {removed[0].word}"))


__all__ = ["FavoritesSet", "QuizList"]
