from __future__ import annotations

import asyncio
import json

import pytest

from vocab_master.app import VocabMaster
from vocab_master.ledgers import FavoriteItem
from vocab_master.repository import (
    CACHE_INDEX_KEY,
    FAVORITES_KEY,
    HISTORY_KEY,
    QUIZ_LIST_KEY,
    RepositoryInitError,
    StateRepository,
)
from vocab_master.storage import MemoryKeyValueStore


def test_initialize_loads_every_collection_once(flaky_store):
    async def run_test():
        await flaky_store.set(FAVORITES_KEY, json.dumps([{"word": "Ephemeral", "timestamp": 5}]))
        repository = StateRepository(flaky_store)
        assert repository.is_ready is False
        await asyncio.gather(repository.initialize(), repository.initialize())
        await repository.initialize()
        return repository

    repository = asyncio.run(run_test())

    assert repository.is_ready is True
    assert sorted(flaky_store.get_calls) == sorted(
        [FAVORITES_KEY, HISTORY_KEY, QUIZ_LIST_KEY, CACHE_INDEX_KEY]
    )
    assert repository.favorites.value == [FavoriteItem(word="Ephemeral", timestamp=5)]
    assert repository.history.value == []
    assert repository.quiz_list.value == []
    assert repository.cache_index.value == {}


def test_corrupt_collection_falls_back_without_affecting_others():
    store = MemoryKeyValueStore(
        {
            HISTORY_KEY: json.dumps([{"length": 5}]),
            QUIZ_LIST_KEY: json.dumps([{"word": "Ephemeral", "id": "q1"}]),
            CACHE_INDEX_KEY: "not json",
        }
    )

    async def run_test():
        repository = StateRepository(store)
        await repository.initialize()
        return repository

    repository = asyncio.run(run_test())

    assert repository.history.value == []
    assert repository.cache_index.value == {}
    assert [item.id for item in repository.quiz_list.value] == ["q1"]


def test_wait_ready_suspends_until_initialized():
    async def run_test():
        repository = StateRepository(MemoryKeyValueStore())
        waiter = asyncio.create_task(repository.wait_ready())
        await asyncio.sleep(0)
        assert not waiter.done()
        await repository.initialize()
        await asyncio.wait_for(waiter, timeout=1)
        return waiter.done()

    assert asyncio.run(run_test()) is True


@pytest.mark.parametrize(
    "key, snapshot",
    [
        (HISTORY_KEY, [{"word": "old", "length": 5, "tone": 7, "timestamp": 1}]),
        (HISTORY_KEY, [{"word": None, "length": 5}]),
        (HISTORY_KEY, [{"word": "old", "length": 5, "result": {"effectiveLang": ["en"]}}]),
        (FAVORITES_KEY, [{"word": 42, "timestamp": 1}]),
        (QUIZ_LIST_KEY, [{"word": "Ephemeral", "id": None}]),
    ],
)
def test_mistyped_snapshot_falls_back_to_empty(key, snapshot):
    store = MemoryKeyValueStore({key: json.dumps(snapshot)})

    async def run_test():
        repository = StateRepository(store)
        await repository.initialize()
        return repository

    repository = asyncio.run(run_test())

    assert repository.favorites.value == []
    assert repository.history.value == []
    assert repository.quiz_list.value == []


def test_define_works_after_mistyped_history_snapshot(memory_settings, fetcher, clock):
    store = MemoryKeyValueStore(
        {HISTORY_KEY: json.dumps([{"word": "old", "length": 5, "tone": 7, "timestamp": 1}])}
    )

    async def run_test():
        async with VocabMaster(memory_settings, store=store, fetcher=fetcher, clock=clock) as app:
            return app, await app.define("Ephemeral", 25)

    app, outcome = asyncio.run(run_test())

    assert outcome.ok
    assert [item.word for item in app.history.items] == ["Ephemeral"]


class _BrokenStore(MemoryKeyValueStore):
    async def get(self, key):
        raise RuntimeError("disk vanished")


def test_failed_initialize_releases_waiters():
    async def run_test():
        repository = StateRepository(_BrokenStore())
        waiter = asyncio.create_task(repository.wait_ready())
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError, match="disk vanished"):
            await repository.initialize()
        with pytest.raises(RepositoryInitError):
            await asyncio.wait_for(waiter, timeout=1)
        with pytest.raises(RepositoryInitError):
            await repository.wait_ready()
        return repository

    repository = asyncio.run(run_test())

    assert repository.is_ready is False
