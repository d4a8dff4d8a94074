"""Tests for the index-backed definition cache."""

from __future__ import annotations

import asyncio
import json

from vocab_master.lookup_cache import (
    CACHE_KEY_PREFIX,
    DefinitionCache,
    DefinitionResult,
    RequestParams,
    decode_cache_index,
    derive_key,
    encode_cache_index,
)
from vocab_master.repository import CACHE_INDEX_KEY
from vocab_master.storage import PersistedCollection

EPHEMERAL = RequestParams(word="Ephemeral", length=25, tone="formal")


async def _build_cache(store, clock) -> DefinitionCache:
    index = PersistedCollection(
        store,
        CACHE_INDEX_KEY,
        decode=decode_cache_index,
        encode=encode_cache_index,
        default=dict,
    )
    await index.load()
    return DefinitionCache(store, index, clock=clock)


async def _persisted_index(store) -> dict:
    raw = await store.get(CACHE_INDEX_KEY)
    return json.loads(raw) if raw is not None else {}


def test_store_then_lookup_round_trip(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        stored = definition_factory("Ephemeral", tone="formal").with_cache_metadata(
            requested_length=25
        )

        assert await cache.store(EPHEMERAL, stored) is True
        hit = await cache.lookup(RequestParams(word=" ephemeral", length="25", tone="FORMAL"))

        key = derive_key(EPHEMERAL)
        assert hit is not None
        assert hit.cache_hit is True
        assert hit.result == stored.result
        assert hit.requested_length == 25
        assert hit.saved_at == clock.now
        assert cache.index == {key: clock.now}
        assert await _persisted_index(flaky_store) == {key: clock.now}

        raw_entry = json.loads(await flaky_store.get(key))
        assert raw_entry["savedAt"] == clock.now
        assert raw_entry["cacheHit"] is False

    asyncio.run(run_test())


def test_lookup_skips_store_when_key_is_not_indexed(flaky_store, clock):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        flaky_store.get_calls.clear()

        assert await cache.lookup(EPHEMERAL) is None
        assert flaky_store.get_calls == []

    asyncio.run(run_test())


def test_lookup_heals_index_when_entry_is_missing(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        await flaky_store.remove(derive_key(EPHEMERAL))

        assert await cache.lookup(EPHEMERAL) is None
        assert EPHEMERAL not in cache
        assert await _persisted_index(flaky_store) == {}

    asyncio.run(run_test())


def test_lookup_heals_index_when_entry_is_corrupt(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        await flaky_store.set(derive_key(EPHEMERAL), "{not json")

        assert await cache.lookup(EPHEMERAL) is None
        assert len(cache) == 0

    asyncio.run(run_test())


def test_lookup_heals_index_when_entry_lacks_required_fields(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        await flaky_store.set(derive_key(EPHEMERAL), json.dumps({"word": "Ephemeral"}))

        assert await cache.lookup(EPHEMERAL) is None
        assert len(cache) == 0

    asyncio.run(run_test())


def test_lookup_heals_index_when_read_fails(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        flaky_store.fail_get_keys.add(derive_key(EPHEMERAL))

        assert await cache.lookup(EPHEMERAL) is None
        assert cache.index == {}

    asyncio.run(run_test())


def test_failed_store_leaves_index_unchanged(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        flaky_store.fail_set_prefix = CACHE_KEY_PREFIX

        assert await cache.store(EPHEMERAL, definition_factory("Ephemeral")) is False
        assert cache.index == {}
        assert derive_key(EPHEMERAL) not in flaky_store
        assert await _persisted_index(flaky_store) == {}

    asyncio.run(run_test())


def test_store_overwrites_previous_entry(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral", result="First."))
        await cache.store(EPHEMERAL, definition_factory("Ephemeral", result="Second."))

        hit = await cache.lookup(EPHEMERAL)
        assert hit is not None
        assert hit.result == "Second."
        assert len(cache) == 1

    asyncio.run(run_test())


def test_clear_removes_entries_and_empties_index(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        other = RequestParams(word="Serendipity", length=30)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        await cache.store(other, definition_factory("Serendipity"))

        outcome = await cache.clear()

        assert outcome.ok
        assert outcome.count == 2
        assert cache.index == {}
        assert await _persisted_index(flaky_store) == {}
        assert derive_key(EPHEMERAL) not in flaky_store
        assert derive_key(other) not in flaky_store

    asyncio.run(run_test())


def test_clear_empties_index_even_when_bulk_remove_fails(flaky_store, clock, definition_factory):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        await cache.store(EPHEMERAL, definition_factory("Ephemeral"))
        flaky_store.fail_remove_many = True

        outcome = await cache.clear()

        assert not outcome.ok
        assert outcome.count == 1
        assert outcome.error
        assert cache.index == {}
        # The orphaned entry is unreachable because lookups consult the index first.
        assert derive_key(EPHEMERAL) in flaky_store
        assert await cache.lookup(EPHEMERAL) is None

    asyncio.run(run_test())


def test_clear_on_empty_cache_reports_zero(flaky_store, clock):
    async def run_test():
        cache = await _build_cache(flaky_store, clock)
        outcome = await cache.clear()
        assert outcome.ok
        assert outcome.count == 0

    asyncio.run(run_test())


def test_definition_result_preserves_unknown_fields():
    payload = {
        "word": "Ephemeral",
        "result": "Lasting a very short time.",
        "actualLength": 5,
        "status": "ok",
        "config": {"tone": "formal", "context": None, "effectiveLang": "en"},
        "phonetic": "/əˈfem(ə)rəl/",
    }

    result = DefinitionResult.from_dict(payload)

    assert result.config.effective_lang == "en"
    assert result.extra == {"phonetic": "/əˈfem(ə)rəl/"}
    assert result.to_dict()["phonetic"] == "/əˈfem(ə)rəl/"
    assert "savedAt" not in result.to_dict()
