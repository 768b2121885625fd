"""Tests for the in-memory and key-value result stores."""

import json
from typing import Dict, List

import httpx
import pytest
from cachetools import TTLCache

from tweet_verify.domain.models.fact_check_result import FactCheckResult, FactCheckStatus
from tweet_verify.infrastructure.storage.kv_store import KVResultStore, KVStoreConfig
from tweet_verify.infrastructure.storage.memory_store import MemoryResultStore


class FakeKVService:
    """In-process stand-in for a Redis-compatible REST endpoint."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.commands: List[list] = []
        self.available = True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if not self.available:
            return httpx.Response(503, json={"error": "unavailable"})
        command = json.loads(request.content)
        self.commands.append(command)
        name, key = command[0], command[1]
        if name == "SET":
            self.data[key] = command[2]
            return httpx.Response(200, json={"result": "OK"})
        if name == "GET":
            return httpx.Response(200, json={"result": self.data.get(key)})
        return httpx.Response(200, json={"error": f"unknown command {name}"})


@pytest.fixture
def kv_service() -> FakeKVService:
    """Provide a fake key-value service."""
    return FakeKVService()


@pytest.fixture
def kv_store(kv_service) -> KVResultStore:
    """Provide a KV store talking to the fake service."""
    config = KVStoreConfig(url="https://kv.example", token="secret", ttl_seconds=120)
    client = httpx.AsyncClient(transport=httpx.MockTransport(kv_service))
    return KVResultStore(config, fallback=MemoryResultStore(), client=client)


def _record(request_id: str = "1700000000000-abc1234") -> FactCheckResult:
    return FactCheckResult.processing(request_id, "Post text")


@pytest.mark.asyncio
async def test_memory_store_put_get_overwrite(memory_store):
    """Test records can be stored and overwritten."""
    record = _record()
    await memory_store.put(record)
    await memory_store.put(record.complete([], ""))

    stored = await memory_store.get(record.request_id)

    assert stored.status is FactCheckStatus.COMPLETE
    assert await memory_store.get("missing") is None
    assert not memory_store.is_durable


@pytest.mark.asyncio
async def test_memory_store_expires_records():
    """Test records disappear after the retention window."""
    clock = [0.0]
    store = MemoryResultStore(ttl_seconds=60)
    store._cache = TTLCache(maxsize=10, ttl=60, timer=lambda: clock[0])
    await store.put(_record())

    clock[0] = 30.0
    assert await store.get(_record().request_id) is not None
    clock[0] = 61.0
    assert await store.get(_record().request_id) is None


@pytest.mark.asyncio
async def test_kv_store_sets_with_expiry(kv_store, kv_service):
    """Test SET is issued with the prefixed key and TTL."""
    record = _record()

    await kv_store.put(record)

    command = kv_service.commands[0]
    assert command[0] == "SET"
    assert command[1] == f"result:{record.request_id}"
    assert json.loads(command[2])["requestId"] == record.request_id
    assert command[3:] == ["EX", "120"]
    assert (await kv_store.get(record.request_id)) == record
    assert kv_store.is_durable


@pytest.mark.asyncio
async def test_kv_store_missing_record(kv_store):
    """Test an unknown id reads as absent."""
    assert await kv_store.get("nope") is None


@pytest.mark.asyncio
async def test_kv_store_falls_back_to_memory(kv_store, kv_service):
    """Test a write that misses the service is still readable."""
    record = _record()
    kv_service.available = False

    await kv_store.put(record)

    assert await kv_store.get(record.request_id) == record


@pytest.mark.asyncio
async def test_kv_store_newer_fallback_copy_wins(kv_store, kv_service):
    """Test a terminal write held in memory shadows the older processing copy."""
    record = _record()
    await kv_store.put(record)

    kv_service.available = False
    completed = record.complete([], "")
    await kv_store.put(completed)
    kv_service.available = True

    assert (await kv_store.get(record.request_id)).status is FactCheckStatus.COMPLETE

    # Once the service accepts a write again the memory copy is dropped.
    await kv_store.put(completed)
    kv_service.data.clear()
    assert await kv_store.get(record.request_id) is None


@pytest.mark.asyncio
async def test_kv_store_read_failure_is_absent(kv_store, kv_service):
    """Test an unreachable service reads as absent instead of raising."""
    kv_service.available = False

    assert await kv_store.get("1-abc") is None


@pytest.mark.asyncio
async def test_kv_store_corrupt_value(kv_store, kv_service):
    """Test unparseable stored data reads as absent."""
    kv_service.data["result:bad"] = "{not json"

    assert await kv_store.get("bad") is None
