"""Testes dos stores de leads (memória e Redis com mock)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from app.infra.stores import lead_store
from app.infra.stores.lead_store import MemoryLeadStore, RedisLeadStore


class TestMemoryLeadStore:
    """Store em memória com TTL."""

    @pytest.mark.asyncio
    async def test_put_and_get(self) -> None:
        store = MemoryLeadStore()

        await store.put("tok", {"name": "Ana"}, ttl_seconds=60)

        assert await store.get("tok") == {"name": "Ana"}

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        assert await MemoryLeadStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_returns_copy(self) -> None:
        """Mutar o valor lido não altera o store."""
        store = MemoryLeadStore()
        await store.put("tok", {"name": "Ana"})

        value = await store.get("tok")
        assert value is not None
        value["name"] = "Bia"

        assert await store.get("tok") == {"name": "Ana"}

    @pytest.mark.asyncio
    async def test_expired_entry_removed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Entrada expirada some na leitura."""
        now = [1000.0]
        monkeypatch.setattr(lead_store.time, "time", lambda: now[0])
        store = MemoryLeadStore()
        await store.put("tok", {"name": "Ana"}, ttl_seconds=10)

        now[0] = 1011.0

        assert await store.get("tok") is None
        assert "tok" not in store._store

    @pytest.mark.asyncio
    async def test_put_sweeps_other_expired_entries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Tokens abandonados somem no próximo put, sem precisar de get."""
        now = [1000.0]
        monkeypatch.setattr(lead_store.time, "time", lambda: now[0])
        store = MemoryLeadStore()
        await store.put("abandoned", {"name": "Ana"}, ttl_seconds=10)
        await store.put("active", {"name": "Bia"}, ttl_seconds=100)

        now[0] = 1011.0
        await store.put("new", {"name": "Caio"}, ttl_seconds=10)

        assert set(store._store) == {"active", "new"}


class TestRedisLeadStore:
    """Store Redis com cliente assíncrono mockado."""

    @pytest.mark.asyncio
    async def test_put_uses_setex_with_prefix(self) -> None:
        redis = AsyncMock()
        store = RedisLeadStore(redis)

        await store.put("tok", {"name": "Ana"}, ttl_seconds=120)

        redis.setex.assert_awaited_once()
        key, ttl, raw = redis.setex.call_args[0]
        assert key == "lead:tok"
        assert ttl == 120
        assert json.loads(raw) == {"name": "Ana"}

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = json.dumps({"name": "Ana"}).encode()

        assert await RedisLeadStore(redis).get("tok") == {"name": "Ana"}
        redis.get.assert_awaited_once_with("lead:tok")

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = None

        assert await RedisLeadStore(redis).get("tok") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [b"{not json", b"[1, 2]", b"\xff\xfe"])
    async def test_get_invalid_payload_returns_none(self, raw: bytes) -> None:
        """Conteúdo corrompido ou não-objeto é tratado como ausente."""
        redis = AsyncMock()
        redis.get.return_value = raw

        assert await RedisLeadStore(redis).get("tok") is None
