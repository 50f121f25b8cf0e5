"""Implementações do store de leads.

Memory: desenvolvimento e testes (sem persistência entre reinícios).
Redis: staging e produção, compartilhado entre instâncias.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from app.protocols.lead_store import LeadStoreProtocol

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

LEAD_PREFIX = "lead:"


def _mask(key: str) -> str:
    return key[:6] + "***"


class MemoryLeadStore(LeadStoreProtocol):
    """Store de leads em memória com expiração por TTL."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # key -> (json, expires_at)

    def _cleanup_expired(self) -> None:
        """Remove entradas expiradas (flow_tokens abandonados)."""
        now = time.time()
        expired = [k for k, (_, expires_at) in self._store.items() if expires_at < now]
        for k in expired:
            del self._store[k]

    async def get(self, key: str) -> dict[str, Any] | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if time.time() > expires_at:
            del self._store[key]
            return None
        return json.loads(data)

    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int = 3600) -> None:
        self._cleanup_expired()
        self._store[key] = (json.dumps(value), time.time() + ttl_seconds)
        logger.debug("lead_saved", extra={"lead_key": _mask(key), "ttl": ttl_seconds})


class RedisLeadStore(LeadStoreProtocol):
    """Store de leads em Redis (SETEX com JSON sob o prefixo `lead:`)."""

    def __init__(self, redis_client: AsyncRedis) -> None:
        self._redis = redis_client

    def _key(self, key: str) -> str:
        return f"{LEAD_PREFIX}{key}"

    async def get(self, key: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._key(key))
        if data is None:
            return None
        try:
            value = json.loads(data if isinstance(data, str) else data.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "lead_parse_error",
                extra={"lead_key": _mask(key), "error_type": type(exc).__name__},
            )
            return None
        return value if isinstance(value, dict) else None

    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int = 3600) -> None:
        await self._redis.setex(self._key(key), ttl_seconds, json.dumps(value))
        logger.debug("lead_saved", extra={"lead_key": _mask(key), "ttl": ttl_seconds})
