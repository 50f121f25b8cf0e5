"""Factories de clientes externos (Redis)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton).

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )
    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("redis_client_created", extra={"host": host})
    return client
