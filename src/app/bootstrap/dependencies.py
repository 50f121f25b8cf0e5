"""Wiring de dependências: conecta implementações concretas aos protocolos."""

from __future__ import annotations

import logging

from app.bootstrap.clients import create_async_redis_client
from app.infra.crypto.flow_encryption import FlowCryptoChannel
from app.infra.crypto.keys import FlowKeyProvider
from app.infra.stores.lead_store import MemoryLeadStore, RedisLeadStore
from app.infra.whatsapp.media_fetcher import HttpMediaFetcher
from app.protocols.lead_store import LeadStoreProtocol
from app.services.bsp_leads import BspLeadService
from app.services.flow_dispatcher import FlowActionDispatcher
from app.services.media_decryptor import MediaDecryptor
from app.services.media_resolver import MediaResolver
from app.services.poster_flow import PosterFlowScreens
from config.settings import (
    get_base_settings,
    get_lead_store_settings,
    get_whatsapp_settings,
)

logger = logging.getLogger(__name__)


def create_lead_store() -> LeadStoreProtocol:
    """Cria store de leads conforme LEAD_STORE_BACKEND (memory|redis)."""
    settings = get_lead_store_settings()

    if settings.backend == "redis":
        store: LeadStoreProtocol = RedisLeadStore(create_async_redis_client())
        logger.info("lead_store_created", extra={"backend": "redis"})
        return store

    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    logger.info("lead_store_created", extra={"backend": "memory"})
    return MemoryLeadStore()


def create_flow_key_provider() -> FlowKeyProvider:
    settings = get_whatsapp_settings()
    return FlowKeyProvider(
        settings.flow_private_key,
        settings.flow_private_key_passphrase or None,
    )


def create_media_fetcher() -> HttpMediaFetcher:
    settings = get_whatsapp_settings()
    return HttpMediaFetcher(
        timeout_seconds=settings.media_fetch_timeout_seconds,
        max_size_bytes=settings.media_max_size_bytes,
    )


def create_media_resolver() -> MediaResolver:
    fetcher = create_media_fetcher()
    return MediaResolver(MediaDecryptor(fetcher), fetcher)


def create_bsp_lead_service(lead_store: LeadStoreProtocol) -> BspLeadService:
    return BspLeadService(lead_store, ttl_seconds=get_lead_store_settings().ttl_seconds)


def create_flow_dispatcher(
    lead_store: LeadStoreProtocol,
    bsp_leads: BspLeadService | None = None,
) -> FlowActionDispatcher:
    screens = PosterFlowScreens(
        lead_store=lead_store,
        media_resolver=create_media_resolver(),
        ttl_seconds=get_lead_store_settings().ttl_seconds,
        bsp_leads=bsp_leads,
    )
    return FlowActionDispatcher(screens)


def create_flow_channel(key_provider: FlowKeyProvider) -> FlowCryptoChannel:
    return FlowCryptoChannel(key_provider)
