"""Bootstrap da aplicação: inicialização e wiring.

Composition root: configura logging, valida settings e expõe os
singletons (chave do Flow, store de leads, dispatcher).

Uso:
    from app.bootstrap import initialize_app, get_flow_channel

    initialize_app()
    channel = get_flow_channel()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_lead_store_settings,
    get_whatsapp_settings,
)

if TYPE_CHECKING:
    from app.infra.crypto.flow_encryption import FlowCryptoChannel
    from app.infra.crypto.keys import FlowKeyProvider
    from app.protocols.lead_store import LeadStoreProtocol
    from app.services.bsp_leads import BspLeadService
    from app.services.flow_dispatcher import FlowActionDispatcher

SERVICE_NAME = "bluepix-flow"

DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON com correlation_id. Chamar uma vez no startup."""
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    configure_logging(
        level=log_level,
        service_name=get_base_settings().service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    errors: list[str] = [f"base: {error}" for error in base.validate()]
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())
    errors.extend(f"lead_store: {error}" for error in get_lead_store_settings().validate(base))

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


@lru_cache(maxsize=1)
def get_flow_key_provider() -> FlowKeyProvider:
    """Handle da chave privada do Flow (singleton, carga lazy)."""
    from app.bootstrap.dependencies import create_flow_key_provider

    return create_flow_key_provider()


@lru_cache(maxsize=1)
def get_flow_channel() -> FlowCryptoChannel:
    from app.bootstrap.dependencies import create_flow_channel

    return create_flow_channel(get_flow_key_provider())


@lru_cache(maxsize=1)
def get_lead_store() -> LeadStoreProtocol:
    from app.bootstrap.dependencies import create_lead_store

    return create_lead_store()


@lru_cache(maxsize=1)
def get_flow_dispatcher() -> FlowActionDispatcher:
    from app.bootstrap.dependencies import create_flow_dispatcher

    return create_flow_dispatcher(get_lead_store(), get_bsp_lead_service())


@lru_cache(maxsize=1)
def get_bsp_lead_service() -> BspLeadService:
    from app.bootstrap.dependencies import create_bsp_lead_service

    return create_bsp_lead_service(get_lead_store())
