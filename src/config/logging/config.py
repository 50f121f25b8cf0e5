"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="bluepix-flow")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("flow_request_decrypted", extra={"action": "ping"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "bluepix-flow"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez na inicialização (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id
            do contexto atual (ContextVar de app/observability).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SensitiveFieldFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado."""
    return logging.getLogger(name)


def log_protocol_failure(
    logger: logging.Logger,
    component: str,
    error_code: str,
    detail: str | None = None,
) -> None:
    """Log de falha de protocolo criptográfico (sem material sensível).

    O detalhe fica apenas no log interno; a resposta HTTP nunca o expõe.

    Args:
        logger: Logger instance.
        component: Componente que falhou (ex: "flow_endpoint").
        error_code: Sub-código do ProtocolError (ex: "decrypt-failed").
        detail: Causa técnica para diagnóstico.
    """
    extra: dict[str, object] = {
        "component": component,
        "error_code": error_code,
    }
    if detail:
        extra["detail"] = detail

    logger.error("protocol_failure", extra=extra)
