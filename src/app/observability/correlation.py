"""Correlation_id por requisição, isolado por ContextVar.

Uso (middleware HTTP):
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        response = await call_next(request)
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "x-correlation-id"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual; gera UUID se None.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = (correlation_id or "").strip()[:64] or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())
