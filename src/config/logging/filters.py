"""Filters de logging para contexto e proteção de material sensível.

- CorrelationIdFilter: injeta correlation_id e service em cada record.
- SensitiveFieldFilter: mascara campos de `extra` que carregam chaves,
  IVs ou payloads descriptografados.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

SENSITIVE_FIELDS = frozenset(
    {
        "aes_key",
        "encrypted_aes_key",
        "encryption_key",
        "hmac_key",
        "iv",
        "initial_vector",
        "private_key",
        "plaintext",
    }
)

REDACTED = "[redacted]"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Se correlation_id já foi passado via `extra`, preserva o valor.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Substitui por REDACTED atributos sensíveis vindos de `extra`."""

    def __init__(self, fields: Iterable[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = frozenset(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for field in self._fields:
            if field in record.__dict__:
                setattr(record, field, REDACTED)
        return True
