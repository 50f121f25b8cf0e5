"""Contrato do store chave-valor de leads por flow_token."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LeadStoreProtocol(ABC):
    """Contrato mínimo get/put para dados de lead entre telas do Flow.

    Valores são dicts serializáveis em JSON; `put` sobrescreve o valor
    anterior da chave.
    """

    @abstractmethod
    async def get(self, key: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int = 3600) -> None: ...
