"""Settings do store de leads.

O store guarda dados de lead/mídia por flow_token entre telas do Flow.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal, cast

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

LeadStoreBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class LeadStoreSettings:
    """Configurações do store de leads.

    Attributes:
        backend: Backend de armazenamento (memory|redis)
        ttl_seconds: Tempo de vida de cada registro
    """

    backend: LeadStoreBackend = "memory"
    ttl_seconds: int = 3600

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store.

        Args:
            base: BaseSettings para verificar ambiente e REDIS_URL.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.ttl_seconds <= 0:
            errors.append("LEAD_STORE_TTL_SECONDS deve ser > 0")

        if self.backend not in ("memory", "redis"):
            errors.append(f"LEAD_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "redis" and not base.redis_url:
            errors.append("LEAD_STORE_BACKEND=redis exige REDIS_URL")

        if self.backend == "memory" and not base.is_development:
            errors.append("LEAD_STORE_BACKEND=memory proibido em staging/production")

        return errors


def _load_lead_store_from_env() -> LeadStoreSettings:
    # Valor bruto: validate() reporta backend desconhecido
    backend = cast("LeadStoreBackend", os.getenv("LEAD_STORE_BACKEND", "memory").strip().lower())
    return LeadStoreSettings(
        backend=backend,
        ttl_seconds=int(os.getenv("LEAD_STORE_TTL_SECONDS", "3600")),
    )


@lru_cache(maxsize=1)
def get_lead_store_settings() -> LeadStoreSettings:
    """Retorna instância cacheada de LeadStoreSettings."""
    return _load_lead_store_from_env()
