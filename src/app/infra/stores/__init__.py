"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - lead_store: store chave-valor de leads por flow_token (Memory/Redis)
"""

from __future__ import annotations

from app.infra.stores.lead_store import MemoryLeadStore, RedisLeadStore

__all__ = [
    "MemoryLeadStore",
    "RedisLeadStore",
]
