"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.lead_store import (
    LeadStoreBackend,
    LeadStoreSettings,
    get_lead_store_settings,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "LeadStoreBackend",
    "LeadStoreSettings",
    "get_base_settings",
    "get_lead_store_settings",
]
