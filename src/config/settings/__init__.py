"""Agregador de settings do webhook Bluepix.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    LeadStoreBackend,
    LeadStoreSettings,
    get_base_settings,
    get_lead_store_settings,
)
from config.settings.whatsapp import (
    WhatsAppFlowSettings,
    get_whatsapp_settings,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "LeadStoreBackend",
    "LeadStoreSettings",
    "WhatsAppFlowSettings",
    "get_base_settings",
    "get_lead_store_settings",
    "get_whatsapp_settings",
]
