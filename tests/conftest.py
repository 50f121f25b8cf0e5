"""Configuração do pytest para o webhook Bluepix."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ e a raiz (tests.fakes) ao PYTHONPATH para imports absolutos
root_path = Path(__file__).parent.parent
for path in (root_path / "src", root_path):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


@pytest.fixture(autouse=True)
def _isolated_singletons():
    """Descarta singletons cacheados (settings, chave, store) entre testes."""
    from app import bootstrap
    from config import settings

    caches = (
        settings.get_base_settings,
        settings.get_whatsapp_settings,
        settings.get_lead_store_settings,
        bootstrap.get_flow_key_provider,
        bootstrap.get_flow_channel,
        bootstrap.get_lead_store,
        bootstrap.get_flow_dispatcher,
        bootstrap.get_bsp_lead_service,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()
