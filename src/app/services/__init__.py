"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.bsp_leads import BspLeadService
from app.services.flow_dispatcher import FlowActionDispatcher
from app.services.media_decryptor import MediaDecryptor
from app.services.media_resolver import MediaResolver
from app.services.poster_flow import PosterFlowScreens

__all__ = [
    "BspLeadService",
    "FlowActionDispatcher",
    "MediaDecryptor",
    "MediaResolver",
    "PosterFlowScreens",
]
