"""Protocolos e contratos do core da aplicação."""

from .flow_screens import FlowScreenHandlerProtocol
from .lead_store import LeadStoreProtocol
from .media_fetcher import MediaFetcherProtocol

__all__ = [
    "FlowScreenHandlerProtocol",
    "LeadStoreProtocol",
    "MediaFetcherProtocol",
]
