"""Contrato de download de mídia da CDN."""

from __future__ import annotations

from typing import Protocol


class MediaFetcherProtocol(Protocol):
    """Baixa o conteúdo bruto de uma URL de CDN.

    Implementações levantam ProtocolError (fetch-failed, fetch-timeout,
    payload-too-large) e não fazem retry: URLs de CDN são de uso único.
    """

    async def fetch(self, url: str) -> bytes: ...
