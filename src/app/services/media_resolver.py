"""Resolve o campo de mídia de uma tela do Flow para base64.

O PhotoPicker do Flow entrega uma lista de itens; cada item pode vir
criptografado (`encryption_metadata`) ou apenas com `cdn_url`. Clientes
antigos enviam a imagem já em base64 como string.
"""

from __future__ import annotations

from typing import Any

from app.infra.crypto.encoding import encode_base64
from app.protocols.media_fetcher import MediaFetcherProtocol
from app.services.media_decryptor import MediaDecryptor


class MediaResolver:
    """Converte qualquer formato aceito de mídia em base64."""

    def __init__(self, decryptor: MediaDecryptor, fetcher: MediaFetcherProtocol) -> None:
        self._decryptor = decryptor
        self._fetcher = fetcher

    async def resolve(self, media: Any) -> str:
        """Retorna a mídia em base64.

        Raises:
            ValueError: formato de mídia não reconhecido.
            ProtocolError: falha ao baixar ou descriptografar.
        """
        if isinstance(media, str) and media:
            return media

        if isinstance(media, list) and media:
            first = media[0]
            if isinstance(first, dict):
                if first.get("encryption_metadata"):
                    return await self._decryptor.decrypt_media(first)
                cdn_url = first.get("cdn_url")
                if isinstance(cdn_url, str) and cdn_url:
                    return encode_base64(await self._fetcher.fetch(cdn_url))
            raise ValueError("Invalid media item: no cdn_url or encryption_metadata found")

        raise ValueError("Invalid media format: expected list or base64 string")
