"""MediaDecryptor: orquestra download da CDN + decrypt da mídia."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.infra.crypto.encoding import encode_base64
from app.infra.crypto.media_encryption import EncryptedMediaDescriptor, open_media_payload
from app.protocols.media_fetcher import MediaFetcherProtocol

logger = logging.getLogger(__name__)


class MediaDecryptor:
    """Descriptografa mídia referenciada por `cdn_url` + `encryption_metadata`."""

    def __init__(self, fetcher: MediaFetcherProtocol) -> None:
        self._fetcher = fetcher

    async def decrypt_media(
        self,
        descriptor: EncryptedMediaDescriptor | Mapping[str, Any],
    ) -> str:
        """Baixa, verifica e descriptografa a mídia.

        As chaves são validadas antes de qualquer IO de rede.

        Returns:
            Plaintext da mídia em base64.

        Raises:
            ProtocolError: qualquer falha de validação, download ou decrypt.
        """
        if not isinstance(descriptor, EncryptedMediaDescriptor):
            descriptor = EncryptedMediaDescriptor.from_payload(descriptor)

        buffer = await self._fetcher.fetch(descriptor.cdn_url)
        plaintext = open_media_payload(buffer, descriptor)

        logger.info(
            "media_decrypted",
            extra={
                "component": "media_decryptor",
                "encrypted_size": len(buffer),
                "size_bytes": len(plaintext),
            },
        )
        return encode_base64(plaintext)
