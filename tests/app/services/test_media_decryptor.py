"""Testes do MediaDecryptor (download + verificação + decrypt)."""

from __future__ import annotations

import base64
import os

import pytest

from app.infra.crypto.errors import ProtocolError, ProtocolErrorCode
from app.services.media_decryptor import MediaDecryptor
from tests.fakes.fake_media_fetcher import FakeMediaFetcher, seal_media


class TestMediaDecryptor:
    """Fluxo completo sobre um fetcher fake."""

    @pytest.mark.asyncio
    async def test_returns_base64_plaintext(self) -> None:
        """Deve devolver o plaintext em base64."""
        plaintext = os.urandom(300)
        blob, item = seal_media(plaintext)
        fetcher = FakeMediaFetcher({item["cdn_url"]: blob})

        result = await MediaDecryptor(fetcher).decrypt_media(item)

        assert base64.b64decode(result) == plaintext
        assert fetcher.calls == [item["cdn_url"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [31, 33])
    async def test_invalid_key_length_skips_fetch(self, size: int) -> None:
        """Chave de tamanho errado falha antes de qualquer IO."""
        blob, item = seal_media(b"image")
        item["encryption_metadata"]["encryption_key"] = base64.b64encode(os.urandom(size)).decode()
        fetcher = FakeMediaFetcher({item["cdn_url"]: blob})

        with pytest.raises(ProtocolError) as exc_info:
            await MediaDecryptor(fetcher).decrypt_media(item)

        assert exc_info.value.code is ProtocolErrorCode.INVALID_KEY_LENGTH
        assert exc_info.value.field == "encryption_key"
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self) -> None:
        """Erro de download chega ao chamador sem retry."""
        _, item = seal_media(b"image")
        error = ProtocolError(ProtocolErrorCode.FETCH_FAILED, "404", status_code=404)
        fetcher = FakeMediaFetcher(error=error)

        with pytest.raises(ProtocolError) as exc_info:
            await MediaDecryptor(fetcher).decrypt_media(item)

        assert exc_info.value.status_code == 404
        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_tampered_blob_rejected(self) -> None:
        """Blob alterado na CDN não passa pela verificação."""
        blob, item = seal_media(b"image" * 20)
        del item["encryption_metadata"]["encrypted_hash"]
        tampered = bytes([blob[0] ^ 0x01]) + blob[1:]
        fetcher = FakeMediaFetcher({item["cdn_url"]: tampered})

        with pytest.raises(ProtocolError) as exc_info:
            await MediaDecryptor(fetcher).decrypt_media(item)

        assert exc_info.value.code is ProtocolErrorCode.MAC_VERIFICATION_FAILED

    @pytest.mark.asyncio
    async def test_missing_metadata(self) -> None:
        fetcher = FakeMediaFetcher()

        with pytest.raises(ProtocolError) as exc_info:
            await MediaDecryptor(fetcher).decrypt_media({"cdn_url": "https://cdn.example.com/x"})

        assert exc_info.value.code is ProtocolErrorCode.MISSING_FIELD
        assert fetcher.calls == []
