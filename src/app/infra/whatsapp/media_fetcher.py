"""Download de mídia da CDN do WhatsApp (cdn_url dos Flows)."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx

from app.infra.crypto.errors import ProtocolError, ProtocolErrorCode

logger = logging.getLogger(__name__)


class HttpMediaFetcher:
    """Baixa bytes de mídia via GET, com timeout e limite de tamanho.

    Não faz retry: as URLs de CDN expiram e são de uso único.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        max_size_bytes: int = 16 * 1024 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._max_size_bytes = max_size_bytes
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        host = urlsplit(url).hostname or "unknown"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                async with client.stream("GET", url) as response:
                    self._raise_for_status(response, host)
                    if self._is_too_large(response):
                        raise self._too_large()
                    content = await self._read_bounded(response)
            except httpx.TimeoutException as exc:
                logger.warning("media_fetch_timeout", extra={"host": host, "timeout": self._timeout})
                raise ProtocolError(
                    ProtocolErrorCode.FETCH_TIMEOUT,
                    f"CDN fetch timed out after {self._timeout}s",
                ) from exc
            except httpx.HTTPError as exc:
                raise ProtocolError(
                    ProtocolErrorCode.FETCH_FAILED,
                    f"CDN fetch failed: {type(exc).__name__}",
                ) from exc

        logger.debug("media_fetched", extra={"host": host, "size_bytes": len(content)})
        return content

    def _raise_for_status(self, response: httpx.Response, host: str) -> None:
        if response.is_success:
            return
        logger.warning(
            "media_fetch_failed",
            extra={"host": host, "status_code": response.status_code},
        )
        raise ProtocolError(
            ProtocolErrorCode.FETCH_FAILED,
            f"Failed to fetch media from CDN: {response.status_code}",
            status_code=response.status_code,
        )

    async def _read_bounded(self, response: httpx.Response) -> bytes:
        # Content-Length pode faltar (chunked) ou mentir: soma o que chega
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            if len(buffer) > self._max_size_bytes:
                raise self._too_large()
        return bytes(buffer)

    def _too_large(self) -> ProtocolError:
        return ProtocolError(
            ProtocolErrorCode.PAYLOAD_TOO_LARGE,
            f"Media larger than {self._max_size_bytes} bytes",
        )

    def _is_too_large(self, response: httpx.Response) -> bool:
        content_length = response.headers.get("content-length")
        return bool(
            content_length
            and content_length.isdigit()
            and int(content_length) > self._max_size_bytes
        )
