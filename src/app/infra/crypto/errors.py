"""Erros dos protocolos criptográficos do WhatsApp.

Um único tipo (ProtocolError) com sub-código legível por máquina.
Todos os códigos são terminais para a requisição; o detalhe técnico
vai para o log, nunca para o corpo da resposta HTTP.
"""

from __future__ import annotations

from enum import StrEnum


class ProtocolErrorCode(StrEnum):
    """Sub-códigos de falha dos protocolos de Flow e mídia."""

    MISSING_FIELD = "missing-field"
    KEY_UNWRAP_FAILED = "key-unwrap-failed"
    DECRYPT_FAILED = "decrypt-failed"
    INVALID_JSON = "invalid-json"
    ENCRYPT_FAILED = "encrypt-failed"
    INVALID_KEY_LENGTH = "invalid-key-length"
    FETCH_FAILED = "fetch-failed"
    FETCH_TIMEOUT = "fetch-timeout"
    PAYLOAD_TOO_SMALL = "payload-too-small"
    PAYLOAD_TOO_LARGE = "payload-too-large"
    CIPHERTEXT_DIGEST_MISMATCH = "ciphertext-digest-mismatch"
    MAC_VERIFICATION_FAILED = "mac-verification-failed"
    MISALIGNED_CIPHERTEXT = "misaligned-ciphertext"


class ProtocolError(Exception):
    """Falha em operação dos protocolos de Flow ou de mídia.

    Attributes:
        code: Sub-código da falha
        field: Campo de entrada envolvido (quando aplicável)
        status_code: Status HTTP da CDN (apenas fetch-failed)
    """

    def __init__(
        self,
        code: ProtocolErrorCode,
        message: str = "",
        *,
        field: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.field = field
        self.status_code = status_code
        super().__init__(f"{code}: {message}" if message else str(code))
