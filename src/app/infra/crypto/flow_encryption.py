"""Criptografia do endpoint de WhatsApp Flows (data exchange).

Request: `encrypted_aes_key` (RSA-OAEP), `encrypted_flow_data`
(AES-GCM, ciphertext + tag de 16 bytes) e `initial_vector`, todos base64.
Response: mesma chave AES, IV com todos os bits invertidos, retornado
como texto simples contendo base64(ciphertext + tag).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .encoding import decode_base64, encode_base64
from .errors import ProtocolError, ProtocolErrorCode
from .keys import unwrap_aes_key

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

    from .keys import FlowKeyProvider

REQUIRED_REQUEST_FIELDS = ("encrypted_aes_key", "encrypted_flow_data", "initial_vector")


@dataclass(frozen=True, slots=True)
class DecryptedFlowRequest:
    """Payload descriptografado + material para resposta criptografada."""

    payload: dict[str, Any]
    aes_key: bytes
    iv: bytes


def flip_iv(iv: bytes) -> bytes:
    """Inverte todos os bits de cada byte do IV (IV da resposta)."""
    return bytes(byte ^ 0xFF for byte in iv)


def _require_fields(body: Mapping[str, Any]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for name in REQUIRED_REQUEST_FIELDS:
        value = body.get(name)
        if not isinstance(value, str) or not value:
            raise ProtocolError(
                ProtocolErrorCode.MISSING_FIELD,
                f"Missing encrypted field: {name}",
                field=name,
            )
        fields[name] = value
    return fields


def decrypt_flow_request(
    body: Mapping[str, Any],
    private_key: RSAPrivateKey,
) -> DecryptedFlowRequest:
    """Descriptografa request do endpoint de Flow.

    Raises:
        ProtocolError: missing-field, key-unwrap-failed, decrypt-failed
            ou invalid-json.
    """
    if not isinstance(body, Mapping):
        raise ProtocolError(
            ProtocolErrorCode.MISSING_FIELD,
            "Request body must be an object",
        )
    fields = _require_fields(body)

    aes_key = unwrap_aes_key(private_key, fields["encrypted_aes_key"])

    try:
        flow_data = decode_base64(fields["encrypted_flow_data"])
        iv = decode_base64(fields["initial_vector"])
        plaintext = AESGCM(aes_key).decrypt(iv, flow_data, None)
    except Exception as exc:
        raise ProtocolError(
            ProtocolErrorCode.DECRYPT_FAILED,
            f"Flow payload decryption failed: {type(exc).__name__}: {exc}",
        ) from exc

    try:
        payload = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(
            ProtocolErrorCode.INVALID_JSON,
            f"Flow payload is not valid JSON: {exc}",
        ) from exc

    if not isinstance(payload, dict):
        raise ProtocolError(
            ProtocolErrorCode.INVALID_JSON,
            "Flow payload must be a JSON object",
        )

    return DecryptedFlowRequest(payload=payload, aes_key=aes_key, iv=iv)


def encrypt_flow_response(
    *,
    response: Mapping[str, Any],
    aes_key: bytes,
    iv: bytes,
) -> str:
    """Criptografa resposta para Flow e retorna base64(ciphertext + tag).

    `iv` é o IV do request; a inversão é feita aqui.

    Raises:
        ProtocolError: encrypt-failed (sempre erro interno, nunca do cliente).
    """
    try:
        plaintext = json.dumps(response, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        encrypted = AESGCM(aes_key).encrypt(flip_iv(iv), plaintext, None)
    except Exception as exc:
        raise ProtocolError(
            ProtocolErrorCode.ENCRYPT_FAILED,
            f"Flow response encryption failed: {type(exc).__name__}: {exc}",
        ) from exc
    return encode_base64(encrypted)


class FlowCryptoChannel:
    """Par decrypt/encrypt do data-exchange ligado à chave do serviço."""

    def __init__(self, key_provider: FlowKeyProvider) -> None:
        self._key_provider = key_provider

    def decrypt_inbound(self, body: Mapping[str, Any]) -> DecryptedFlowRequest:
        return decrypt_flow_request(body, self._key_provider.get())

    def encrypt_outbound(
        self,
        response: Mapping[str, Any],
        request: DecryptedFlowRequest,
    ) -> str:
        return encrypt_flow_response(response=response, aes_key=request.aes_key, iv=request.iv)
