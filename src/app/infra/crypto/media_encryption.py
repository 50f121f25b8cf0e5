"""Descriptografia de mídia do WhatsApp (AES-256-CBC + HMAC-10).

Formato do blob baixado da CDN: `ciphertext || mac[:10]`, onde
`mac = HMAC-SHA256(hmac_key, iv || ciphertext)`. O MAC é verificado
antes de qualquer tentativa de decrypt.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .constants import (
    AES_BLOCK_SIZE,
    MEDIA_HMAC_KEY_SIZE,
    MEDIA_IV_SIZE,
    MEDIA_KEY_SIZE,
    MEDIA_MAC_SIZE,
)
from .encoding import decode_base64, encode_base64
from .errors import ProtocolError, ProtocolErrorCode

logger = logging.getLogger(__name__)

_KEY_SIZES = (
    ("encryption_key", MEDIA_KEY_SIZE),
    ("hmac_key", MEDIA_HMAC_KEY_SIZE),
    ("iv", MEDIA_IV_SIZE),
)


@dataclass(frozen=True, slots=True)
class EncryptedMediaDescriptor:
    """Referência a uma mídia criptografada e suas chaves."""

    cdn_url: str
    encryption_key: bytes
    hmac_key: bytes
    iv: bytes
    encrypted_hash: str | None = None
    plaintext_hash: str | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> EncryptedMediaDescriptor:
        """Monta descriptor a partir do item de mídia do Flow.

        Formato: `{cdn_url, encryption_metadata: {encryption_key,
        hmac_key, iv, encrypted_hash?, plaintext_hash?}}`.

        Raises:
            ProtocolError: missing-field ou invalid-key-length.
        """
        cdn_url = data.get("cdn_url")
        metadata = data.get("encryption_metadata")
        if not isinstance(cdn_url, str) or not cdn_url:
            raise ProtocolError(
                ProtocolErrorCode.MISSING_FIELD, "Missing cdn_url", field="cdn_url"
            )
        if not isinstance(metadata, Mapping):
            raise ProtocolError(
                ProtocolErrorCode.MISSING_FIELD,
                "Missing encryption_metadata",
                field="encryption_metadata",
            )

        decoded = {name: _decode_sized(metadata, name, size) for name, size in _KEY_SIZES}
        return cls(
            cdn_url=cdn_url,
            encryption_key=decoded["encryption_key"],
            hmac_key=decoded["hmac_key"],
            iv=decoded["iv"],
            encrypted_hash=metadata.get("encrypted_hash") or None,
            plaintext_hash=metadata.get("plaintext_hash") or None,
        )

    def __post_init__(self) -> None:
        for name, size in _KEY_SIZES:
            value = getattr(self, name)
            if len(value) != size:
                raise ProtocolError(
                    ProtocolErrorCode.INVALID_KEY_LENGTH,
                    f"Invalid {name} length: {len(value)} (expected {size})",
                    field=name,
                )


def _decode_sized(metadata: Mapping[str, Any], name: str, size: int) -> bytes:
    raw = metadata.get(name)
    if not isinstance(raw, str) or not raw:
        raise ProtocolError(ProtocolErrorCode.MISSING_FIELD, f"Missing {name}", field=name)
    try:
        value = decode_base64(raw)
    except ValueError as exc:
        raise ProtocolError(
            ProtocolErrorCode.INVALID_KEY_LENGTH,
            f"Invalid {name}: not base64",
            field=name,
        ) from exc
    if len(value) != size:
        raise ProtocolError(
            ProtocolErrorCode.INVALID_KEY_LENGTH,
            f"Invalid {name} length: {len(value)} (expected {size})",
            field=name,
        )
    return value


def sha256_b64(data: bytes) -> str:
    return encode_base64(hashlib.sha256(data).digest())


def compute_media_mac(hmac_key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """HMAC-SHA256 completo sobre `iv || ciphertext`."""
    mac = hmac.new(hmac_key, digestmod=hashlib.sha256)
    mac.update(iv)
    mac.update(ciphertext)
    return mac.digest()


def decrypt_aes_cbc(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """AES-CBC + remoção de padding PKCS#7.

    Raises:
        ProtocolError: decrypt-failed para padding ou erro de cifra.
    """
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise ProtocolError(
            ProtocolErrorCode.DECRYPT_FAILED,
            f"AES-CBC decryption failed: {exc}",
        ) from exc


def open_media_payload(buffer: bytes, descriptor: EncryptedMediaDescriptor) -> bytes:
    """Valida e descriptografa o blob baixado da CDN.

    Ordem: tamanho, hash do blob, MAC truncado, alinhamento, decrypt,
    hash do plaintext (apenas consultivo).

    Raises:
        ProtocolError: payload-too-small, ciphertext-digest-mismatch,
            mac-verification-failed, misaligned-ciphertext, decrypt-failed.
    """
    if len(buffer) <= MEDIA_MAC_SIZE:
        raise ProtocolError(
            ProtocolErrorCode.PAYLOAD_TOO_SMALL,
            f"Encrypted payload too small: {len(buffer)} bytes",
        )

    if descriptor.encrypted_hash and sha256_b64(buffer) != descriptor.encrypted_hash:
        raise ProtocolError(
            ProtocolErrorCode.CIPHERTEXT_DIGEST_MISMATCH,
            "Encrypted hash mismatch",
            field="encrypted_hash",
        )

    ciphertext = buffer[:-MEDIA_MAC_SIZE]
    trailer = buffer[-MEDIA_MAC_SIZE:]
    expected = compute_media_mac(descriptor.hmac_key, descriptor.iv, ciphertext)[:MEDIA_MAC_SIZE]
    if not hmac.compare_digest(expected, trailer):
        raise ProtocolError(
            ProtocolErrorCode.MAC_VERIFICATION_FAILED,
            "HMAC verification failed",
        )

    if len(ciphertext) % AES_BLOCK_SIZE != 0:
        raise ProtocolError(
            ProtocolErrorCode.MISALIGNED_CIPHERTEXT,
            f"Ciphertext length not a multiple of {AES_BLOCK_SIZE}: {len(ciphertext)}",
        )

    plaintext = decrypt_aes_cbc(descriptor.encryption_key, descriptor.iv, ciphertext)

    if descriptor.plaintext_hash and sha256_b64(plaintext) != descriptor.plaintext_hash:
        # TODO: tornar fatal se a Meta confirmar que plaintext_hash é confiável
        logger.warning(
            "media_plaintext_hash_mismatch",
            extra={
                "component": "media_decryptor",
                "advisory": True,
                "size_bytes": len(plaintext),
            },
        )

    return plaintext
