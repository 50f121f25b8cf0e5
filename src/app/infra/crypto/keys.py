"""Chave RSA do endpoint de Flow e unwrap da chave AES por requisição."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.hashes import SHA256

from .constants import AES_KEY_SIZES_ALLOWED
from .encoding import decode_base64
from .errors import ProtocolError, ProtocolErrorCode

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

_OAEP_SHA256 = padding.OAEP(
    mgf=padding.MGF1(algorithm=SHA256()),
    algorithm=SHA256(),
    label=None,
)


class PrivateKeyConfigError(ValueError):
    """Chave privada ausente ou inválida na configuração."""


def load_private_key(private_key_pem: str, passphrase: str | None = None) -> RSAPrivateKey:
    """Carrega chave privada RSA em formato PEM (PKCS#8).

    Args:
        private_key_pem: Chave privada em formato PEM
        passphrase: Senha da chave (opcional)

    Returns:
        Objeto de chave privada RSA

    Raises:
        PrivateKeyConfigError: Se chave inválida ou não for RSA
    """
    passphrase_bytes = passphrase.encode() if passphrase and passphrase.strip() else None

    def _load(password: bytes | None) -> object:
        return serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"),
            password=password,
        )

    try:
        key = _load(passphrase_bytes)
    except (ValueError, TypeError) as exc:
        # Passphrase injetada por configuração mas chave sem criptografia
        if passphrase_bytes and "not encrypted" in str(exc).lower():
            try:
                key = _load(None)
            except (ValueError, TypeError) as retry_exc:
                raise PrivateKeyConfigError(f"Invalid private key: {retry_exc}") from retry_exc
        else:
            raise PrivateKeyConfigError(f"Invalid private key: {exc}") from exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise PrivateKeyConfigError("Private key must be RSA")
    return key


def unwrap_aes_key(private_key: RSAPrivateKey, encrypted_aes_key_b64: str) -> bytes:
    """Descriptografa a chave AES enviada com RSA-OAEP (SHA-256).

    Raises:
        ProtocolError: key-unwrap-failed para qualquer falha.
    """
    try:
        wrapped = decode_base64(encrypted_aes_key_b64)
        aes_key = private_key.decrypt(wrapped, _OAEP_SHA256)
    except Exception as exc:
        raise ProtocolError(
            ProtocolErrorCode.KEY_UNWRAP_FAILED,
            f"AES key decryption failed: {type(exc).__name__}: {exc}",
            field="encrypted_aes_key",
        ) from exc

    if len(aes_key) not in AES_KEY_SIZES_ALLOWED:
        raise ProtocolError(
            ProtocolErrorCode.KEY_UNWRAP_FAILED,
            f"Invalid AES key size: {len(aes_key)}",
            field="encrypted_aes_key",
        )
    return aes_key


class FlowKeyProvider:
    """Handle imutável da chave privada, carregado uma única vez.

    `load()` é idempotente e pode ser chamado no startup para falhar
    rápido; `get()` carrega sob demanda. `reset()` descarta o handle
    (shutdown ou rotação da chave).
    """

    def __init__(self, private_key_pem: str, passphrase: str | None = None) -> None:
        self._pem = private_key_pem
        self._passphrase = passphrase
        self._key: RSAPrivateKey | None = None

    @property
    def is_loaded(self) -> bool:
        return self._key is not None

    def load(self) -> RSAPrivateKey:
        if self._key is None:
            if not self._pem:
                raise PrivateKeyConfigError("Flow private key not configured")
            self._key = load_private_key(self._pem, self._passphrase)
        return self._key

    def get(self) -> RSAPrivateKey:
        return self.load()

    def reset(self) -> None:
        self._key = None
