"""Criptografia dos protocolos do WhatsApp.

- flow_encryption: data-exchange de Flows (RSA-OAEP + AES-GCM, IV invertido)
- media_encryption: mídia da CDN (AES-256-CBC + HMAC-SHA256 truncado)
- keys: chave privada do endpoint (carregada uma vez) e unwrap da chave AES
- signature: X-Hub-Signature-256
"""

from .errors import ProtocolError, ProtocolErrorCode
from .flow_encryption import (
    DecryptedFlowRequest,
    FlowCryptoChannel,
    decrypt_flow_request,
    encrypt_flow_response,
    flip_iv,
)
from .keys import FlowKeyProvider, PrivateKeyConfigError, load_private_key, unwrap_aes_key
from .media_encryption import EncryptedMediaDescriptor, open_media_payload
from .signature import verify_hub_signature

__all__ = [
    "DecryptedFlowRequest",
    "EncryptedMediaDescriptor",
    "FlowCryptoChannel",
    "FlowKeyProvider",
    "PrivateKeyConfigError",
    "ProtocolError",
    "ProtocolErrorCode",
    "decrypt_flow_request",
    "encrypt_flow_response",
    "flip_iv",
    "load_private_key",
    "open_media_payload",
    "unwrap_aes_key",
    "verify_hub_signature",
]
