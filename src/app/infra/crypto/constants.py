"""Constantes criptográficas dos dois protocolos do WhatsApp.

Flow data-exchange: RSA-OAEP(SHA-256) + AES-GCM.
Mídia criptografada: AES-256-CBC + HMAC-SHA256 truncado em 10 bytes.
"""

# Flow data-exchange
AES_KEY_SIZES_ALLOWED = (16, 24, 32)  # 128/192/256 bits
GCM_TAG_SIZE = 16  # 128 bits, anexado ao ciphertext

# Mídia (cdn_url + encryption_metadata)
MEDIA_KEY_SIZE = 32  # AES-256
MEDIA_HMAC_KEY_SIZE = 32
MEDIA_IV_SIZE = 16
MEDIA_MAC_SIZE = 10  # trailer truncado definido pela Meta
AES_BLOCK_SIZE = 16
