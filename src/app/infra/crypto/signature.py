"""Validação do header X-Hub-Signature-256 enviado pela Meta."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def verify_hub_signature(raw_body: bytes, signature_header: str | None, app_secret: str) -> bool:
    """Confere HMAC-SHA256 do corpo bruto com o app secret.

    Args:
        raw_body: Corpo bruto da requisição
        signature_header: Valor de X-Hub-Signature-256 (ex: "sha256=ab12...")
        app_secret: Secret do app Meta

    Returns:
        True se assinatura válida
    """
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    received = signature_header[len(SIGNATURE_PREFIX):].strip().lower()
    computed = hmac.new(app_secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed, received)
