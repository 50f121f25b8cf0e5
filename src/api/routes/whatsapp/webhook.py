"""Handshake de assinatura do webhook (GET com hub.challenge)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import Response

from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class WebhookChallengeError(ValueError):
    """Erro de verificação do desafio do webhook."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Valida o handshake da Meta e retorna o challenge a ecoar.

    Raises:
        WebhookChallengeError: token não configurado, modo/token
            inválidos ou challenge ausente.
    """
    if not expected_token:
        raise WebhookChallengeError("missing_verify_token")

    if hub_mode != "subscribe" or hub_verify_token != expected_token:
        raise WebhookChallengeError("verification_failed")

    if not hub_challenge:
        raise WebhookChallengeError("missing_challenge")

    return hub_challenge


@router.get("/")
async def verify_webhook(request: Request) -> Response:
    """Responde ao challenge da Meta em texto puro, ou 403."""
    settings = get_whatsapp_settings()
    hub_mode = request.query_params.get("hub.mode")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=request.query_params.get("hub.verify_token"),
            hub_challenge=request.query_params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except WebhookChallengeError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"component": "webhook", "reason": str(exc)},
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    logger.info("webhook_verified", extra={"component": "webhook", "hub_mode": hub_mode})
    return Response(content=challenge, media_type="text/plain", status_code=status.HTTP_200_OK)
