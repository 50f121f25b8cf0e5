"""Endpoint de data-exchange para WhatsApp Flows."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from app.bootstrap import get_flow_channel, get_flow_dispatcher
from app.infra.crypto import PrivateKeyConfigError, ProtocolError, verify_hub_signature
from config.logging import log_protocol_failure
from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-hub-signature-256"


@router.post("/flow/endpoint")
async def handle_flow_endpoint(request: Request) -> PlainTextResponse:
    """Recebe payload criptografado da Meta e retorna base64 em texto simples."""
    settings = get_whatsapp_settings()
    raw_body = await request.body()

    if settings.app_secret and not verify_hub_signature(
        raw_body, request.headers.get(SIGNATURE_HEADER), settings.app_secret
    ):
        logger.warning(
            "flow_signature_invalid",
            extra={"component": "flow_endpoint", "action": "validate_signature"},
        )
        return PlainTextResponse("Signature verification failed", status_code=401)

    body = _parse_json_object(raw_body)
    if body is None:
        return PlainTextResponse("Malformed request", status_code=400)

    channel = get_flow_channel()
    try:
        decrypted = channel.decrypt_inbound(body)
        response_payload = await get_flow_dispatcher().dispatch(decrypted.payload)
        encrypted_response = channel.encrypt_outbound(response_payload, decrypted)
    except PrivateKeyConfigError as exc:
        logger.error(
            "flow_endpoint_misconfigured",
            extra={"component": "flow_endpoint", "error_type": type(exc).__name__},
        )
        return PlainTextResponse("Flow endpoint misconfigured", status_code=503)
    except ProtocolError as exc:
        log_protocol_failure(logger, "flow_endpoint", str(exc.code), str(exc))
        return PlainTextResponse("Internal Server Error", status_code=500)

    logger.info(
        "flow_request_processed",
        extra={"component": "flow_endpoint", "action": str(decrypted.payload.get("action"))},
    )
    return PlainTextResponse(content=encrypted_response, status_code=200)


def _parse_json_object(raw_body: bytes) -> dict[str, Any] | None:
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return payload if isinstance(payload, dict) else None
