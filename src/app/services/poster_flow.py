"""Telas do Flow de geração de pôster (coleta de lead + imagem).

COLLECT_INFO → COLLECT_IMAGE_SCENE → SUCCESS_SCREEN.
Geração de imagem, créditos e envio de mensagens ficam fora daqui:
esta classe só valida entradas, resolve a mídia e persiste o estado
por flow_token no store de leads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.crypto.errors import ProtocolError
from app.protocols.lead_store import LeadStoreProtocol
from app.services.media_resolver import MediaResolver

if TYPE_CHECKING:
    from app.services.bsp_leads import BspLeadService

logger = logging.getLogger(__name__)

COLLECT_INFO = "COLLECT_INFO"
COLLECT_IMAGE_SCENE = "COLLECT_IMAGE_SCENE"
SUCCESS_SCREEN = "SUCCESS_SCREEN"

_LEAD_FIELDS = ("name", "business_name", "phone", "email", "city")


def _screen(name: str, /, **data: Any) -> dict[str, Any]:
    return {"screen": name, "data": data}


def _clean(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class PosterFlowScreens:
    """Handler de telas do Flow de pôster."""

    def __init__(
        self,
        *,
        lead_store: LeadStoreProtocol,
        media_resolver: MediaResolver,
        ttl_seconds: int = 3600,
        bsp_leads: BspLeadService | None = None,
    ) -> None:
        self._leads = lead_store
        self._media = media_resolver
        self._ttl = ttl_seconds
        self._bsp_leads = bsp_leads

    async def handle(self, payload: dict[str, Any]) -> dict[str, Any]:
        action = payload.get("action")
        screen = payload.get("screen")
        raw_data = payload.get("data")
        data: dict[str, Any] = raw_data if isinstance(raw_data, dict) else {}
        flow_token = str(payload.get("flow_token") or "")

        if action == "INIT":
            return await self._init(flow_token)

        if action == "BACK":
            return _screen(COLLECT_INFO)

        if screen == COLLECT_INFO:
            return await self._collect_info(flow_token, data)

        if screen == COLLECT_IMAGE_SCENE:
            return await self._collect_image_scene(flow_token, data)

        logger.info(
            "flow_unhandled_screen",
            extra={"component": "poster_flow", "action": action, "screen": screen},
        )
        return _screen(COLLECT_INFO, error_message="An unexpected error occurred.")

    async def _init(self, flow_token: str) -> dict[str, Any]:
        # flow_token é o telefone do usuário quando o BSP abre o Flow
        if self._bsp_leads is None or not flow_token:
            return _screen(COLLECT_INFO)
        bsp_lead = await self._bsp_leads.get(flow_token)
        first_name = _clean((bsp_lead or {}).get("first_name"))
        if not first_name:
            return _screen(COLLECT_INFO)
        return _screen(COLLECT_INFO, name=first_name)

    async def _collect_info(self, flow_token: str, data: dict[str, Any]) -> dict[str, Any]:
        lead = {field: _clean(data.get(field)) for field in _LEAD_FIELDS}
        if not lead["name"]:
            return _screen(COLLECT_INFO, error_message="Name is required.")
        if flow_token:
            stored = await self._leads.get(flow_token) or {}
            stored.update({key: value for key, value in lead.items() if value})
            await self._leads.put(flow_token, stored, self._ttl)
        return _screen(COLLECT_IMAGE_SCENE)

    async def _collect_image_scene(self, flow_token: str, data: dict[str, Any]) -> dict[str, Any]:
        product_image = data.get("product_image")
        if not product_image:
            return _screen(
                COLLECT_IMAGE_SCENE,
                error_message="Product image is required. Please upload an image of your product.",
            )
        product_category = _clean(data.get("product_category"))
        if not product_category:
            return _screen(
                COLLECT_INFO,
                error_message=(
                    "Product category is required. "
                    "Please specify what type of product this is."
                ),
            )

        try:
            image_b64 = await self._media.resolve(product_image)
            model_face_b64 = await self._resolve_optional(data.get("model_face"))
        except (ProtocolError, ValueError) as exc:
            logger.warning(
                "flow_media_processing_failed",
                extra={
                    "component": "poster_flow",
                    "error_code": str(getattr(exc, "code", "invalid-format")),
                },
            )
            return _screen(
                COLLECT_IMAGE_SCENE,
                error_message=(
                    "Failed to process image. Please try uploading the image again."
                ),
            )

        if flow_token:
            stored = await self._leads.get(flow_token) or {}
            stored.update(
                {
                    "product_category": product_category,
                    "scene_description": _clean(data.get("scene_description")),
                    "price_overlay": _clean(data.get("price_overlay")),
                    "product_image": image_b64,
                    "model_face": model_face_b64,
                }
            )
            await self._leads.put(flow_token, stored, self._ttl)

        return _screen(
            SUCCESS_SCREEN,
            message="Your enhanced product image is being generated and will be sent to you shortly!",
        )

    async def _resolve_optional(self, media: Any) -> str | None:
        if not media:
            return None
        try:
            return await self._media.resolve(media)
        except ValueError:
            logger.info("flow_model_face_skipped", extra={"component": "poster_flow"})
            return None
