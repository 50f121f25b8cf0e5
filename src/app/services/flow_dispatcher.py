"""Roteamento de ações do data-exchange de Flows."""

from __future__ import annotations

import logging
from typing import Any

from app.protocols.flow_screens import FlowScreenHandlerProtocol

logger = logging.getLogger(__name__)

SCREEN_ACTIONS = frozenset({"INIT", "data_exchange", "BACK"})

FALLBACK_SCREEN = "COLLECT_INFO"


class FlowActionDispatcher:
    """Decide a resposta (ainda em claro) para cada ação do Flow.

    - ping: health check da Meta
    - error_notification: erro reportado pelo cliente, apenas registrado
    - INIT / data_exchange / BACK: delegados ao handler de telas
    """

    def __init__(self, screens: FlowScreenHandlerProtocol) -> None:
        self._screens = screens

    async def dispatch(self, payload: dict[str, Any]) -> dict[str, Any]:
        action = payload.get("action")

        if action == "ping":
            return {"data": {"status": "active"}}

        if action == "error_notification":
            data = payload.get("data")
            logger.warning(
                "flow_error_notification",
                extra={
                    "component": "flow_dispatcher",
                    "screen": payload.get("screen"),
                    "flow_error": data.get("error") if isinstance(data, dict) else None,
                },
            )
            return {"data": {"acknowledged": True}}

        if action in SCREEN_ACTIONS:
            return await self._screens.handle(payload)

        logger.warning(
            "flow_unknown_action",
            extra={"component": "flow_dispatcher", "action": str(action)[:32]},
        )
        return {
            "screen": FALLBACK_SCREEN,
            "data": {"error_message": "An unexpected error occurred."},
        }
