"""Contrato da lógica de telas do Flow (INIT, data_exchange, BACK)."""

from __future__ import annotations

from typing import Any, Protocol


class FlowScreenHandlerProtocol(Protocol):
    """Recebe o payload descriptografado e retorna a próxima tela."""

    async def handle(self, payload: dict[str, Any]) -> dict[str, Any]: ...
