"""Captura de leads enviados pelo BSP (chatbot que dispara o Flow).

O BSP manda nomes de campo em camelCase ou snake_case, conforme a
versão da integração. O lead é guardado por telefone (só dígitos) e o
chat_id aponta para o telefone, já que o flow_token do Flow é o próprio
telefone do usuário.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from app.protocols.lead_store import LeadStoreProtocol

logger = logging.getLogger(__name__)

PHONE_PREFIX = "bsp:phone:"
SESSION_PREFIX = "bsp:session:"

_NON_DIGITS = re.compile(r"\D")


def _first(body: Mapping[str, Any], *names: str) -> str | None:
    for name in names:
        value = body.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def normalize_phone(raw_value: str) -> str:
    return _NON_DIGITS.sub("", raw_value)


def normalize_bsp_lead(body: Mapping[str, Any]) -> dict[str, Any] | None:
    """Extrai os campos do lead; None se não houver telefone."""
    raw_phone = _first(body, "phoneNumber", "chat_id")
    phone = normalize_phone(raw_phone) if raw_phone else ""
    if not phone:
        return None
    return {
        "phone_number": phone,
        "first_name": _first(body, "firstName", "first_name"),
        "email": _first(body, "email"),
        "chat_id": _first(body, "chatId", "chat_id"),
        "subscriber_id": _first(body, "subscriberId"),
        "user_message": _first(body, "user_message"),
        "postback_id": _first(body, "postbackid"),
    }


class BspLeadService:
    """Guarda e consulta leads do BSP no store de leads."""

    def __init__(self, lead_store: LeadStoreProtocol, ttl_seconds: int = 3600) -> None:
        self._leads = lead_store
        self._ttl = ttl_seconds

    async def capture(self, body: Mapping[str, Any]) -> tuple[dict[str, Any], bool]:
        """Normaliza e guarda o lead.

        Returns:
            (lead armazenado, True se o telefone ainda não era conhecido)

        Raises:
            ValueError: corpo sem phoneNumber/chat_id.
        """
        lead = normalize_bsp_lead(body)
        if lead is None:
            raise ValueError("No phone number provided in lead data")

        phone = lead["phone_number"]
        previous = await self._leads.get(PHONE_PREFIX + phone)
        now = datetime.now(UTC)
        stored = {
            **(previous or {}),
            **{key: value for key, value in lead.items() if value is not None},
            "id": f"{phone}-{int(now.timestamp() * 1000)}",
            "timestamp": now.isoformat(),
        }
        await self._leads.put(PHONE_PREFIX + phone, stored, self._ttl)
        if lead["chat_id"]:
            session_key = SESSION_PREFIX + lead["chat_id"]
            await self._leads.put(session_key, {"phone_number": phone}, self._ttl)

        is_new = previous is None
        logger.info(
            "bsp_lead_captured",
            extra={"component": "bsp_leads", "is_new_lead": is_new, "phone_suffix": phone[-4:]},
        )
        return stored, is_new

    async def get(self, identifier: str) -> dict[str, Any] | None:
        """Busca lead por telefone ou, em seguida, por chat_id."""
        phone = normalize_phone(identifier)
        if phone:
            lead = await self._leads.get(PHONE_PREFIX + phone)
            if lead is not None:
                return lead

        session = await self._leads.get(SESSION_PREFIX + identifier)
        if session and session.get("phone_number"):
            return await self._leads.get(PHONE_PREFIX + session["phone_number"])
        return None
