"""Captura de leads enviados pelo BSP antes de abrir o Flow."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.bootstrap import get_bsp_lead_service

logger = logging.getLogger(__name__)

router = APIRouter()

NO_PHONE_MESSAGE = "No phone number provided in lead data"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


@router.post("/bsp-lead")
async def capture_bsp_lead(request: Request) -> JSONResponse:
    """Recebe o lead do BSP e guarda por telefone."""
    try:
        body: Any = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if not isinstance(body, dict):
        return JSONResponse(
            {"success": False, "message": "Malformed request", "timestamp": _timestamp()},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        lead, is_new = await get_bsp_lead_service().capture(body)
    except ValueError:
        logger.warning("bsp_lead_missing_phone", extra={"component": "bsp_leads"})
        return JSONResponse(
            {
                "success": False,
                "message": NO_PHONE_MESSAGE,
                "data": body,
                "timestamp": _timestamp(),
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return JSONResponse(
        {
            "success": True,
            "message": "Lead received and processed",
            "data": {**lead, "stored": True, "is_new_lead": is_new},
            "timestamp": _timestamp(),
        }
    )
