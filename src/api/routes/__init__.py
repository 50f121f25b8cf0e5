"""Rotas HTTP da API.

- routes/whatsapp/: endpoint de data-exchange de Flows
- routes/health/: liveness

Agregação em router.py.
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
