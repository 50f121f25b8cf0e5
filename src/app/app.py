"""Entrypoint do webhook Bluepix (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request

from api.routes import create_api_router
from app.bootstrap import get_flow_key_provider, initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client
from app.infra.crypto.keys import PrivateKeyConfigError
from app.observability.correlation import (
    CORRELATION_HEADER,
    reset_correlation_id,
    set_correlation_id,
)
from config.logging import get_logger
from config.settings import get_lead_store_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: valida settings e carrega a chave do Flow uma única vez.

    Shutdown: descarta o handle da chave e fecha o Redis.
    """
    logger.info("app_starting")
    validate_runtime_settings()

    key_provider = get_flow_key_provider()
    try:
        key_provider.load()
    except PrivateKeyConfigError as exc:
        # Em development a chave pode faltar; o endpoint responde 503
        logger.warning("flow_private_key_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down")
    key_provider.reset()
    if get_lead_store_settings().backend == "redis":
        await create_async_redis_client().aclose()


async def correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        return await call_next(request)
    finally:
        reset_correlation_id(token)


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="Bluepix Flow Webhook",
        description="Endpoint de data-exchange de WhatsApp Flows",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.middleware("http")(correlation_middleware)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured")
    return fastapi_app


app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    uvicorn.run("app.app:app", host="0.0.0.0", port=8080, reload=True)


if __name__ == "__main__":
    main()
