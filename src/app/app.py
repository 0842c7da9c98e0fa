"""Entrypoint do serviço de adesão de cooperados.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.infra.reference import download_municipality_codes
from app.observability import (
    CORRELATION_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.services.background_tasks import drain_background_tasks, schedule_background_task
from config.logging import get_logger
from config.settings import get_crm_settings
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SERVICE_NAME = "coopedu-onboarding"
SHUTDOWN_DRAIN_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup valida settings e atualiza a tabela IBGE; shutdown aguarda tasks pendentes."""
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()

    crm_settings = get_crm_settings()
    if crm_settings.refresh_municipalities_on_startup:
        schedule_background_task(
            "ibge_refresh",
            download_municipality_codes(crm_settings.municipalities_url),
        )

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    await drain_background_tasks(timeout_seconds=SHUTDOWN_DRAIN_SECONDS)


async def correlation_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga x-correlation-id (ou gera um) para logs e resposta."""
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER, ""))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


async def infrastructure_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Falha de Firestore/Storage não prevista pelo serviço vira 503."""
    logger.error(
        "infrastructure_unavailable",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        content={"success": False, "message": "Serviço temporariamente indisponível"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="COOPEDU Onboarding",
        description="Adesão de cooperados: formulário, documentos e envio ao CRM",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    fastapi_app.middleware("http")(correlation_id_middleware)
    fastapi_app.add_exception_handler(InfrastructureError, infrastructure_error_handler)

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting coopedu-onboarding in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
