"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.routes.dependencies import proposal_store
from app.protocols import ProposalStoreProtocol
from app.services.background_tasks import active_task_count

logger = logging.getLogger(__name__)

router = APIRouter()

READINESS_TIMEOUT_SECONDS = 3.0


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: o processo está de pé."""
    return HealthResponse(
        status="healthy",
        service="coopedu-onboarding",
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(
    store: ProposalStoreProtocol = Depends(proposal_store),
) -> JSONResponse:
    """Readiness probe: o store de propostas responde."""
    store_check = await _check_proposal_store(store)
    ready = store_check.status == "ok"

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {"proposal_store": store_check.as_dict()},
        "background_tasks": active_task_count(),
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_proposal_store(store: ProposalStoreProtocol) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        reachable = await asyncio.wait_for(store.ping(), timeout=READINESS_TIMEOUT_SECONDS)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_store_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    if not reachable:
        return DependencyCheck(status="failed", error="unreachable")
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
