"""Endpoints administrativos (sessão obrigatória, exceto login/logout).

Campanhas:
- GET|POST /admin/campaigns, GET|PUT /admin/campaigns/{id}
- POST /admin/campaigns/{id}/sync: envio em lote ao CRM
- POST /admin/campaigns/{id}/cleanup-duplicates?dry_run=: limpeza por CPF

Propostas:
- GET /admin/proposals: listagem paginada com filtros
- GET|DELETE /admin/proposals/{id}
- POST /admin/proposals/{id}/sync: envio manual ao CRM
- POST /admin/proposals/{id}/notifications/{type}: reenvio de notificação
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from api.routes.admin.auth import router as auth_router
from api.routes.admin.session import require_admin_session
from api.routes.dependencies import campaign_service, lifecycle_manager
from api.routes.responses import not_found, result_response
from app.protocols import ProposalQuery
from app.protocols.proposal_store import DEFAULT_PAGE_SIZE
from app.services import CampaignService, ProposalLifecycleManager
from app.services.proposal_lifecycle import NOT_FOUND_MESSAGE

MAX_PAGE_SIZE = 200

protected = APIRouter(dependencies=[Depends(require_admin_session)])


# ──────────────────────────────────────────────────────────────────────────────
# Campanhas
# ──────────────────────────────────────────────────────────────────────────────


@protected.get("/campaigns")
async def list_campaigns(
    service: CampaignService = Depends(campaign_service),
) -> JSONResponse:
    campaigns = await service.list_campaigns()
    return JSONResponse(content=[campaign.to_public_dict() for campaign in campaigns])


@protected.post("/campaigns", status_code=status.HTTP_201_CREATED)
async def create_campaign(
    payload: Any = Body(...),
    service: CampaignService = Depends(campaign_service),
) -> JSONResponse:
    result = await service.create_campaign(payload)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@protected.get("/campaigns/{campaign_id}")
async def get_campaign(
    campaign_id: str,
    service: CampaignService = Depends(campaign_service),
) -> JSONResponse:
    campaign = await service.get_campaign_by_id(campaign_id)
    if campaign is None:
        return not_found("Campanha não encontrada")
    return JSONResponse(content=campaign.to_public_dict())


@protected.put("/campaigns/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    payload: Any = Body(...),
    service: CampaignService = Depends(campaign_service),
) -> JSONResponse:
    return result_response(await service.update_campaign(campaign_id, payload))


@protected.post("/campaigns/{campaign_id}/sync")
async def sync_campaign(
    campaign_id: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    """Envio em lote. Falhas individuais vão no relatório, não no status."""
    report = await manager.batch_sync(campaign_id)
    status_code = status.HTTP_200_OK if report.error is None else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=report.to_dict(), status_code=status_code)


@protected.post("/campaigns/{campaign_id}/cleanup-duplicates")
async def cleanup_duplicates(
    campaign_id: str,
    dry_run: bool = Query(False),
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    report = await manager.cleanup_duplicates(campaign_id, dry_run=dry_run)
    status_code = status.HTTP_200_OK if report.success else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=report.to_dict(), status_code=status_code)


# ──────────────────────────────────────────────────────────────────────────────
# Propostas
# ──────────────────────────────────────────────────────────────────────────────


@protected.get("/proposals")
async def list_proposals(
    campaign_id: str | None = Query(None, alias="campaignId"),
    proposal_status: str | None = Query(None, alias="status"),
    created_from: datetime | None = Query(None, alias="createdFrom"),
    created_to: datetime | None = Query(None, alias="createdTo"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    cursor: str | None = Query(None),
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    page = await manager.list_proposals(
        ProposalQuery(
            campaign_id=campaign_id,
            status=proposal_status,
            created_from=created_from,
            created_to=created_to,
            limit=limit,
            cursor=cursor,
        )
    )
    return JSONResponse(
        content={
            "items": [proposal.to_summary_dict() for proposal in page.items],
            "nextCursor": page.next_cursor,
        }
    )


@protected.get("/proposals/{proposal_id}")
async def get_proposal(
    proposal_id: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    detail = await manager.get_proposal_detail(proposal_id)
    if detail is None:
        return not_found(NOT_FOUND_MESSAGE)
    return JSONResponse(content=detail)


@protected.delete("/proposals/{proposal_id}")
async def delete_proposal(
    proposal_id: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    return result_response(await manager.delete_proposal(proposal_id))


@protected.post("/proposals/{proposal_id}/sync")
async def sync_proposal(
    proposal_id: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    result = await manager.sync(proposal_id)
    if result.success:
        status_code = status.HTTP_200_OK
    elif result.not_found:
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return JSONResponse(content=result.to_dict(), status_code=status_code)


@protected.post("/proposals/{proposal_id}/notifications/{notification_type}")
async def resend_notification(
    proposal_id: str,
    notification_type: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    return result_response(await manager.resend_notification(proposal_id, notification_type))


# include_router copia as rotas no momento da chamada: manter no fim do módulo
router = APIRouter()
router.include_router(auth_router)
router.include_router(protected)
