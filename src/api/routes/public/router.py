"""Endpoints públicos do formulário de adesão e da página de upload.

Endpoints:
- GET /campaigns/{slug}: dados da campanha ativa
- POST /proposals: envio da proposta
- GET /upload/{token}: proposta e documentos do link de upload
- POST /upload/{token}/documents: envio de documento (multipart: type, file)
- DELETE /upload/{token}/documents/{type}: remove documentos do tipo
- POST /upload/{token}/finalize: conclui o envio de documentos

O token de upload é a única credencial da página pública.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from api.routes.dependencies import campaign_service, lifecycle_manager
from api.routes.responses import error_response, not_found, result_response
from app.domain.document import DOCUMENT_LABELS, missing_required_types
from app.services import CampaignService, ProposalLifecycleManager
from app.services.proposal_lifecycle import EXPIRED_MESSAGE, NOT_FOUND_MESSAGE
from app.services.results import TokenLookupStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/campaigns/{slug}")
async def get_campaign(
    slug: str,
    service: CampaignService = Depends(campaign_service),
) -> JSONResponse:
    campaign = await service.get_campaign_by_slug(slug)
    if campaign is None:
        return not_found("Campanha não encontrada")
    return JSONResponse(content=campaign.to_public_dict())


@router.post("/proposals", status_code=status.HTTP_201_CREATED)
async def submit_proposal(
    payload: Any = Body(...),
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    result = await manager.submit_proposal(payload)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.get("/upload/{token}")
async def get_upload_page(
    token: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    """Visão reduzida da proposta: sem dados pessoais além do nome."""
    lookup = await manager.get_by_upload_token(token)
    if lookup.status == TokenLookupStatus.EXPIRED:
        return error_response(status.HTTP_410_GONE, EXPIRED_MESSAGE, expired=True)
    if lookup.proposal is None:
        return not_found(NOT_FOUND_MESSAGE)

    proposal = lookup.proposal
    return JSONResponse(
        content={
            "id": proposal.id,
            "nomeCompleto": proposal.nome_completo,
            "status": proposal.status.value,
            "documents": [document.to_public_dict() for document in lookup.documents],
            "missingTypes": [
                {"type": doc_type.value, "label": DOCUMENT_LABELS[doc_type]}
                for doc_type in missing_required_types(lookup.documents)
            ],
        }
    )


@router.post("/upload/{token}/documents", status_code=status.HTTP_201_CREATED)
async def upload_document(
    token: str,
    document_type: str = Form(..., alias="type"),
    file: UploadFile = File(...),
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    proposal, failure = await manager.resolve_upload_token(token)
    if failure is not None or proposal is None:
        return result_response(failure)

    # Lê no máximo um byte além do limite: o excesso basta para recusar
    content = await file.read(manager.max_upload_bytes + 1)
    result = await manager.upload_document(
        proposal.id,
        document_type,
        file.filename or "",
        content,
        file.content_type,
    )
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.delete("/upload/{token}/documents/{document_type}")
async def remove_document(
    token: str,
    document_type: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    proposal, failure = await manager.resolve_upload_token(token)
    if failure is not None or proposal is None:
        return result_response(failure)
    return result_response(await manager.remove_document(proposal.id, document_type))


@router.post("/upload/{token}/finalize")
async def finalize_upload(
    token: str,
    manager: ProposalLifecycleManager = Depends(lifecycle_manager),
) -> JSONResponse:
    proposal, failure = await manager.resolve_upload_token(token)
    if failure is not None or proposal is None:
        return result_response(failure)
    return result_response(await manager.finalize(proposal.id))
