"""Ciclo de vida da proposta de adesão.

pending_documents → documents_received → completed

Fluxo:
1. submit_proposal: valida, vincula campanha, gera token de upload (7 dias),
   grava e agenda a notificação inicial
2. upload_document / attach_document / remove_document: documentos da proposta,
   sem mudança de status
3. finalize: grava documents_received (aguardado) e agenda, de forma
   independente, a notificação final e o envio ao CRM
4. sync / batch_sync: envio ao CRM (manual ou em lote)
5. cleanup_duplicates: mantém a proposta mais recente por CPF na campanha
"""

from __future__ import annotations

import logging
import secrets
import uuid
from collections import defaultdict
from collections.abc import Callable, Coroutine
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any

from app.domain._firestore_model import to_iso, utcnow
from app.domain.campaign import UNCATEGORIZED_CAMPAIGN_ID
from app.domain.crm_sync import SyncTrigger
from app.domain.document import ProposalDocument, parse_document_type
from app.domain.notification import NotificationType
from app.domain.proposal import UPLOAD_TOKEN_TTL, Proposal, ProposalForm
from app.domain.validation import validate_proposal_form
from app.domain.validators import only_digits
from app.protocols.blob_store import BlobStoreProtocol
from app.protocols.campaign_store import CampaignStoreProtocol
from app.protocols.proposal_store import ProposalPage, ProposalQuery, ProposalStoreProtocol
from app.services.background_tasks import schedule_background_task
from app.services.crm_sync import CrmSyncService
from app.services.notifications import NotificationDispatcher
from app.services.results import (
    ActionResult,
    BatchSyncReport,
    DuplicateCleanupReport,
    ErrorCode,
    SyncResult,
    TokenLookupStatus,
    UploadTokenLookup,
)
from config.logging import mask_token
from config.settings import GCSSettings, get_gcs_settings
from fsm import UPLOAD_OPEN_STATES, ProposalStatus, create_proposal_fsm
from utils.errors import BlobStorageError, InfrastructureError

logger = logging.getLogger(__name__)

Scheduler = Callable[[str, Coroutine[Any, Any, Any]], Any]

NOT_FOUND_MESSAGE = "Proposta não encontrada"
EXPIRED_MESSAGE = "Link de envio expirado"
SUBMIT_FAILED_MESSAGE = "Erro ao salvar a proposta. Tente novamente mais tarde."


def generate_upload_token() -> str:
    """Token de upload: credencial bearer, imprevisível."""
    return secrets.token_urlsafe(32)


def _safe_filename(filename: str) -> str:
    name = PurePosixPath(filename or "").name
    cleaned = "".join(char if char.isalnum() or char in "._-" else "_" for char in name)
    return cleaned.strip("._") or "arquivo"


class ProposalLifecycleManager:
    """Orquestra estados e efeitos colaterais de uma proposta."""

    def __init__(
        self,
        proposal_store: ProposalStoreProtocol,
        campaign_store: CampaignStoreProtocol,
        blob_store: BlobStoreProtocol,
        dispatcher: NotificationDispatcher,
        crm_sync: CrmSyncService,
        *,
        gcs_settings: GCSSettings | None = None,
        schedule: Scheduler = schedule_background_task,
        token_factory: Callable[[], str] = generate_upload_token,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._proposals = proposal_store
        self._campaigns = campaign_store
        self._blobs = blob_store
        self._dispatcher = dispatcher
        self._crm_sync = crm_sync
        self._gcs_settings = gcs_settings or get_gcs_settings()
        self._schedule = schedule
        self._token_factory = token_factory
        self._clock = clock

    @property
    def max_upload_bytes(self) -> int:
        return self._gcs_settings.max_upload_bytes

    # ──────────────────────────────────────────────────────────────
    # Criação
    # ──────────────────────────────────────────────────────────────

    async def submit_proposal(self, data: dict[str, Any]) -> ActionResult:
        """Valida e grava a proposta; a notificação inicial não bloqueia."""
        outcome = validate_proposal_form(data)
        if not outcome.ok or outcome.value is None:
            logger.info("proposal_validation_failed", extra={"fields": sorted(outcome.errors)})
            return ActionResult.fail(ErrorCode.VALIDATION, "Dados inválidos.", outcome.errors)

        now = self._clock()
        token = self._token_factory()
        fields = outcome.value.model_dump(exclude={"id"})
        fields.update(await self._resolve_campaign_linkage(outcome.value))
        fields.update(
            upload_token=token,
            upload_token_expires=now + UPLOAD_TOKEN_TTL,
            status=ProposalStatus.PENDING_DOCUMENTS,
            created_at=now,
        )

        try:
            proposal = await self._proposals.create(Proposal(**fields))
        except InfrastructureError:
            return ActionResult.fail(ErrorCode.STORAGE, SUBMIT_FAILED_MESSAGE)

        logger.info(
            "proposal_submitted",
            extra={
                "proposal_id": proposal.id,
                "campaign_id": proposal.campaign_id,
                "upload_token": mask_token(token),
            },
        )
        self._schedule(
            f"notification_initial:{proposal.id}",
            self._dispatcher.dispatch(proposal, NotificationType.INITIAL),
        )
        return ActionResult.ok(id=proposal.id)

    async def _resolve_campaign_linkage(self, form: ProposalForm) -> dict[str, Any]:
        """campaignId ausente vira "uncategorized"; campanha preenche clientId/functionId vazios."""
        campaign_id = (form.campaign_id or "").strip() or UNCATEGORIZED_CAMPAIGN_ID
        linkage: dict[str, Any] = {
            "campaign_id": campaign_id,
            "client_id": form.client_id,
            "function_id": form.function_id,
        }
        if campaign_id == UNCATEGORIZED_CAMPAIGN_ID:
            return linkage

        campaign = await self._campaigns.get(campaign_id)
        if campaign is None:
            logger.warning("proposal_campaign_not_found", extra={"campaign_id": campaign_id})
            return linkage
        if not (form.client_id or "").strip():
            linkage["client_id"] = campaign.client_id
        if not (form.function_id or "").strip():
            linkage["function_id"] = campaign.function_id
        return linkage

    # ──────────────────────────────────────────────────────────────
    # Página de upload
    # ──────────────────────────────────────────────────────────────

    async def get_by_upload_token(self, token: str) -> UploadTokenLookup:
        if not token:
            return UploadTokenLookup(status=TokenLookupStatus.NOT_FOUND)

        proposal = await self._proposals.find_by_upload_token(token)
        if proposal is None:
            logger.info("upload_token_not_found", extra={"upload_token": mask_token(token)})
            return UploadTokenLookup(status=TokenLookupStatus.NOT_FOUND)
        if proposal.is_upload_token_expired(self._clock()):
            logger.info(
                "upload_token_expired",
                extra={"proposal_id": proposal.id, "upload_token": mask_token(token)},
            )
            return UploadTokenLookup(status=TokenLookupStatus.EXPIRED)

        documents = await self._proposals.list_documents(proposal.id)
        return UploadTokenLookup(
            status=TokenLookupStatus.FOUND,
            proposal=proposal,
            documents=documents,
        )

    async def resolve_upload_token(self, token: str) -> tuple[Proposal | None, ActionResult | None]:
        """Proposta do token, ou o resultado de falha (não encontrado/expirado)."""
        lookup = await self.get_by_upload_token(token)
        if lookup.status == TokenLookupStatus.EXPIRED:
            return None, ActionResult.fail(ErrorCode.EXPIRED, EXPIRED_MESSAGE)
        if lookup.proposal is None:
            return None, ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
        return lookup.proposal, None

    async def attach_document(
        self,
        proposal_id: str,
        document_type: str,
        url: str,
        filename: str,
    ) -> ActionResult:
        """Registra um documento já armazenado. Não altera o status."""
        doc_type = parse_document_type(document_type)
        if doc_type is None:
            return ActionResult.fail(
                ErrorCode.VALIDATION,
                "Tipo de documento inválido",
                {"type": "Tipo de documento inválido"},
            )

        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
        if proposal.status not in UPLOAD_OPEN_STATES:
            return ActionResult.fail(
                ErrorCode.INVALID_STATE,
                "Cadastro já concluído: não é possível alterar documentos",
            )

        document = await self._proposals.add_document(
            proposal_id,
            ProposalDocument(url=url, filename=filename, type=doc_type.value, uploaded_at=self._clock()),
        )
        logger.info(
            "document_attached",
            extra={"proposal_id": proposal_id, "document_type": doc_type.value},
        )
        return ActionResult.ok(id=document.id, url=url, type=doc_type.value)

    async def upload_document(
        self,
        proposal_id: str,
        document_type: str,
        filename: str,
        content: bytes,
        content_type: str | None,
    ) -> ActionResult:
        """Grava o arquivo no blob store e anexa o documento à proposta."""
        doc_type = parse_document_type(document_type)
        if doc_type is None:
            return ActionResult.fail(
                ErrorCode.VALIDATION,
                "Tipo de documento inválido",
                {"type": "Tipo de documento inválido"},
            )
        if not content:
            return ActionResult.fail(ErrorCode.VALIDATION, "Arquivo vazio", {"file": "Arquivo vazio"})
        limit = self._gcs_settings.max_upload_bytes
        if len(content) > limit:
            return ActionResult.fail(
                ErrorCode.TOO_LARGE,
                f"Arquivo excede o limite de {limit // (1024 * 1024)} MB",
            )

        safe_name = _safe_filename(filename)
        path = f"proposals/{proposal_id}/{doc_type.value}/{uuid.uuid4().hex}-{safe_name}"
        try:
            url = await self._blobs.upload(path, content, content_type or "application/octet-stream")
        except BlobStorageError:
            return ActionResult.fail(ErrorCode.STORAGE, "Falha ao armazenar o arquivo")

        return await self.attach_document(proposal_id, doc_type.value, url, safe_name)

    async def remove_document(self, proposal_id: str, document_type: str) -> ActionResult:
        """Remove todos os documentos do tipo, em um único lote."""
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
        if proposal.status not in UPLOAD_OPEN_STATES:
            return ActionResult.fail(
                ErrorCode.INVALID_STATE,
                "Cadastro já concluído: não é possível alterar documentos",
            )

        removed = await self._proposals.delete_documents_by_type(proposal_id, document_type)
        logger.info(
            "documents_removed",
            extra={"proposal_id": proposal_id, "document_type": document_type, "count": removed},
        )
        return ActionResult.ok(removed=removed)

    async def finalize(self, proposal_id: str) -> ActionResult:
        """Marca documents_received e dispara notificação final e CRM em background.

        A completude dos documentos é responsabilidade da interface.
        """
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        fsm = create_proposal_fsm(proposal.id, proposal.status)
        transition = fsm.transition(ProposalStatus.DOCUMENTS_RECEIVED, trigger="finalize")
        if not transition.success:
            return ActionResult.fail(
                ErrorCode.INVALID_STATE,
                transition.error_reason or "Transição inválida",
            )

        submitted_at = self._clock()
        await self._proposals.update(
            proposal_id,
            {
                "status": ProposalStatus.DOCUMENTS_RECEIVED.value,
                "documentsSubmittedAt": to_iso(submitted_at),
            },
        )
        finalized = proposal.model_copy(
            update={
                "status": ProposalStatus.DOCUMENTS_RECEIVED,
                "documents_submitted_at": submitted_at,
            }
        )
        logger.info(
            "proposal_finalized",
            extra={"proposal_id": proposal_id, "from_state": proposal.status.value},
        )

        self._schedule(
            f"notification_final:{proposal_id}",
            self._dispatcher.dispatch(finalized, NotificationType.FINAL),
        )
        self._schedule(
            f"crm_sync_finalize:{proposal_id}",
            self._crm_sync.sync(proposal_id, trigger=SyncTrigger.FINALIZE),
        )
        return ActionResult.ok("Documentos enviados com sucesso")

    # ──────────────────────────────────────────────────────────────
    # CRM
    # ──────────────────────────────────────────────────────────────

    async def sync(self, proposal_id: str) -> SyncResult:
        return await self._crm_sync.sync(proposal_id, trigger=SyncTrigger.MANUAL)

    async def batch_sync(self, campaign_id: str) -> BatchSyncReport:
        return await self._crm_sync.batch_sync(campaign_id)

    # ──────────────────────────────────────────────────────────────
    # Administração
    # ──────────────────────────────────────────────────────────────

    async def cleanup_duplicates(
        self,
        campaign_id: str,
        dry_run: bool = False,
    ) -> DuplicateCleanupReport:
        """Mantém a proposta mais recente de cada CPF; remove as demais em lote.

        Com dry_run=True apenas relata o que seria removido.
        """
        report = DuplicateCleanupReport(campaign_id=campaign_id, dry_run=dry_run)
        try:
            proposals = await self._proposals.list_by_campaign(campaign_id)
        except InfrastructureError:
            report.error = "Erro ao carregar propostas da campanha"
            return report

        groups: dict[str, list[Proposal]] = defaultdict(list)
        for proposal in proposals:
            key = only_digits(proposal.cpf) or (proposal.cpf or "").strip()
            if key:
                groups[key].append(proposal)

        for group in groups.values():
            if len(group) < 2:
                continue
            newest_first = sorted(group, key=lambda item: (item.created_at, item.id), reverse=True)
            report.kept_ids.append(newest_first[0].id)
            report.duplicate_ids.extend(item.id for item in newest_first[1:])

        if dry_run or not report.duplicate_ids:
            logger.info(
                "duplicate_cleanup_previewed" if dry_run else "duplicate_cleanup_nothing_to_do",
                extra={"campaign_id": campaign_id, "duplicates": len(report.duplicate_ids)},
            )
            return report

        try:
            report.deleted_count = await self._proposals.delete_many(report.duplicate_ids)
        except InfrastructureError:
            report.error = "Erro ao remover propostas duplicadas"
            return report

        logger.info(
            "duplicate_cleanup_completed",
            extra={"campaign_id": campaign_id, "deleted_count": report.deleted_count},
        )
        return report

    async def delete_proposal(self, proposal_id: str) -> ActionResult:
        """Remoção definitiva, incluindo documentos e auditorias."""
        deleted = await self._proposals.delete_many([proposal_id])
        if not deleted:
            return ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
        logger.info("proposal_deleted", extra={"proposal_id": proposal_id})
        return ActionResult.ok("Proposta removida")

    async def resend_notification(self, proposal_id: str, notification_type: str) -> ActionResult:
        """Reenvia usando os dados atuais da proposta (telefone mais recente)."""
        try:
            parsed_type = NotificationType(notification_type)
        except ValueError:
            return ActionResult.fail(ErrorCode.VALIDATION, "Tipo de notificação inválido")

        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return ActionResult.fail(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        outcome = await self._dispatcher.dispatch(proposal, parsed_type)
        if not outcome.success:
            return ActionResult.fail(
                ErrorCode.EXTERNAL,
                f"Falha ao reenviar notificação: {outcome.error}",
            )
        return ActionResult.ok("Notificação reenviada")

    async def get_proposal_detail(self, proposal_id: str) -> dict[str, Any] | None:
        """Proposta com documentos (mais recentes primeiro) e auditorias."""
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return None
        documents = await self._proposals.list_documents(proposal_id)
        notifications = await self._proposals.list_notifications(proposal_id)
        crm_syncs = await self._proposals.list_crm_syncs(proposal_id)
        return {
            **proposal.to_public_dict(),
            "documents": [document.to_public_dict() for document in documents],
            "notifications": [record.to_public_dict() for record in notifications],
            "crmSyncs": [record.to_public_dict() for record in crm_syncs],
        }

    async def list_proposals(self, query: ProposalQuery | None = None) -> ProposalPage:
        return await self._proposals.list(query or ProposalQuery())
