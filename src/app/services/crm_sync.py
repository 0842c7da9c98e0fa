"""Envio de propostas ao CRM (individual e em lote).

O envio relê proposta e documentos, remonta o multipart completo e,
em caso de sucesso, marca a proposta como `completed`. Cada tentativa
gera um registro em `crmSyncs`.

Envios sobrepostos da mesma proposta são serializados por um lock
local ao processo; entre instâncias diferentes a corrida continua
possível (o CRM pode receber o cadastro duas vezes).
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Awaitable, Callable

from app.domain._firestore_model import to_iso, utcnow
from app.domain.campaign import UNCATEGORIZED_CAMPAIGN_ID, Campaign
from app.domain.crm_sync import CrmSyncRecord, SyncStatus, SyncTrigger
from app.domain.proposal import Proposal
from app.protocols.campaign_store import CampaignStoreProtocol
from app.protocols.crm_client import CrmClientProtocol, CrmSubmitResult
from app.protocols.proposal_store import ProposalStoreProtocol
from app.services.crm_documents import CrmDocumentAssembler
from app.services.crm_mapping import build_crm_fields
from app.services.results import BatchFailure, BatchSyncReport, SyncResult
from config.settings import CRMSettings, get_crm_settings
from fsm import ProposalStatus, create_proposal_fsm

logger = logging.getLogger(__name__)

PROPOSAL_NOT_FOUND = "Proposta não encontrada"


class CrmSyncService:
    """Orquestra o envio ao CRM e a auditoria de cada tentativa."""

    def __init__(
        self,
        proposal_store: ProposalStoreProtocol,
        campaign_store: CampaignStoreProtocol,
        crm_client: CrmClientProtocol,
        assembler: CrmDocumentAssembler,
        settings: CRMSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._proposals = proposal_store
        self._campaigns = campaign_store
        self._crm = crm_client
        self._assembler = assembler
        self._settings = settings or get_crm_settings()
        self._sleep = sleep
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, proposal_id: str) -> asyncio.Lock:
        lock = self._locks.get(proposal_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[proposal_id] = lock
        return lock

    async def sync(
        self,
        proposal_id: str,
        trigger: SyncTrigger = SyncTrigger.MANUAL,
    ) -> SyncResult:
        """Envia a proposta ao CRM. Sem guarda de `completed`: reenvia sempre."""
        lock = self._lock_for(proposal_id)
        async with lock:
            try:
                return await self._sync_locked(proposal_id, trigger)
            except Exception as exc:
                logger.error(
                    "crm_sync_unexpected_error",
                    extra={
                        "proposal_id": proposal_id,
                        "trigger": trigger.value,
                        "error_type": type(exc).__name__,
                    },
                )
                error = f"Erro inesperado no envio ao CRM: {type(exc).__name__}"
                await self._record(proposal_id, trigger, CrmSubmitResult(success=False, error=error))
                return SyncResult(success=False, proposal_id=proposal_id, error=error)

    async def _sync_locked(self, proposal_id: str, trigger: SyncTrigger) -> SyncResult:
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            return SyncResult(
                success=False,
                proposal_id=proposal_id,
                error=PROPOSAL_NOT_FOUND,
                not_found=True,
            )

        campaign = await self._linked_campaign(proposal)
        documents = await self._proposals.list_documents(proposal_id)
        fields = build_crm_fields(
            proposal,
            campaign,
            missing_value=self._settings.missing_field_value,
        )
        parts = await self._assembler.build_parts(documents)

        logger.info(
            "crm_sync_started",
            extra={
                "proposal_id": proposal_id,
                "trigger": trigger.value,
                "document_count": len(documents),
                "has_contract": "ContractId" in fields,
            },
        )
        submit = await self._crm.submit(fields, parts)
        await self._record(proposal_id, trigger, submit)

        if not submit.success:
            logger.warning(
                "crm_sync_failed",
                extra={
                    "proposal_id": proposal_id,
                    "trigger": trigger.value,
                    "status_code": submit.status_code,
                },
            )
            return SyncResult(
                success=False,
                proposal_id=proposal_id,
                error=submit.error or "Falha no envio ao CRM",
                status_code=submit.status_code,
            )

        # CRM já aceitou: daqui em diante o resultado é sempre sucesso
        try:
            await self._mark_completed(proposal)
        except Exception as exc:
            logger.error(
                "crm_sync_status_write_failed",
                extra={
                    "proposal_id": proposal_id,
                    "trigger": trigger.value,
                    "error_type": type(exc).__name__,
                },
            )
            return SyncResult(
                success=True,
                proposal_id=proposal_id,
                status_code=submit.status_code,
                persistence_error=f"Falha ao atualizar status da proposta: {type(exc).__name__}",
            )

        logger.info("crm_sync_succeeded", extra={"proposal_id": proposal_id})
        return SyncResult(success=True, proposal_id=proposal_id, status_code=submit.status_code)

    async def _linked_campaign(self, proposal: Proposal) -> Campaign | None:
        campaign_id = proposal.campaign_id
        if not campaign_id or campaign_id == UNCATEGORIZED_CAMPAIGN_ID:
            return None
        return await self._campaigns.get(campaign_id)

    async def _mark_completed(self, proposal: Proposal) -> None:
        fsm = create_proposal_fsm(proposal.id, proposal.status)
        result = fsm.transition(ProposalStatus.COMPLETED, trigger="crm_sync")
        if not result.success:
            logger.warning(
                "crm_sync_transition_rejected",
                extra={"proposal_id": proposal.id, "reason": result.error_reason},
            )
            return
        await self._proposals.update(
            proposal.id,
            {
                "status": ProposalStatus.COMPLETED.value,
                "crmSynced": True,
                "crmSyncedAt": to_iso(utcnow()),
            },
        )

    async def _record(
        self,
        proposal_id: str,
        trigger: SyncTrigger,
        submit: CrmSubmitResult,
    ) -> None:
        record = CrmSyncRecord(
            trigger=trigger,
            status=SyncStatus.SUCCESS if submit.success else SyncStatus.ERROR,
            error=submit.error,
            status_code=submit.status_code,
            payload_bytes=submit.payload_bytes or None,
        )
        try:
            await self._proposals.add_crm_sync(proposal_id, record)
        except Exception as exc:
            logger.error(
                "crm_sync_audit_write_failed",
                extra={"proposal_id": proposal_id, "error_type": type(exc).__name__},
            )

    async def batch_sync(self, campaign_id: str) -> BatchSyncReport:
        """Envia, em sequência e com intervalo fixo, as propostas ainda não sincronizadas.

        Propostas `completed` ou com `crmSynced` são puladas. Falhas de uma
        proposta não interrompem as demais.
        """
        report = BatchSyncReport(campaign_id=campaign_id)
        try:
            proposals = await self._proposals.list_by_campaign(campaign_id)
        except Exception as exc:
            logger.error(
                "crm_batch_sync_list_failed",
                extra={"campaign_id": campaign_id, "error_type": type(exc).__name__},
            )
            report.error = "Erro ao carregar propostas da campanha"
            return report

        for proposal in sorted(proposals, key=lambda item: item.created_at):
            if proposal.is_synced:
                report.skipped_count += 1
                continue
            if report.attempted:
                await self._sleep(self._settings.batch_delay_seconds)

            result = await self.sync(proposal.id, trigger=SyncTrigger.BATCH)
            if result.success:
                report.success_count += 1
            else:
                report.fail_count += 1
                report.failures.append(
                    BatchFailure(
                        proposal_id=proposal.id,
                        name=proposal.nome_completo,
                        error=result.error or "Falha no envio ao CRM",
                    )
                )

        logger.info(
            "crm_batch_sync_completed",
            extra={
                "campaign_id": campaign_id,
                "success_count": report.success_count,
                "fail_count": report.fail_count,
                "skipped_count": report.skipped_count,
            },
        )
        return report
