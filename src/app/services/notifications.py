"""Dispatcher de notificações ao proponente.

Cada tentativa (sucesso ou erro) vira um registro append-only na
subcollection `notifications`. Falhas nunca sobem para o chamador.
"""

from __future__ import annotations

import logging
from typing import Any

from app.domain.notification import NotificationRecord, NotificationStatus, NotificationType
from app.domain.proposal import Proposal
from app.protocols.notification_client import NotificationClientProtocol, NotificationDelivery
from app.protocols.proposal_store import ProposalStoreProtocol
from app.services.crm_mapping import normalize_phone
from app.services.results import NotificationOutcome

logger = logging.getLogger(__name__)


def build_notification_payload(
    proposal: Proposal,
    notification_type: NotificationType,
) -> dict[str, Any]:
    """Corpo enviado ao relay, derivado do estado atual da proposta."""
    payload: dict[str, Any] = {"nome": proposal.nome_completo or ""}
    if notification_type == NotificationType.INITIAL:
        payload["link"] = f"/{proposal.upload_token}"
    payload["numero"] = normalize_phone(proposal.telefone)
    return payload


class NotificationDispatcher:
    """Envia notificações e grava a auditoria de cada tentativa."""

    def __init__(
        self,
        client: NotificationClientProtocol,
        proposal_store: ProposalStoreProtocol,
    ) -> None:
        self._client = client
        self._store = proposal_store

    async def dispatch(
        self,
        proposal: Proposal,
        notification_type: NotificationType,
    ) -> NotificationOutcome:
        payload = build_notification_payload(proposal, notification_type)
        try:
            delivery = await self._client.send(notification_type, payload)
        except Exception as exc:
            # Fronteira de erro: cliente fora do contrato não derruba o chamador
            delivery = NotificationDelivery(success=False, error=f"{type(exc).__name__}: {exc}")

        record = NotificationRecord(
            type=notification_type,
            status=NotificationStatus.SUCCESS if delivery.success else NotificationStatus.ERROR,
            error=delivery.error,
            payload=payload,
        )
        log_extra = {
            "proposal_id": proposal.id,
            "type": notification_type.value,
            "status_code": delivery.status_code,
        }
        if delivery.success:
            logger.info("notification_sent", extra=log_extra)
        else:
            logger.warning("notification_failed", extra={**log_extra, "error": delivery.error})

        try:
            record = await self._store.add_notification(proposal.id, record)
        except Exception as exc:
            logger.error(
                "notification_audit_write_failed",
                extra={**log_extra, "error_type": type(exc).__name__},
            )

        return NotificationOutcome(
            success=delivery.success,
            notification_type=notification_type,
            error=delivery.error,
            record=record,
        )
