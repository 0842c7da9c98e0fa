"""Protocolo para persistência de propostas e suas subcollections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from app.domain.crm_sync import CrmSyncRecord
from app.domain.document import ProposalDocument
from app.domain.notification import NotificationRecord
from app.domain.proposal import Proposal

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class ProposalQuery:
    """Filtros de listagem (igualdade + intervalo de createdAt), mais recentes primeiro."""

    campaign_id: str | None = None
    status: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    limit: int = DEFAULT_PAGE_SIZE
    cursor: str | None = None


@dataclass(frozen=True, slots=True)
class ProposalPage:
    """Página de resultados; next_cursor é o id do último item quando há mais."""

    items: list[Proposal] = field(default_factory=list)
    next_cursor: str | None = None


class ProposalStoreProtocol(Protocol):
    """Contrato para store de propostas."""

    async def create(self, proposal: Proposal) -> Proposal:
        """Persiste nova proposta e retorna com id atribuído."""
        ...

    async def get(self, proposal_id: str) -> Proposal | None:
        ...

    async def find_by_upload_token(self, token: str) -> Proposal | None:
        ...

    async def update(self, proposal_id: str, changes: dict[str, Any]) -> bool:
        """Atualização parcial (chaves camelCase). False se não existe."""
        ...

    async def list(self, query: ProposalQuery) -> ProposalPage:
        ...

    async def list_by_campaign(self, campaign_id: str) -> list[Proposal]:
        """Todas as propostas da campanha, sem paginação."""
        ...

    async def delete_many(self, proposal_ids: list[str]) -> int:
        """Remove propostas e subcollections em lote. Retorna quantas existiam."""
        ...

    async def add_document(self, proposal_id: str, document: ProposalDocument) -> ProposalDocument:
        ...

    async def list_documents(self, proposal_id: str) -> list[ProposalDocument]:
        """Documentos da proposta, mais recentes primeiro."""
        ...

    async def delete_documents_by_type(self, proposal_id: str, document_type: str) -> int:
        """Remove todos os documentos do tipo em um único lote."""
        ...

    async def add_notification(
        self, proposal_id: str, record: NotificationRecord
    ) -> NotificationRecord:
        ...

    async def list_notifications(self, proposal_id: str) -> list[NotificationRecord]:
        ...

    async def add_crm_sync(self, proposal_id: str, record: CrmSyncRecord) -> CrmSyncRecord:
        ...

    async def list_crm_syncs(self, proposal_id: str) -> list[CrmSyncRecord]:
        ...

    async def ping(self) -> bool:
        """Verifica conectividade com o backend (readiness)."""
        ...
