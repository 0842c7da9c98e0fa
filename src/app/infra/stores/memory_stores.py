"""Stores em memória: somente para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Os documentos são guardados já serializados (mesmo dict gravado no
Firestore), para que as conversões de modelo sejam exercitadas.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Any, TypeVar

from app.domain._firestore_model import FirestoreModel, to_iso
from app.domain.campaign import Campaign
from app.domain.crm_sync import CrmSyncRecord
from app.domain.document import ProposalDocument
from app.domain.notification import NotificationRecord
from app.domain.proposal import Proposal
from app.protocols.blob_store import BlobStoreProtocol
from app.protocols.campaign_store import CampaignStoreProtocol
from app.protocols.proposal_store import ProposalPage, ProposalQuery, ProposalStoreProtocol

ModelT = TypeVar("ModelT", bound=FirestoreModel)

_Children = dict[str, dict[str, dict[str, Any]]]  # proposal_id -> doc_id -> dados


def _new_id() -> str:
    return uuid.uuid4().hex[:20]


class MemoryProposalStore(ProposalStoreProtocol):
    """Store de propostas em memória (somente dev/test)."""

    def __init__(self) -> None:
        self._proposals: dict[str, dict[str, Any]] = {}
        self._documents: _Children = defaultdict(dict)
        self._notifications: _Children = defaultdict(dict)
        self._crm_syncs: _Children = defaultdict(dict)

    def _load(self, proposal_id: str) -> Proposal | None:
        data = self._proposals.get(proposal_id)
        if data is None:
            return None
        return Proposal.from_firestore(proposal_id, data)

    async def create(self, proposal: Proposal) -> Proposal:
        proposal_id = proposal.id or _new_id()
        self._proposals[proposal_id] = proposal.to_firestore_dict()
        return proposal.model_copy(update={"id": proposal_id})

    async def get(self, proposal_id: str) -> Proposal | None:
        return self._load(proposal_id)

    async def find_by_upload_token(self, token: str) -> Proposal | None:
        for proposal_id, data in self._proposals.items():
            if data.get("uploadToken") == token:
                return self._load(proposal_id)
        return None

    async def update(self, proposal_id: str, changes: dict[str, Any]) -> bool:
        data = self._proposals.get(proposal_id)
        if data is None:
            return False
        data.update(changes)
        return True

    def _matches(self, data: dict[str, Any], query: ProposalQuery) -> bool:
        if query.campaign_id and data.get("campaignId") != query.campaign_id:
            return False
        if query.status and data.get("status") != query.status:
            return False
        created_at = data.get("createdAt", "")
        if query.created_from and created_at < to_iso(query.created_from):
            return False
        if query.created_to and created_at > to_iso(query.created_to):
            return False
        return True

    async def list(self, query: ProposalQuery) -> ProposalPage:
        matching = sorted(
            (
                (proposal_id, data)
                for proposal_id, data in self._proposals.items()
                if self._matches(data, query)
            ),
            key=lambda item: (item[1].get("createdAt", ""), item[0]),
            reverse=True,
        )
        ids = [proposal_id for proposal_id, _ in matching]
        start = ids.index(query.cursor) + 1 if query.cursor in ids else 0
        window = ids[start : start + query.limit]
        items = [Proposal.from_firestore(pid, self._proposals[pid]) for pid in window]
        has_more = start + query.limit < len(ids)
        return ProposalPage(items=items, next_cursor=window[-1] if has_more and window else None)

    async def list_by_campaign(self, campaign_id: str) -> list[Proposal]:
        return [
            Proposal.from_firestore(proposal_id, data)
            for proposal_id, data in self._proposals.items()
            if data.get("campaignId") == campaign_id
        ]

    async def delete_many(self, proposal_ids: list[str]) -> int:
        deleted = 0
        for proposal_id in proposal_ids:
            if self._proposals.pop(proposal_id, None) is None:
                continue
            deleted += 1
            for children in (self._documents, self._notifications, self._crm_syncs):
                children.pop(proposal_id, None)
        return deleted

    @staticmethod
    def _add_child(children: _Children, proposal_id: str, model: ModelT) -> ModelT:
        child_id = _new_id()
        children[proposal_id][child_id] = model.to_firestore_dict()
        return model.model_copy(update={"id": child_id})

    @staticmethod
    def _list_children(
        children: _Children, proposal_id: str, model_cls: type[ModelT]
    ) -> list[ModelT]:
        return [
            model_cls.from_firestore(child_id, data)
            for child_id, data in children.get(proposal_id, {}).items()
        ]

    async def add_document(self, proposal_id: str, document: ProposalDocument) -> ProposalDocument:
        return self._add_child(self._documents, proposal_id, document)

    async def list_documents(self, proposal_id: str) -> list[ProposalDocument]:
        documents = self._list_children(self._documents, proposal_id, ProposalDocument)
        return sorted(documents, key=lambda doc: doc.uploaded_at, reverse=True)

    async def delete_documents_by_type(self, proposal_id: str, document_type: str) -> int:
        documents = self._documents.get(proposal_id, {})
        doomed = [doc_id for doc_id, data in documents.items() if data.get("type") == document_type]
        for doc_id in doomed:
            del documents[doc_id]
        return len(doomed)

    async def add_notification(
        self, proposal_id: str, record: NotificationRecord
    ) -> NotificationRecord:
        return self._add_child(self._notifications, proposal_id, record)

    async def list_notifications(self, proposal_id: str) -> list[NotificationRecord]:
        records = self._list_children(self._notifications, proposal_id, NotificationRecord)
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    async def add_crm_sync(self, proposal_id: str, record: CrmSyncRecord) -> CrmSyncRecord:
        return self._add_child(self._crm_syncs, proposal_id, record)

    async def list_crm_syncs(self, proposal_id: str) -> list[CrmSyncRecord]:
        records = self._list_children(self._crm_syncs, proposal_id, CrmSyncRecord)
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    async def ping(self) -> bool:
        return True


class MemoryCampaignStore(CampaignStoreProtocol):
    """Store de campanhas em memória (somente dev/test)."""

    def __init__(self) -> None:
        self._campaigns: dict[str, dict[str, Any]] = {}

    async def create(self, campaign: Campaign) -> Campaign:
        campaign_id = campaign.id or _new_id()
        self._campaigns[campaign_id] = campaign.to_firestore_dict()
        return campaign.model_copy(update={"id": campaign_id})

    async def update(self, campaign_id: str, changes: dict[str, Any]) -> bool:
        data = self._campaigns.get(campaign_id)
        if data is None:
            return False
        data.update(changes)
        return True

    async def get(self, campaign_id: str) -> Campaign | None:
        data = self._campaigns.get(campaign_id)
        return Campaign.from_firestore(campaign_id, data) if data is not None else None

    async def get_active_by_slug(self, slug: str) -> Campaign | None:
        for campaign_id, data in self._campaigns.items():
            if data.get("slug") == slug and data.get("active") is True:
                return Campaign.from_firestore(campaign_id, data)
        return None

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        return any(
            data.get("slug") == slug and campaign_id != exclude_id
            for campaign_id, data in self._campaigns.items()
        )

    async def list(self) -> list[Campaign]:
        campaigns = [
            Campaign.from_firestore(campaign_id, data)
            for campaign_id, data in self._campaigns.items()
        ]
        return sorted(campaigns, key=lambda campaign: campaign.created_at, reverse=True)


class MemoryBlobStore(BlobStoreProtocol):
    """Blob store em memória (somente dev/test)."""

    def __init__(self, base_url: str = "memory://documents") -> None:
        self._base_url = base_url.rstrip("/")
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        self.objects[path] = (content, content_type)
        return f"{self._base_url}/{path}"
