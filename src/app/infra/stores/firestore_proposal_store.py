"""Firestore Proposal Store.

Proposta em `proposals/{id}` com subcollections de documentos,
notificações e envios ao CRM. Cliente síncrono executado em thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.domain._firestore_model import FirestoreModel, to_iso
from app.domain.crm_sync import CrmSyncRecord
from app.domain.document import ProposalDocument
from app.domain.notification import NotificationRecord
from app.domain.proposal import Proposal
from app.protocols.proposal_store import ProposalPage, ProposalQuery, ProposalStoreProtocol
from config.settings import FirestoreSettings, get_firestore_settings
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore import DocumentReference

logger = logging.getLogger(__name__)

# Limite de operações por WriteBatch do Firestore
_BATCH_LIMIT = 450

ModelT = TypeVar("ModelT", bound=FirestoreModel)


def _raise_unavailable(event: str, exc: Exception, **context: Any) -> NoReturn:
    logger.error(
        event,
        extra={"error": str(exc), "error_type": type(exc).__name__, **context},
    )
    raise FirestoreUnavailableError(f"{event}: {exc}") from exc


class FirestoreProposalStore(ProposalStoreProtocol):
    """Store de propostas usando Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        settings: FirestoreSettings | None = None,
    ) -> None:
        self._db = firestore_client
        self._settings = settings or get_firestore_settings()

    @property
    def _collection(self) -> Any:
        return self._db.collection(self._settings.collection_proposals)

    def _subcollection(self, proposal_id: str, name: str) -> Any:
        return self._collection.document(proposal_id).collection(name)

    # ──────────────────────────────────────────────────────────────
    # Proposta
    # ──────────────────────────────────────────────────────────────

    async def create(self, proposal: Proposal) -> Proposal:
        return await asyncio.to_thread(self._create_sync, proposal)

    def _create_sync(self, proposal: Proposal) -> Proposal:
        try:
            doc_ref = self._collection.document()
            doc_ref.set(proposal.to_firestore_dict())
        except Exception as exc:
            _raise_unavailable("proposal_create_failed", exc)
        logger.info("proposal_created", extra={"proposal_id": doc_ref.id})
        return proposal.model_copy(update={"id": doc_ref.id})

    async def get(self, proposal_id: str) -> Proposal | None:
        return await asyncio.to_thread(self._get_sync, proposal_id)

    def _get_sync(self, proposal_id: str) -> Proposal | None:
        try:
            doc = self._collection.document(proposal_id).get()
        except Exception as exc:
            _raise_unavailable("proposal_get_failed", exc, proposal_id=proposal_id)
        if not doc.exists:
            return None
        return Proposal.from_firestore(doc.id, doc.to_dict())

    async def find_by_upload_token(self, token: str) -> Proposal | None:
        return await asyncio.to_thread(self._find_by_upload_token_sync, token)

    def _find_by_upload_token_sync(self, token: str) -> Proposal | None:
        try:
            docs = list(
                self._collection.where(filter=FieldFilter("uploadToken", "==", token))
                .limit(1)
                .stream()
            )
        except Exception as exc:
            _raise_unavailable("proposal_token_lookup_failed", exc)
        if not docs:
            return None
        return Proposal.from_firestore(docs[0].id, docs[0].to_dict())

    async def update(self, proposal_id: str, changes: dict[str, Any]) -> bool:
        return await asyncio.to_thread(self._update_sync, proposal_id, changes)

    def _update_sync(self, proposal_id: str, changes: dict[str, Any]) -> bool:
        doc_ref = self._collection.document(proposal_id)
        try:
            if not doc_ref.get().exists:
                return False
            doc_ref.update(changes)
        except Exception as exc:
            _raise_unavailable("proposal_update_failed", exc, proposal_id=proposal_id)
        return True

    async def list(self, query: ProposalQuery) -> ProposalPage:
        return await asyncio.to_thread(self._list_sync, query)

    def _list_sync(self, query: ProposalQuery) -> ProposalPage:
        stmt = self._collection
        if query.campaign_id:
            stmt = stmt.where(filter=FieldFilter("campaignId", "==", query.campaign_id))
        if query.status:
            stmt = stmt.where(filter=FieldFilter("status", "==", query.status))
        if query.created_from:
            stmt = stmt.where(filter=FieldFilter("createdAt", ">=", to_iso(query.created_from)))
        if query.created_to:
            stmt = stmt.where(filter=FieldFilter("createdAt", "<=", to_iso(query.created_to)))
        stmt = stmt.order_by("createdAt", direction=firestore.Query.DESCENDING)

        try:
            if query.cursor:
                cursor_doc = self._collection.document(query.cursor).get()
                if cursor_doc.exists:
                    stmt = stmt.start_after(cursor_doc)
            # Um item extra indica se existe próxima página
            docs = list(stmt.limit(query.limit + 1).stream())
        except Exception as exc:
            _raise_unavailable("proposal_list_failed", exc)

        items = [Proposal.from_firestore(doc.id, doc.to_dict()) for doc in docs[: query.limit]]
        next_cursor = items[-1].id if len(docs) > query.limit and items else None
        return ProposalPage(items=items, next_cursor=next_cursor)

    async def list_by_campaign(self, campaign_id: str) -> list[Proposal]:
        return await asyncio.to_thread(self._list_by_campaign_sync, campaign_id)

    def _list_by_campaign_sync(self, campaign_id: str) -> list[Proposal]:
        try:
            docs = self._collection.where(
                filter=FieldFilter("campaignId", "==", campaign_id)
            ).stream()
            return [Proposal.from_firestore(doc.id, doc.to_dict()) for doc in docs]
        except Exception as exc:
            _raise_unavailable("proposal_list_by_campaign_failed", exc, campaign_id=campaign_id)

    async def delete_many(self, proposal_ids: list[str]) -> int:
        return await asyncio.to_thread(self._delete_many_sync, proposal_ids)

    def _delete_many_sync(self, proposal_ids: list[str]) -> int:
        subcollections = (
            self._settings.subcollection_documents,
            self._settings.subcollection_notifications,
            self._settings.subcollection_crm_syncs,
        )
        refs: list[DocumentReference] = []
        deleted = 0
        try:
            for proposal_id in proposal_ids:
                doc_ref = self._collection.document(proposal_id)
                if not doc_ref.get().exists:
                    continue
                deleted += 1
                for name in subcollections:
                    refs.extend(child.reference for child in doc_ref.collection(name).stream())
                refs.append(doc_ref)
            self._commit_deletes(refs)
        except Exception as exc:
            _raise_unavailable("proposal_delete_failed", exc, count=len(proposal_ids))
        logger.info("proposals_deleted", extra={"count": deleted})
        return deleted

    def _commit_deletes(self, refs: list[DocumentReference]) -> None:
        for start in range(0, len(refs), _BATCH_LIMIT):
            batch = self._db.batch()
            for ref in refs[start : start + _BATCH_LIMIT]:
                batch.delete(ref)
            batch.commit()

    # ──────────────────────────────────────────────────────────────
    # Subcollections
    # ──────────────────────────────────────────────────────────────

    async def add_document(self, proposal_id: str, document: ProposalDocument) -> ProposalDocument:
        return await asyncio.to_thread(
            self._add_child_sync, proposal_id, self._settings.subcollection_documents, document
        )

    async def list_documents(self, proposal_id: str) -> list[ProposalDocument]:
        documents = await asyncio.to_thread(
            self._list_children_sync,
            proposal_id,
            self._settings.subcollection_documents,
            ProposalDocument,
        )
        return sorted(documents, key=lambda doc: doc.uploaded_at, reverse=True)

    async def delete_documents_by_type(self, proposal_id: str, document_type: str) -> int:
        return await asyncio.to_thread(
            self._delete_documents_by_type_sync, proposal_id, document_type
        )

    def _delete_documents_by_type_sync(self, proposal_id: str, document_type: str) -> int:
        try:
            docs = list(
                self._subcollection(proposal_id, self._settings.subcollection_documents)
                .where(filter=FieldFilter("type", "==", document_type))
                .stream()
            )
            if docs:
                batch = self._db.batch()
                for doc in docs:
                    batch.delete(doc.reference)
                batch.commit()
        except Exception as exc:
            _raise_unavailable("document_delete_failed", exc, proposal_id=proposal_id)
        return len(docs)

    async def add_notification(
        self, proposal_id: str, record: NotificationRecord
    ) -> NotificationRecord:
        return await asyncio.to_thread(
            self._add_child_sync, proposal_id, self._settings.subcollection_notifications, record
        )

    async def list_notifications(self, proposal_id: str) -> list[NotificationRecord]:
        records = await asyncio.to_thread(
            self._list_children_sync,
            proposal_id,
            self._settings.subcollection_notifications,
            NotificationRecord,
        )
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    async def add_crm_sync(self, proposal_id: str, record: CrmSyncRecord) -> CrmSyncRecord:
        return await asyncio.to_thread(
            self._add_child_sync, proposal_id, self._settings.subcollection_crm_syncs, record
        )

    async def list_crm_syncs(self, proposal_id: str) -> list[CrmSyncRecord]:
        records = await asyncio.to_thread(
            self._list_children_sync,
            proposal_id,
            self._settings.subcollection_crm_syncs,
            CrmSyncRecord,
        )
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    def _add_child_sync(self, proposal_id: str, name: str, model: ModelT) -> ModelT:
        try:
            doc_ref = self._subcollection(proposal_id, name).document()
            doc_ref.set(model.to_firestore_dict())
        except Exception as exc:
            _raise_unavailable(
                "proposal_child_add_failed", exc, proposal_id=proposal_id, subcollection=name
            )
        return model.model_copy(update={"id": doc_ref.id})

    def _list_children_sync(
        self, proposal_id: str, name: str, model_cls: type[ModelT]
    ) -> list[ModelT]:
        try:
            docs = self._subcollection(proposal_id, name).stream()
            return [model_cls.from_firestore(doc.id, doc.to_dict()) for doc in docs]
        except Exception as exc:
            _raise_unavailable(
                "proposal_child_list_failed", exc, proposal_id=proposal_id, subcollection=name
            )

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._ping_sync)

    def _ping_sync(self) -> bool:
        try:
            list(self._collection.limit(1).stream())
            return True
        except Exception as exc:
            logger.warning("firestore_ping_failed", extra={"error_type": type(exc).__name__})
            return False
