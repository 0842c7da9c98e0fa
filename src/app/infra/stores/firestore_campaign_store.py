"""Firestore Campaign Store."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.domain.campaign import Campaign
from app.protocols.campaign_store import CampaignStoreProtocol
from config.settings import FirestoreSettings, get_firestore_settings
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)


class FirestoreCampaignStore(CampaignStoreProtocol):
    """Store de campanhas usando Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        settings: FirestoreSettings | None = None,
    ) -> None:
        self._db = firestore_client
        self._settings = settings or get_firestore_settings()

    @property
    def _collection(self) -> Any:
        return self._db.collection(self._settings.collection_campaigns)

    def _fail(self, event: str, exc: Exception) -> FirestoreUnavailableError:
        logger.error(event, extra={"error": str(exc), "error_type": type(exc).__name__})
        return FirestoreUnavailableError(f"{event}: {exc}")

    async def create(self, campaign: Campaign) -> Campaign:
        return await asyncio.to_thread(self._create_sync, campaign)

    def _create_sync(self, campaign: Campaign) -> Campaign:
        try:
            doc_ref = self._collection.document()
            doc_ref.set(campaign.to_firestore_dict())
        except Exception as exc:
            raise self._fail("campaign_create_failed", exc) from exc
        logger.info("campaign_created", extra={"campaign_id": doc_ref.id})
        return campaign.model_copy(update={"id": doc_ref.id})

    async def update(self, campaign_id: str, changes: dict[str, Any]) -> bool:
        return await asyncio.to_thread(self._update_sync, campaign_id, changes)

    def _update_sync(self, campaign_id: str, changes: dict[str, Any]) -> bool:
        doc_ref = self._collection.document(campaign_id)
        try:
            if not doc_ref.get().exists:
                return False
            doc_ref.update(changes)
        except Exception as exc:
            raise self._fail("campaign_update_failed", exc) from exc
        return True

    async def get(self, campaign_id: str) -> Campaign | None:
        return await asyncio.to_thread(self._get_sync, campaign_id)

    def _get_sync(self, campaign_id: str) -> Campaign | None:
        try:
            doc = self._collection.document(campaign_id).get()
        except Exception as exc:
            raise self._fail("campaign_get_failed", exc) from exc
        if not doc.exists:
            return None
        return Campaign.from_firestore(doc.id, doc.to_dict())

    async def get_active_by_slug(self, slug: str) -> Campaign | None:
        return await asyncio.to_thread(self._get_active_by_slug_sync, slug)

    def _get_active_by_slug_sync(self, slug: str) -> Campaign | None:
        try:
            docs = list(
                self._collection.where(filter=FieldFilter("slug", "==", slug))
                .where(filter=FieldFilter("active", "==", True))
                .limit(1)
                .stream()
            )
        except Exception as exc:
            raise self._fail("campaign_slug_lookup_failed", exc) from exc
        if not docs:
            return None
        return Campaign.from_firestore(docs[0].id, docs[0].to_dict())

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        return await asyncio.to_thread(self._slug_exists_sync, slug, exclude_id)

    def _slug_exists_sync(self, slug: str, exclude_id: str | None) -> bool:
        try:
            docs = self._collection.where(filter=FieldFilter("slug", "==", slug)).stream()
            return any(doc.id != exclude_id for doc in docs)
        except Exception as exc:
            raise self._fail("campaign_slug_check_failed", exc) from exc

    async def list(self) -> list[Campaign]:
        return await asyncio.to_thread(self._list_sync)

    def _list_sync(self) -> list[Campaign]:
        try:
            docs = self._collection.order_by(
                "createdAt", direction=firestore.Query.DESCENDING
            ).stream()
            return [Campaign.from_firestore(doc.id, doc.to_dict()) for doc in docs]
        except Exception as exc:
            raise self._fail("campaign_list_failed", exc) from exc
