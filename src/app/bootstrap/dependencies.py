"""Factories de stores e integrações: criação de implementações concretas.

Backends escolhidos por variável de ambiente:
- PROPOSAL_STORE_BACKEND / CAMPAIGN_STORE_BACKEND: "memory" | "firestore"
- BLOB_STORE_BACKEND: "memory" | "gcs"

Padrão: memória em development/test, nuvem em staging/production.
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.clients import create_firestore_client, create_storage_client
from app.infra.crm import CrmHttpClient
from app.infra.http import HttpClientConfig, HttpFileFetcher
from app.infra.notifications import RelayNotificationClient
from app.infra.storage import GCSBlobStore
from app.infra.stores import (
    FirestoreCampaignStore,
    FirestoreProposalStore,
    MemoryBlobStore,
    MemoryCampaignStore,
    MemoryProposalStore,
)
from app.protocols import (
    BlobStoreProtocol,
    CampaignStoreProtocol,
    CrmClientProtocol,
    FileFetcherProtocol,
    NotificationClientProtocol,
    ProposalStoreProtocol,
)
from config.settings import get_base_settings, get_crm_settings, get_gcs_settings

logger = logging.getLogger(__name__)


def _backend(env_var: str, cloud_backend: str) -> str:
    settings = get_base_settings()
    default = cloud_backend if settings.uses_cloud_backends else "memory"
    backend = os.getenv(env_var, default).lower()
    if backend == "memory" and settings.uses_cloud_backends:
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "env_var": env_var, "environment": settings.environment},
        )
    return backend


def create_proposal_store() -> ProposalStoreProtocol:
    """Cria store de propostas conforme PROPOSAL_STORE_BACKEND."""
    backend = _backend("PROPOSAL_STORE_BACKEND", "firestore")
    if backend == "firestore":
        store: ProposalStoreProtocol = FirestoreProposalStore(create_firestore_client())
    elif backend == "memory":
        store = MemoryProposalStore()
    else:
        msg = f"PROPOSAL_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)
    logger.info("proposal_store_created", extra={"backend": backend})
    return store


def create_campaign_store() -> CampaignStoreProtocol:
    """Cria store de campanhas conforme CAMPAIGN_STORE_BACKEND."""
    backend = _backend("CAMPAIGN_STORE_BACKEND", "firestore")
    if backend == "firestore":
        store: CampaignStoreProtocol = FirestoreCampaignStore(create_firestore_client())
    elif backend == "memory":
        store = MemoryCampaignStore()
    else:
        msg = f"CAMPAIGN_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)
    logger.info("campaign_store_created", extra={"backend": backend})
    return store


def create_blob_store() -> BlobStoreProtocol:
    """Cria blob store conforme BLOB_STORE_BACKEND."""
    backend = _backend("BLOB_STORE_BACKEND", "gcs")
    if backend == "gcs":
        store: BlobStoreProtocol = GCSBlobStore(
            create_storage_client(),
            get_gcs_settings().bucket_documents,
        )
    elif backend == "memory":
        store = MemoryBlobStore()
    else:
        msg = f"BLOB_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)
    logger.info("blob_store_created", extra={"backend": backend})
    return store


def create_crm_client() -> CrmClientProtocol:
    return CrmHttpClient(get_crm_settings())


def create_notification_client() -> NotificationClientProtocol:
    return RelayNotificationClient()


def create_file_fetcher() -> FileFetcherProtocol:
    timeout = get_crm_settings().download_timeout_seconds
    return HttpFileFetcher(HttpClientConfig(timeout_seconds=timeout))
