"""Factories de clientes externos: Firestore e Cloud Storage.

Clientes são singletons de processo construídos no primeiro uso;
lru_cache garante inicialização única.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_firestore_settings

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.storage import Client as StorageClient

logger = logging.getLogger(__name__)


def _project_id() -> str | None:
    return get_firestore_settings().project_id or get_base_settings().gcp_project or None


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Cria cliente Firestore (singleton)."""
    from google.cloud import firestore

    project_id = _project_id()
    client = firestore.Client(project=project_id)
    logger.info("firestore_client_created", extra={"project": project_id})
    return client


@lru_cache(maxsize=1)
def create_storage_client() -> StorageClient:
    """Cria cliente Cloud Storage (singleton)."""
    from google.cloud import storage

    project_id = get_base_settings().gcp_project or None
    client = storage.Client(project=project_id)
    logger.info("storage_client_created", extra={"project": project_id})
    return client
