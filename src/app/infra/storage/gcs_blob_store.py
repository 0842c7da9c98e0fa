"""Blob store no Google Cloud Storage.

Objetos ficam públicos; a URL pública é o que se grava no documento
da proposta e o que o envio ao CRM baixa depois.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.protocols.blob_store import BlobStoreProtocol
from utils.errors import BlobStorageError

if TYPE_CHECKING:
    from google.cloud.storage import Client as StorageClient

logger = logging.getLogger(__name__)


class GCSBlobStore(BlobStoreProtocol):
    """Blob store usando um bucket GCS."""

    def __init__(self, storage_client: StorageClient, bucket_name: str) -> None:
        self._client = storage_client
        self._bucket_name = bucket_name

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        return await asyncio.to_thread(self._upload_sync, path, content, content_type)

    def _upload_sync(self, path: str, content: bytes, content_type: str) -> str:
        try:
            blob = self._client.bucket(self._bucket_name).blob(path)
            blob.upload_from_string(content, content_type=content_type)
            blob.make_public()
        except Exception as exc:
            logger.error(
                "gcs_upload_failed",
                extra={"error": str(exc), "error_type": type(exc).__name__, "size": len(content)},
            )
            raise BlobStorageError(f"gcs_upload_failed: {exc}") from exc

        logger.info("gcs_upload_completed", extra={"size": len(content)})
        return blob.public_url
