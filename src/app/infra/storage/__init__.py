"""Armazenamento de arquivos enviados pelos proponentes."""

from app.infra.storage.gcs_blob_store import GCSBlobStore

__all__ = ["GCSBlobStore"]
