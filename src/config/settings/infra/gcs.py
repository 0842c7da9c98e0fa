"""Settings do Google Cloud Storage.

Bucket de documentos enviados pelos proponentes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

_DEFAULT_MAX_UPLOAD_BYTES = 15 * 1024 * 1024


@dataclass(frozen=True)
class GCSSettings:
    """Configurações do Google Cloud Storage.

    Attributes:
        bucket_documents: Bucket para documentos das propostas
        max_upload_bytes: Tamanho máximo aceito por arquivo
    """

    bucket_documents: str = ""
    max_upload_bytes: int = _DEFAULT_MAX_UPLOAD_BYTES

    def validate(self, require_bucket: bool) -> list[str]:
        """Valida configurações do GCS."""
        errors: list[str] = []
        if require_bucket and not self.bucket_documents:
            errors.append("GCS_BUCKET_DOCUMENTS deve estar configurado")
        if self.max_upload_bytes <= 0:
            errors.append("GCS_MAX_UPLOAD_BYTES deve ser positivo")
        return errors


def _load_gcs_from_env() -> GCSSettings:
    """Carrega GCSSettings de variáveis de ambiente."""
    return GCSSettings(
        bucket_documents=os.getenv("GCS_BUCKET_DOCUMENTS", ""),
        max_upload_bytes=int(os.getenv("GCS_MAX_UPLOAD_BYTES", str(_DEFAULT_MAX_UPLOAD_BYTES))),
    )


@lru_cache(maxsize=1)
def get_gcs_settings() -> GCSSettings:
    """Retorna instância cacheada de GCSSettings."""
    return _load_gcs_from_env()
