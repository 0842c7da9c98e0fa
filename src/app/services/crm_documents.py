"""Montagem dos arquivos do multipart do CRM.

Cada tipo de documento vira um campo de arquivo. Com mais de um
arquivo do mesmo tipo, vale o de uploadedAt mais recente.
"""

from __future__ import annotations

import asyncio
import logging

from app.domain.document import DocumentType, ProposalDocument
from app.infra.images.normalizer import prepare_file
from app.protocols.crm_client import CrmFilePart
from app.protocols.file_fetcher import FileFetcherProtocol
from config.logging import log_fallback
from config.settings import CRMSettings, get_crm_settings

logger = logging.getLogger(__name__)

DOCUMENT_FIELD_MAP: dict[str, str] = {
    DocumentType.IDENTIDADE_FRENTE: "IdentityFront",
    DocumentType.IDENTIDADE_VERSO: "IdentityBack",
    DocumentType.CNH: "DriverLicense",
    DocumentType.COMPROVANTE_RESIDENCIA: "ProofOfResidence",
    DocumentType.COMPROVANTE_PIS: "PisProof",
    DocumentType.CERTIDAO: "CivilCertificate",
    DocumentType.CURRICULO: "Resume",
    DocumentType.DIPLOMA: "Diploma",
}

# Sem estes campos o CRM rejeita o cadastro
MANDATORY_FILE_FIELDS: tuple[str, ...] = ("IdentityFront", "ProofOfResidence")

PLACEHOLDER_FILENAME = "sem_arquivo.txt"
PLACEHOLDER_CONTENT_TYPE = "text/plain"


def select_latest_by_type(documents: list[ProposalDocument]) -> dict[str, ProposalDocument]:
    """Um documento por tipo: o de uploadedAt mais recente."""
    latest: dict[str, ProposalDocument] = {}
    for document in sorted(documents, key=lambda doc: doc.uploaded_at):
        latest[document.type] = document
    return latest


def placeholder_part(field_name: str) -> CrmFilePart:
    return CrmFilePart(
        field_name=field_name,
        filename=PLACEHOLDER_FILENAME,
        content=b"",
        content_type=PLACEHOLDER_CONTENT_TYPE,
    )


class CrmDocumentAssembler:
    """Baixa, normaliza e organiza os documentos por campo do CRM."""

    def __init__(
        self,
        fetcher: FileFetcherProtocol,
        settings: CRMSettings | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings or get_crm_settings()

    async def build_parts(self, documents: list[ProposalDocument]) -> list[CrmFilePart]:
        latest = select_latest_by_type(documents)
        parts: list[CrmFilePart] = []

        for document_type, field_name in DOCUMENT_FIELD_MAP.items():
            document = latest.get(document_type)
            if document is None:
                continue
            part = await self._build_part(field_name, document)
            if part is not None:
                parts.append(part)

        present = {part.field_name for part in parts}
        for field_name in MANDATORY_FILE_FIELDS:
            if field_name not in present:
                log_fallback(logger, "crm_mandatory_file", reason="missing", field=field_name)
                parts.append(placeholder_part(field_name))
        return parts

    async def _build_part(self, field_name: str, document: ProposalDocument) -> CrmFilePart | None:
        fetched = await self._fetcher.fetch(document.url)
        if fetched.content is None:
            logger.warning(
                "crm_file_download_failed",
                extra={"field": field_name, "document_id": document.id, "error": fetched.error},
            )
            return None

        prepared = await asyncio.to_thread(
            prepare_file,
            fetched.content,
            document.filename,
            fetched.content_type,
            max_dimension=self._settings.image_max_dimension,
            quality=self._settings.image_jpeg_quality,
        )
        return CrmFilePart(
            field_name=field_name,
            filename=prepared.filename,
            content=prepared.content,
            content_type=prepared.content_type,
        )
