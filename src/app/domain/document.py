"""Documentos anexados à proposta (subcollection `documents`)."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from app.domain._firestore_model import FirestoreModel, IsoDatetime, utcnow


class DocumentType(StrEnum):
    """Vocabulário fixo de tipos de documento aceitos no upload."""

    IDENTIDADE_FRENTE = "identidade_frente"
    IDENTIDADE_VERSO = "identidade_verso"
    CNH = "cnh"
    COMPROVANTE_RESIDENCIA = "comprovante_residencia"
    COMPROVANTE_PIS = "comprovante_pis"
    CERTIDAO = "certidao"
    CURRICULO = "curriculo"
    DIPLOMA = "diploma"


# Exigidos pela página de upload antes de liberar a finalização
REQUIRED_DOCUMENT_TYPES: tuple[DocumentType, ...] = (
    DocumentType.IDENTIDADE_FRENTE,
    DocumentType.IDENTIDADE_VERSO,
    DocumentType.COMPROVANTE_PIS,
    DocumentType.COMPROVANTE_RESIDENCIA,
)

DOCUMENT_LABELS: dict[DocumentType, str] = {
    DocumentType.IDENTIDADE_FRENTE: "Documento de identidade (frente)",
    DocumentType.IDENTIDADE_VERSO: "Documento de identidade (verso)",
    DocumentType.CNH: "CNH",
    DocumentType.COMPROVANTE_RESIDENCIA: "Comprovante de residência",
    DocumentType.COMPROVANTE_PIS: "Comprovante de PIS/NIT",
    DocumentType.CERTIDAO: "Certidão de nascimento ou casamento",
    DocumentType.CURRICULO: "Currículo",
    DocumentType.DIPLOMA: "Diploma",
}


def parse_document_type(value: str | None) -> DocumentType | None:
    """Converte texto em DocumentType; None se fora do vocabulário."""
    try:
        return DocumentType(value)
    except ValueError:
        return None


class ProposalDocument(FirestoreModel):
    """Um arquivo enviado. Tipos repetidos são possíveis (novo upload sem remoção)."""

    url: str
    filename: str
    type: str
    uploaded_at: IsoDatetime = Field(default_factory=utcnow)


def missing_required_types(documents: list[ProposalDocument]) -> list[DocumentType]:
    """Tipos obrigatórios ainda sem nenhum arquivo."""
    present = {document.type for document in documents}
    return [doc_type for doc_type in REQUIRED_DOCUMENT_TYPES if doc_type.value not in present]
