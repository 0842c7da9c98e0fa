"""Registro de auditoria de envios ao CRM (subcollection `crmSyncs`)."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from app.domain._firestore_model import FirestoreModel, IsoDatetime, utcnow


class SyncTrigger(StrEnum):
    """Origem do envio ao CRM."""

    MANUAL = "manual"
    BATCH = "batch"
    FINALIZE = "finalize"


class SyncStatus(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


class CrmSyncRecord(FirestoreModel):
    """Resultado de uma tentativa de envio (sem payload: contém PII e arquivos)."""

    trigger: SyncTrigger
    status: SyncStatus
    timestamp: IsoDatetime = Field(default_factory=utcnow)
    error: str | None = None
    status_code: int | None = None
    payload_bytes: int | None = None

    def to_firestore_dict(self) -> dict[str, Any]:
        data = super().to_firestore_dict()
        data.setdefault("error", None)
        return data
