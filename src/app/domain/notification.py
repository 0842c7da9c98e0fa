"""Registro de auditoria de notificações (subcollection `notifications`).

Append-only: cada tentativa, com sucesso ou erro, gera um registro novo.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from app.domain._firestore_model import FirestoreModel, IsoDatetime, utcnow


class NotificationType(StrEnum):
    INITIAL = "initial"
    FINAL = "final"


class NotificationStatus(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


class NotificationRecord(FirestoreModel):
    """Tentativa de notificação com o corpo exato enviado ao relay."""

    type: NotificationType
    status: NotificationStatus
    timestamp: IsoDatetime = Field(default_factory=utcnow)
    error: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_firestore_dict(self) -> dict[str, Any]:
        # error=None é gravado explicitamente
        data = super().to_firestore_dict()
        data.setdefault("error", None)
        return data
