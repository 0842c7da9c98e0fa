"""Resultados tipados das operações de serviço.

Resultados esperados (não encontrado, token expirado, falha do CRM)
nunca são exceções: a camada HTTP traduz `error_code` em status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from app.domain.document import ProposalDocument
from app.domain.notification import NotificationRecord, NotificationType
from app.domain.proposal import Proposal


class ErrorCode(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    TOO_LARGE = "too_large"
    STORAGE = "storage"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Resultado genérico de ação (sucesso ou mensagem legível)."""

    success: bool
    message: str | None = None
    error_code: ErrorCode | None = None
    errors: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str | None = None, **data: Any) -> ActionResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        error_code: ErrorCode,
        message: str,
        errors: dict[str, str] | None = None,
    ) -> ActionResult:
        return cls(success=False, message=message, error_code=error_code, errors=errors or {})

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success}
        if self.message:
            body["message"] = self.message
        if self.errors:
            body["errors"] = self.errors
        body.update(self.data)
        return body


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Resultado de um envio ao CRM."""

    success: bool
    proposal_id: str
    error: str | None = None
    status_code: int | None = None
    not_found: bool = False
    persistence_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "proposalId": self.proposal_id,
            "error": self.error,
            "statusCode": self.status_code,
        }
        if self.persistence_error:
            data["persistenceError"] = self.persistence_error
        return data


@dataclass(frozen=True, slots=True)
class BatchFailure:
    proposal_id: str
    name: str | None
    error: str


@dataclass
class BatchSyncReport:
    """Relatório do envio em lote de uma campanha (sem rollback)."""

    campaign_id: str
    success_count: int = 0
    fail_count: int = 0
    skipped_count: int = 0
    failures: list[BatchFailure] = field(default_factory=list)
    error: str | None = None

    @property
    def attempted(self) -> int:
        return self.success_count + self.fail_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "campaignId": self.campaign_id,
            "successCount": self.success_count,
            "failCount": self.fail_count,
            "success": self.error is None,
            "skippedCount": self.skipped_count,
            "error": self.error,
            "failures": [
                {"id": failure.proposal_id, "name": failure.name, "error": failure.error}
                for failure in self.failures
            ],
        }


@dataclass
class DuplicateCleanupReport:
    """Relatório da limpeza de duplicados por CPF."""

    campaign_id: str
    dry_run: bool
    deleted_count: int = 0
    duplicate_ids: list[str] = field(default_factory=list)
    kept_ids: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "campaignId": self.campaign_id,
            "dryRun": self.dry_run,
            "deletedCount": self.deleted_count,
            "duplicateIds": self.duplicate_ids,
            "keptIds": self.kept_ids,
            "error": self.error,
        }


class TokenLookupStatus(StrEnum):
    FOUND = "found"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class UploadTokenLookup:
    """Busca por token de upload. Token expirado não carrega dados."""

    status: TokenLookupStatus
    proposal: Proposal | None = None
    documents: list[ProposalDocument] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == TokenLookupStatus.FOUND


@dataclass(frozen=True, slots=True)
class NotificationOutcome:
    """Resultado de uma notificação, já registrada na auditoria."""

    success: bool
    notification_type: NotificationType
    error: str | None = None
    record: NotificationRecord | None = None
