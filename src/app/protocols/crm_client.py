"""Protocolo do cliente HTTP do CRM."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class CrmFilePart:
    """Arquivo de uma parte multipart."""

    field_name: str
    filename: str
    content: bytes
    content_type: str


@dataclass(frozen=True, slots=True)
class CrmSubmitResult:
    """Resultado do POST multipart ao CRM."""

    success: bool
    status_code: int | None = None
    body: str | None = None
    error: str | None = None
    payload_bytes: int = 0


class CrmClientProtocol(Protocol):
    async def submit(
        self,
        fields: dict[str, str],
        files: list[CrmFilePart],
    ) -> CrmSubmitResult:
        """Envia o cadastro. Nunca levanta exceção para falhas HTTP."""
        ...
