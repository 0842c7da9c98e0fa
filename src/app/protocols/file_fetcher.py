"""Protocolo para download de arquivos já armazenados."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class FetchedFile:
    """Resultado do download de um arquivo."""

    content: bytes | None
    content_type: str | None
    error: str | None = None


class FileFetcherProtocol(Protocol):
    async def fetch(self, url: str) -> FetchedFile:
        """Baixa o arquivo; falhas vêm em `error`, nunca como exceção."""
        ...
