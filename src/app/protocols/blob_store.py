"""Protocolo para armazenamento de arquivos enviados."""

from __future__ import annotations

from typing import Protocol


class BlobStoreProtocol(Protocol):
    """Contrato para blob store com URL pública por objeto."""

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Grava o objeto e retorna a URL pública.

        Raises:
            BlobStorageError: falha de gravação.
        """
        ...
