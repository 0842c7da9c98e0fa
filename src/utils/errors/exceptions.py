"""Exceções para falhas recuperáveis de infraestrutura e integrações."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class BlobStorageError(InfrastructureError):
    """Falha ao gravar ou ler objeto no storage de arquivos."""
