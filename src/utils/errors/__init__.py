"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    BlobStorageError,
    FirestoreUnavailableError,
    InfrastructureError,
)

__all__ = [
    "BlobStorageError",
    "FirestoreUnavailableError",
    "InfrastructureError",
]
