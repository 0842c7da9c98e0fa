"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - firestore_proposal_store: Propostas e subcollections no Firestore
    - firestore_campaign_store: Campanhas no Firestore
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_campaign_store import FirestoreCampaignStore
from app.infra.stores.firestore_proposal_store import FirestoreProposalStore
from app.infra.stores.memory_stores import (
    MemoryBlobStore,
    MemoryCampaignStore,
    MemoryProposalStore,
)

__all__ = [
    # Firestore
    "FirestoreCampaignStore",
    "FirestoreProposalStore",
    # Memory (dev/test)
    "MemoryBlobStore",
    "MemoryCampaignStore",
    "MemoryProposalStore",
]
