"""Settings do Firestore.

Nomes das collections e subcollections usadas pelo onboarding.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        collection_campaigns: Collection de campanhas
        collection_proposals: Collection de propostas
        subcollection_documents: Subcollection de documentos da proposta
        subcollection_notifications: Subcollection de auditoria de notificações
        subcollection_crm_syncs: Subcollection de auditoria de envios ao CRM
    """

    project_id: str = ""
    collection_campaigns: str = "campaigns"
    collection_proposals: str = "proposals"
    subcollection_documents: str = "documents"
    subcollection_notifications: str = "notifications"
    subcollection_crm_syncs: str = "crmSyncs"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida configurações do Firestore."""
        errors: list[str] = []
        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    """Carrega FirestoreSettings de variáveis de ambiente."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_campaigns=os.getenv("FIRESTORE_COLLECTION_CAMPAIGNS", "campaigns"),
        collection_proposals=os.getenv("FIRESTORE_COLLECTION_PROPOSALS", "proposals"),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
