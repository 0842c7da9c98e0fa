"""Dependências FastAPI: ponte entre as rotas e o composition root.

Rotas nunca instanciam serviços diretamente; testes trocam estas
funções via `app.dependency_overrides`.
"""

from __future__ import annotations

from app.bootstrap import (
    get_campaign_service,
    get_lifecycle_manager,
    get_proposal_store,
)
from app.protocols import ProposalStoreProtocol
from app.services import CampaignService, ProposalLifecycleManager
from config.settings import AdminSettings, get_admin_settings


def lifecycle_manager() -> ProposalLifecycleManager:
    return get_lifecycle_manager()


def campaign_service() -> CampaignService:
    return get_campaign_service()


def proposal_store() -> ProposalStoreProtocol:
    return get_proposal_store()


def admin_settings() -> AdminSettings:
    return get_admin_settings()
