"""Serviços de aplicação.

Orquestração do ciclo de vida da proposta, envio ao CRM e notificações.
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.campaigns import CampaignService
from app.services.crm_documents import CrmDocumentAssembler
from app.services.crm_sync import CrmSyncService
from app.services.notifications import NotificationDispatcher
from app.services.proposal_lifecycle import ProposalLifecycleManager

__all__ = [
    "CampaignService",
    "CrmDocumentAssembler",
    "CrmSyncService",
    "NotificationDispatcher",
    "ProposalLifecycleManager",
]
