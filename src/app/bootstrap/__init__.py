"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_lifecycle_manager

    # Na inicialização do serviço
    initialize_app()

    # Obter serviços
    manager = get_lifecycle_manager()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_admin_settings,
    get_base_settings,
    get_crm_settings,
    get_firestore_settings,
    get_gcs_settings,
    get_notification_settings,
)

# Nome do serviço para logs
SERVICE_NAME = "coopedu_onboarding"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação. Deve ser chamada uma vez no startup.

    Configura logging estruturado JSON com correlation_id.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` apenas registra alerta.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"firestore: {error}" for error in get_firestore_settings().validate(base.gcp_project)
    )
    errors.extend(
        f"gcs: {error}"
        for error in get_gcs_settings().validate(require_bucket=base.uses_cloud_backends)
    )
    errors.extend(f"crm: {error}" for error in get_crm_settings().validate())
    errors.extend(f"notifications: {error}" for error in get_notification_settings().validate())
    errors.extend(f"admin: {error}" for error in get_admin_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_proposal_store():
    """Store de propostas (singleton), conforme PROPOSAL_STORE_BACKEND."""
    from app.bootstrap.dependencies import create_proposal_store
    return create_proposal_store()


@lru_cache(maxsize=1)
def get_campaign_store():
    """Store de campanhas (singleton), conforme CAMPAIGN_STORE_BACKEND."""
    from app.bootstrap.dependencies import create_campaign_store
    return create_campaign_store()


@lru_cache(maxsize=1)
def get_blob_store():
    from app.bootstrap.dependencies import create_blob_store
    return create_blob_store()


@lru_cache(maxsize=1)
def get_campaign_service():
    from app.services import CampaignService
    return CampaignService(get_campaign_store())


@lru_cache(maxsize=1)
def get_notification_dispatcher():
    from app.bootstrap.dependencies import create_notification_client
    from app.services import NotificationDispatcher
    return NotificationDispatcher(create_notification_client(), get_proposal_store())


@lru_cache(maxsize=1)
def get_crm_sync_service():
    """Serviço de envio ao CRM (singleton: mantém os locks por proposta)."""
    from app.bootstrap.dependencies import create_crm_client, create_file_fetcher
    from app.services import CrmDocumentAssembler, CrmSyncService

    settings = get_crm_settings()
    return CrmSyncService(
        get_proposal_store(),
        get_campaign_store(),
        create_crm_client(),
        CrmDocumentAssembler(create_file_fetcher(), settings),
        settings,
    )


@lru_cache(maxsize=1)
def get_lifecycle_manager():
    """Gerenciador do ciclo de vida das propostas (singleton)."""
    from app.services import ProposalLifecycleManager
    return ProposalLifecycleManager(
        get_proposal_store(),
        get_campaign_store(),
        get_blob_store(),
        get_notification_dispatcher(),
        get_crm_sync_service(),
        gcs_settings=get_gcs_settings(),
    )

