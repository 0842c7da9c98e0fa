"""Agregador de settings do serviço de onboarding.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.admin import AdminSettings, get_admin_settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.crm import (
    CRM_CREATE_PATH,
    MISSING_FIELD_SENTINEL,
    UNRESOLVED_MUNICIPALITY_CODE,
    CRMSettings,
    get_crm_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    GCSSettings,
    get_firestore_settings,
    get_gcs_settings,
)
from config.settings.notifications import (
    FINAL_NOTIFICATION_PATH,
    INITIAL_NOTIFICATION_PATH,
    NotificationSettings,
    get_notification_settings,
)

__all__ = [
    "CRM_CREATE_PATH",
    "FINAL_NOTIFICATION_PATH",
    "INITIAL_NOTIFICATION_PATH",
    "MISSING_FIELD_SENTINEL",
    "UNRESOLVED_MUNICIPALITY_CODE",
    "AdminSettings",
    "BaseSettings",
    "CRMSettings",
    "Environment",
    "FirestoreSettings",
    "GCSSettings",
    "NotificationSettings",
    "get_admin_settings",
    "get_base_settings",
    "get_crm_settings",
    "get_firestore_settings",
    "get_gcs_settings",
    "get_notification_settings",
]
