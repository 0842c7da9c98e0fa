"""Settings do relay de notificações (WhatsApp).

O relay expõe dois endpoints: status da proposta e fim do roadmap.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

INITIAL_NOTIFICATION_PATH: str = "/api/external/status_proposta"
FINAL_NOTIFICATION_PATH: str = "/api/external/fimroadmap"


@dataclass(frozen=True)
class NotificationSettings:
    """Configurações do relay de notificações.

    Attributes:
        base_url: URL base do relay
        request_timeout_seconds: Timeout de cada POST
    """

    base_url: str = ""
    request_timeout_seconds: float = 15.0

    @property
    def initial_endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}{INITIAL_NOTIFICATION_PATH}"

    @property
    def final_endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}{FINAL_NOTIFICATION_PATH}"

    def validate(self) -> list[str]:
        """Valida configurações do relay."""
        if not self.base_url:
            return ["NOTIFICATION_BASE_URL não configurado"]
        return []


def _load_notifications_from_env() -> NotificationSettings:
    """Carrega NotificationSettings de variáveis de ambiente."""
    return NotificationSettings(
        base_url=os.getenv("NOTIFICATION_BASE_URL", ""),
        request_timeout_seconds=float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    """Retorna instância cacheada de NotificationSettings."""
    return _load_notifications_from_env()
