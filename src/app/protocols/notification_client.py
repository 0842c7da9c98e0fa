"""Protocolo do cliente do relay de notificações."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from app.domain.notification import NotificationType


@dataclass(frozen=True, slots=True)
class NotificationDelivery:
    """Resultado de um POST ao relay."""

    success: bool
    status_code: int | None = None
    error: str | None = None


class NotificationClientProtocol(Protocol):
    async def send(
        self,
        notification_type: NotificationType,
        payload: dict[str, Any],
    ) -> NotificationDelivery:
        """Envia a notificação. Falhas vêm em `error`, nunca como exceção."""
        ...
