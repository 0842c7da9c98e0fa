"""Cliente do relay de notificações (mensagens de WhatsApp ao proponente)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.domain.notification import NotificationType
from app.infra.http.client import HttpClient, HttpClientConfig, HttpError
from app.protocols.notification_client import NotificationClientProtocol, NotificationDelivery
from config.settings import NotificationSettings, get_notification_settings

logger = logging.getLogger(__name__)

_MAX_ERROR_CHARS = 500


class RelayNotificationClient(NotificationClientProtocol):
    """POST JSON ao relay; o endpoint depende do tipo de notificação."""

    def __init__(
        self,
        settings: NotificationSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_notification_settings()
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=self._settings.request_timeout_seconds,
                transport=transport,
            )
        )

    def _endpoint(self, notification_type: NotificationType) -> str:
        if notification_type == NotificationType.INITIAL:
            return self._settings.initial_endpoint
        return self._settings.final_endpoint

    async def send(
        self,
        notification_type: NotificationType,
        payload: dict[str, Any],
    ) -> NotificationDelivery:
        try:
            response = await self._http.post_json(self._endpoint(notification_type), payload)
        except HttpError as exc:
            return NotificationDelivery(success=False, error=str(exc))

        if response.is_success:
            return NotificationDelivery(success=True, status_code=response.status_code)

        logger.warning(
            "notification_relay_rejected",
            extra={"status_code": response.status_code, "type": notification_type.value},
        )
        text = response.text[:_MAX_ERROR_CHARS] or response.reason_phrase
        return NotificationDelivery(
            success=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}: {text}",
        )
