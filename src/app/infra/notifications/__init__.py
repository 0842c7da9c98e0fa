"""Integração com o relay de notificações."""

from app.infra.notifications.client import RelayNotificationClient

__all__ = ["RelayNotificationClient"]
