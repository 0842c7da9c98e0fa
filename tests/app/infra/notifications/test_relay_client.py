"""Testes do cliente do relay de notificações."""

from __future__ import annotations

import json

import httpx
import pytest

from app.domain.notification import NotificationType
from app.infra.notifications import RelayNotificationClient
from config.settings import NotificationSettings

SETTINGS = NotificationSettings(base_url="https://relay.example.com")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("notification_type", "path"),
    [
        (NotificationType.INITIAL, "/api/external/status_proposta"),
        (NotificationType.FINAL, "/api/external/fimroadmap"),
    ],
)
async def test_endpoint_depends_on_type(notification_type: NotificationType, path: str) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    client = RelayNotificationClient(SETTINGS, transport=httpx.MockTransport(handler))
    delivery = await client.send(notification_type, {"nome": "Maria", "numero": "5511987654321"})

    assert delivery.success is True
    assert delivery.status_code == 200
    assert seen[0].url.path == path
    assert json.loads(seen[0].content) == {"nome": "Maria", "numero": "5511987654321"}


@pytest.mark.asyncio
async def test_http_error_is_described() -> None:
    client = RelayNotificationClient(
        SETTINGS,
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
    )

    delivery = await client.send(NotificationType.FINAL, {})

    assert delivery.success is False
    assert delivery.status_code == 500
    assert delivery.error == "HTTP 500: boom"


@pytest.mark.asyncio
async def test_transport_error_is_returned() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = RelayNotificationClient(SETTINGS, transport=httpx.MockTransport(handler))
    delivery = await client.send(NotificationType.INITIAL, {})

    assert delivery.success is False
    assert delivery.error == "http_transport_error: ConnectError"
