"""Fixtures das rotas: app real com serviços em memória via dependency_overrides."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes.dependencies import (
    admin_settings,
    campaign_service,
    lifecycle_manager,
    proposal_store,
)
from app.app import create_app
from config.settings import AdminSettings
from tests.fakes.harness import Harness

ADMIN_USER = "admin"
ADMIN_PASSWORD = "s3cret-pass"
TEST_ADMIN_SETTINGS = AdminSettings(
    username=ADMIN_USER,
    password=ADMIN_PASSWORD,
    secure_cookie=False,
)


@pytest.fixture
def app(harness: Harness) -> FastAPI:
    fastapi_app = create_app()
    fastapi_app.dependency_overrides[lifecycle_manager] = lambda: harness.manager
    fastapi_app.dependency_overrides[campaign_service] = lambda: harness.campaign_service
    fastapi_app.dependency_overrides[proposal_store] = lambda: harness.proposals
    fastapi_app.dependency_overrides[admin_settings] = lambda: TEST_ADMIN_SETTINGS
    return fastapi_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    response = client.post("/admin/login", json={"user": ADMIN_USER, "pass": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
