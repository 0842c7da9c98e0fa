"""Testes das rotas públicas (formulário e página de upload)."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from tests.fakes.harness import Harness
from tests.fakes.payloads import build_campaign_payload, build_proposal_payload


def _submit(client: TestClient, **overrides) -> str:
    response = client.post("/proposals", json=build_proposal_payload(**overrides))
    assert response.status_code == 201
    return response.json()["id"]


def test_submit_proposal_returns_created(client: TestClient, harness: Harness) -> None:
    proposal_id = _submit(client)

    assert harness.scheduler.names == [f"notification_initial:{proposal_id}"]


def test_submit_invalid_proposal_returns_field_errors(client: TestClient) -> None:
    response = client.post("/proposals", json=build_proposal_payload(email="sem-arroba"))

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {"email": "E-mail inválido"}


def test_campaign_by_slug(admin_client: TestClient) -> None:
    assert admin_client.get("/campaigns/professores-2026").status_code == 404

    admin_client.post("/admin/campaigns", json=build_campaign_payload())
    response = admin_client.get("/campaigns/professores-2026")

    assert response.status_code == 200
    assert response.json()["clientId"] == "4521"


def test_upload_page_shows_missing_types(client: TestClient) -> None:
    proposal_id = _submit(client)

    response = client.get("/upload/token-1")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == proposal_id
    assert body["nomeCompleto"] == "Maria da Silva Souza"
    assert body["status"] == "pending_documents"
    assert body["documents"] == []
    assert [item["type"] for item in body["missingTypes"]] == [
        "identidade_frente",
        "identidade_verso",
        "comprovante_pis",
        "comprovante_residencia",
    ]
    assert "cpf" not in body


def test_upload_page_unknown_token(client: TestClient) -> None:
    response = client.get("/upload/unknown")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Proposta não encontrada"}


def test_upload_page_expired_token(client: TestClient, harness: Harness) -> None:
    _submit(client)
    harness.clock.advance(timedelta(days=8))

    response = client.get("/upload/token-1")

    assert response.status_code == 410
    assert response.json() == {
        "success": False,
        "message": "Link de envio expirado",
        "expired": True,
    }


def test_document_upload_and_removal(client: TestClient, harness: Harness) -> None:
    proposal_id = _submit(client)

    response = client.post(
        "/upload/token-1/documents",
        data={"type": "identidade_frente"},
        files={"file": ("frente.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "identidade_frente"
    assert body["url"].startswith(f"memory://documents/proposals/{proposal_id}/identidade_frente/")

    page = client.get("/upload/token-1").json()
    assert [document["type"] for document in page["documents"]] == ["identidade_frente"]

    removed = client.delete("/upload/token-1/documents/identidade_frente")
    assert removed.status_code == 200
    assert removed.json()["removed"] == 1


def test_upload_rejects_unknown_type(client: TestClient) -> None:
    _submit(client)

    response = client.post(
        "/upload/token-1/documents",
        data={"type": "selfie"},
        files={"file": ("x.jpg", b"x", "image/jpeg")},
    )

    assert response.status_code == 422


def test_upload_rejects_large_file(client: TestClient) -> None:
    _submit(client)

    response = client.post(
        "/upload/token-1/documents",
        data={"type": "cnh"},
        files={"file": ("cnh.pdf", b"x" * 2048, "application/pdf")},
    )

    assert response.status_code == 413


def test_upload_size_limit_is_inclusive(client: TestClient, harness: Harness) -> None:
    _submit(client)
    limit = harness.max_upload_bytes

    accepted = client.post(
        "/upload/token-1/documents",
        data={"type": "cnh"},
        files={"file": ("cnh.pdf", b"x" * limit, "application/pdf")},
    )
    rejected = client.post(
        "/upload/token-1/documents",
        data={"type": "diploma"},
        files={"file": ("diploma.pdf", b"x" * (limit + 1), "application/pdf")},
    )

    assert accepted.status_code == 201
    assert rejected.status_code == 413


def test_upload_with_expired_token(client: TestClient, harness: Harness) -> None:
    _submit(client)
    harness.clock.advance(timedelta(days=8))

    response = client.post(
        "/upload/token-1/documents",
        data={"type": "cnh"},
        files={"file": ("cnh.pdf", b"x", "application/pdf")},
    )

    assert response.status_code == 410
    assert harness.blobs.objects == {}


def test_finalize_schedules_effects(client: TestClient, harness: Harness) -> None:
    proposal_id = _submit(client)

    response = client.post("/upload/token-1/finalize")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Documentos enviados com sucesso"}
    assert harness.scheduler.names[-2:] == [
        f"notification_final:{proposal_id}",
        f"crm_sync_finalize:{proposal_id}",
    ]


def test_correlation_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"x-correlation-id": "req-abc"})

    assert response.headers["x-correlation-id"] == "req-abc"


def test_correlation_id_is_generated(client: TestClient) -> None:
    response = client.get("/health")

    assert len(response.headers["x-correlation-id"]) == 32
