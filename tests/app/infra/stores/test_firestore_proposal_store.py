"""Testes do FirestoreProposalStore com cliente Firestore simulado."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.domain.proposal import Proposal
from app.infra.stores.firestore_proposal_store import FirestoreProposalStore
from config.settings import FirestoreSettings
from utils.errors import FirestoreUnavailableError


def _store() -> tuple[FirestoreProposalStore, MagicMock]:
    client = MagicMock()
    return FirestoreProposalStore(client, FirestoreSettings()), client


@pytest.mark.asyncio
async def test_create_writes_camel_case_document() -> None:
    store, client = _store()
    doc_ref = client.collection.return_value.document.return_value
    doc_ref.id = "generated-id"

    created = await store.create(Proposal(nome_completo="Maria", upload_token="tok"))

    assert created.id == "generated-id"
    client.collection.assert_called_with("proposals")
    written = doc_ref.set.call_args[0][0]
    assert written["nomeCompleto"] == "Maria"
    assert written["uploadToken"] == "tok"
    assert "id" not in written


@pytest.mark.asyncio
async def test_get_missing_returns_none() -> None:
    store, client = _store()
    client.collection.return_value.document.return_value.get.return_value = SimpleNamespace(
        exists=False
    )

    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_get_maps_document() -> None:
    store, client = _store()
    client.collection.return_value.document.return_value.get.return_value = SimpleNamespace(
        exists=True,
        id="p1",
        to_dict=lambda: {"nomeCompleto": "Maria", "status": "documents_received"},
    )

    proposal = await store.get("p1")

    assert proposal is not None
    assert proposal.id == "p1"
    assert proposal.status.value == "documents_received"


@pytest.mark.asyncio
async def test_firestore_failure_raises_unavailable() -> None:
    store, client = _store()
    client.collection.return_value.document.return_value.get.side_effect = RuntimeError("down")

    with pytest.raises(FirestoreUnavailableError):
        await store.get("p1")
