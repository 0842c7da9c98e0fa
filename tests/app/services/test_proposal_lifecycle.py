"""Testes do ciclo de vida da proposta (stores em memória, tasks gravadas)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.domain.notification import NotificationStatus, NotificationType
from app.domain.proposal import Proposal
from app.protocols.notification_client import NotificationDelivery
from app.services.results import ErrorCode, TokenLookupStatus
from fsm import ProposalStatus
from tests.fakes.fake_integrations import FakeNotificationClient
from tests.fakes.harness import FIXED_NOW, Harness
from tests.fakes.payloads import OTHER_VALID_CPF, build_campaign_payload, build_proposal_payload


async def _submit(harness: Harness, **overrides) -> str:
    result = await harness.manager.submit_proposal(build_proposal_payload(**overrides))
    assert result.success, result.errors
    return result.data["id"]


class TestSubmitProposal:
    @pytest.mark.asyncio
    async def test_invalid_form_writes_nothing(self, harness: Harness) -> None:
        result = await harness.manager.submit_proposal(build_proposal_payload(cpf="123.456.789-00"))

        assert result.success is False
        assert result.error_code == ErrorCode.VALIDATION
        assert result.errors["cpf"] == "CPF inválido"
        assert harness.scheduler.names == []
        page = await harness.proposals.list_by_campaign("uncategorized")
        assert page == []

    @pytest.mark.asyncio
    async def test_creates_pending_proposal_with_seven_day_token(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.status == ProposalStatus.PENDING_DOCUMENTS
        assert proposal.upload_token == "token-1"
        assert proposal.created_at == FIXED_NOW
        assert proposal.upload_token_expires is not None
        assert (proposal.upload_token_expires - proposal.created_at).total_seconds() == 604800
        assert proposal.campaign_id == "uncategorized"
        assert proposal.crm_synced is False

    @pytest.mark.asyncio
    async def test_discarded_tasks_are_closed(self, harness: Harness) -> None:
        await _submit(harness)
        [(_, coroutine)] = harness.scheduler.pending

        harness.scheduler.discard()

        assert harness.scheduler.pending == []
        assert coroutine.cr_frame is None

    @pytest.mark.asyncio
    async def test_initial_notification_is_scheduled(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        assert harness.scheduler.names == [f"notification_initial:{proposal_id}"]
        await harness.scheduler.run_all()

        notification_type, payload = harness.notifier.sent[0]
        assert notification_type == NotificationType.INITIAL
        assert payload == {
            "nome": "Maria da Silva Souza",
            "link": "/token-1",
            "numero": "5511987654321",
        }
        records = await harness.proposals.list_notifications(proposal_id)
        assert [record.type for record in records] == [NotificationType.INITIAL]

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_affect_submission(self) -> None:
        harness = Harness(
            notifier=FakeNotificationClient(NotificationDelivery(success=False, error="down"))
        )
        proposal_id = await _submit(harness)
        await harness.scheduler.run_all()

        assert await harness.proposals.get(proposal_id) is not None
        records = await harness.proposals.list_notifications(proposal_id)
        assert records[0].status == NotificationStatus.ERROR

    @pytest.mark.asyncio
    async def test_campaign_fills_client_and_function(self, harness: Harness) -> None:
        created = await harness.campaign_service.create_campaign(build_campaign_payload())
        campaign_id = created.data["id"]

        proposal_id = await _submit(harness, campaignId=campaign_id)

        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.campaign_id == campaign_id
        assert proposal.client_id == "4521"
        assert proposal.function_id == "77"

    @pytest.mark.asyncio
    async def test_explicit_client_id_wins(self, harness: Harness) -> None:
        created = await harness.campaign_service.create_campaign(build_campaign_payload())

        proposal_id = await _submit(harness, campaignId=created.data["id"], clientId="9999")

        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.client_id == "9999"
        assert proposal.function_id == "77"


class TestUploadToken:
    @pytest.mark.asyncio
    async def test_lookup_returns_proposal_and_documents(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        await harness.manager.upload_document(proposal_id, "cnh", "cnh.pdf", b"%PDF", None)

        lookup = await harness.manager.get_by_upload_token("token-1")

        assert lookup.status == TokenLookupStatus.FOUND
        assert lookup.proposal is not None
        assert lookup.proposal.id == proposal_id
        assert [document.type for document in lookup.documents] == ["cnh"]

    @pytest.mark.asyncio
    async def test_expired_token_returns_no_data(self, harness: Harness) -> None:
        await _submit(harness)
        harness.clock.advance(timedelta(days=7, seconds=1))

        lookup = await harness.manager.get_by_upload_token("token-1")

        assert lookup.status == TokenLookupStatus.EXPIRED
        assert lookup.proposal is None
        assert lookup.documents == []

    @pytest.mark.asyncio
    async def test_token_valid_at_exact_expiry(self, harness: Harness) -> None:
        await _submit(harness)
        harness.clock.advance(timedelta(days=7))

        lookup = await harness.manager.get_by_upload_token("token-1")

        assert lookup.found

    @pytest.mark.asyncio
    async def test_unknown_and_empty_tokens(self, harness: Harness) -> None:
        assert (await harness.manager.get_by_upload_token("nope")).status == TokenLookupStatus.NOT_FOUND
        assert (await harness.manager.get_by_upload_token("")).status == TokenLookupStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_resolve_upload_token_errors(self, harness: Harness) -> None:
        await _submit(harness)
        harness.clock.advance(timedelta(days=8))

        proposal, expired = await harness.manager.resolve_upload_token("token-1")
        _, missing = await harness.manager.resolve_upload_token("other")

        assert proposal is None
        assert expired is not None and expired.error_code == ErrorCode.EXPIRED
        assert missing is not None and missing.error_code == ErrorCode.NOT_FOUND


class TestDocuments:
    @pytest.mark.asyncio
    async def test_upload_stores_blob_and_attaches(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        result = await harness.manager.upload_document(
            proposal_id, "identidade_frente", "../foto (1).jpg", b"jpeg-bytes", "image/jpeg"
        )

        assert result.success is True
        assert result.data["type"] == "identidade_frente"
        (path, (content, content_type)), = harness.blobs.objects.items()
        assert path.startswith(f"proposals/{proposal_id}/identidade_frente/")
        assert path.endswith("-foto__1_.jpg")
        assert content == b"jpeg-bytes"
        assert content_type == "image/jpeg"
        assert result.data["url"] == f"memory://documents/{path}"

        documents = await harness.proposals.list_documents(proposal_id)
        assert documents[0].filename == "foto__1_.jpg"
        assert documents[0].uploaded_at == FIXED_NOW

        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.status == ProposalStatus.PENDING_DOCUMENTS

    @pytest.mark.asyncio
    async def test_upload_rejects_invalid_type(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        result = await harness.manager.upload_document(proposal_id, "selfie", "a.jpg", b"x", None)

        assert result.error_code == ErrorCode.VALIDATION
        assert harness.blobs.objects == {}

    @pytest.mark.asyncio
    async def test_upload_rejects_large_file(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        result = await harness.manager.upload_document(
            proposal_id, "cnh", "cnh.pdf", b"x" * 1025, "application/pdf"
        )

        assert result.error_code == ErrorCode.TOO_LARGE
        assert harness.blobs.objects == {}

    @pytest.mark.asyncio
    async def test_upload_rejects_empty_file(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        result = await harness.manager.upload_document(proposal_id, "cnh", "cnh.pdf", b"", None)

        assert result.error_code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_remove_document_deletes_every_file_of_type(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        for name in ("a.jpg", "b.jpg"):
            await harness.manager.upload_document(proposal_id, "identidade_verso", name, b"x", None)
        await harness.manager.upload_document(proposal_id, "cnh", "c.pdf", b"x", None)

        result = await harness.manager.remove_document(proposal_id, "identidade_verso")

        assert result.data == {"removed": 2}
        documents = await harness.proposals.list_documents(proposal_id)
        assert [document.type for document in documents] == ["cnh"]

    @pytest.mark.asyncio
    async def test_completed_proposal_rejects_document_changes(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        await harness.proposals.update(proposal_id, {"status": "completed"})

        upload = await harness.manager.upload_document(proposal_id, "cnh", "c.pdf", b"x", None)
        removal = await harness.manager.remove_document(proposal_id, "cnh")

        assert upload.error_code == ErrorCode.INVALID_STATE
        assert removal.error_code == ErrorCode.INVALID_STATE


class TestFinalize:
    @pytest.mark.asyncio
    async def test_finalize_sets_status_and_schedules_effects(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        harness.scheduler.discard()
        harness.clock.advance(timedelta(hours=1))

        result = await harness.manager.finalize(proposal_id)

        assert result.success is True
        assert harness.scheduler.names[-2:] == [
            f"notification_final:{proposal_id}",
            f"crm_sync_finalize:{proposal_id}",
        ]
        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.status == ProposalStatus.DOCUMENTS_RECEIVED
        assert proposal.documents_submitted_at == FIXED_NOW + timedelta(hours=1)

        await harness.scheduler.run_all()

        proposal = await harness.proposals.get(proposal_id)
        assert proposal is not None
        assert proposal.status == ProposalStatus.COMPLETED
        assert proposal.crm_synced is True

    @pytest.mark.asyncio
    async def test_finalize_twice_sends_two_final_notifications(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        harness.scheduler.discard()

        await harness.manager.finalize(proposal_id)
        await harness.manager.finalize(proposal_id)
        await harness.scheduler.run_all()

        records = await harness.proposals.list_notifications(proposal_id)
        assert [record.type for record in records] == [NotificationType.FINAL, NotificationType.FINAL]
        assert len(harness.crm.calls) == 2

    @pytest.mark.asyncio
    async def test_finalize_unknown_proposal(self, harness: Harness) -> None:
        result = await harness.manager.finalize("missing")

        assert result.error_code == ErrorCode.NOT_FOUND
        assert harness.scheduler.names == []


class TestAdministration:
    @pytest.mark.asyncio
    async def test_cleanup_keeps_newest_per_cpf(self, harness: Harness) -> None:
        older = await _submit(harness)
        harness.clock.advance(timedelta(minutes=5))
        newer = await _submit(harness)
        other = await _submit(harness, cpf=OTHER_VALID_CPF)

        report = await harness.manager.cleanup_duplicates("uncategorized")

        assert report.success
        assert report.deleted_count == 1
        assert report.duplicate_ids == [older]
        assert report.kept_ids == [newer]
        assert await harness.proposals.get(older) is None
        assert await harness.proposals.get(newer) is not None
        assert await harness.proposals.get(other) is not None

    @pytest.mark.asyncio
    async def test_cleanup_groups_masked_and_digit_only_cpfs(self, harness: Harness) -> None:
        legacy = await harness.proposals.create(
            Proposal(
                nome_completo="Cadastro Antigo",
                cpf="52998224725",
                campaign_id="uncategorized",
                created_at=FIXED_NOW - timedelta(days=1),
            )
        )
        newer = await _submit(harness)

        report = await harness.manager.cleanup_duplicates("uncategorized")

        assert report.deleted_count == 1
        assert report.duplicate_ids == [legacy.id]
        assert report.kept_ids == [newer]

    @pytest.mark.asyncio
    async def test_cleanup_dry_run_deletes_nothing(self, harness: Harness) -> None:
        older = await _submit(harness)
        harness.clock.advance(timedelta(minutes=5))
        await _submit(harness)

        report = await harness.manager.cleanup_duplicates("uncategorized", dry_run=True)

        assert report.dry_run is True
        assert report.deleted_count == 0
        assert report.duplicate_ids == [older]
        assert await harness.proposals.get(older) is not None

    @pytest.mark.asyncio
    async def test_resend_rejects_unknown_type(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        result = await harness.manager.resend_notification(proposal_id, "reminder")

        assert result.error_code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_resend_uses_current_phone(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        await harness.proposals.update(proposal_id, {"telefone": "(21) 99999-0000"})

        result = await harness.manager.resend_notification(proposal_id, "initial")

        assert result.success is True
        _, payload = harness.notifier.sent[-1]
        assert payload["numero"] == "5521999990000"

    @pytest.mark.asyncio
    async def test_resend_failure_is_reported(self) -> None:
        harness = Harness(
            notifier=FakeNotificationClient(NotificationDelivery(success=False, error="HTTP 500: x"))
        )
        proposal_id = await _submit(harness)

        result = await harness.manager.resend_notification(proposal_id, "final")

        assert result.error_code == ErrorCode.EXTERNAL
        assert result.message == "Falha ao reenviar notificação: HTTP 500: x"

    @pytest.mark.asyncio
    async def test_detail_includes_children(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)
        await harness.scheduler.run_all()
        await harness.manager.upload_document(proposal_id, "cnh", "c.pdf", b"x", None)
        await harness.manager.sync(proposal_id)

        detail = await harness.manager.get_proposal_detail(proposal_id)

        assert detail is not None
        assert detail["id"] == proposal_id
        assert detail["status"] == "completed"
        assert [document["type"] for document in detail["documents"]] == ["cnh"]
        assert detail["notifications"][0]["type"] == "initial"
        assert detail["crmSyncs"][0]["trigger"] == "manual"

    @pytest.mark.asyncio
    async def test_delete_proposal(self, harness: Harness) -> None:
        proposal_id = await _submit(harness)

        deleted = await harness.manager.delete_proposal(proposal_id)
        again = await harness.manager.delete_proposal(proposal_id)

        assert deleted.success is True
        assert again.error_code == ErrorCode.NOT_FOUND
