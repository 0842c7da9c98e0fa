"""Testes da máquina de estados da proposta."""

from __future__ import annotations

import pytest

from fsm import (
    DEFAULT_INITIAL_STATUS,
    UPLOAD_OPEN_STATES,
    VALID_TRANSITIONS,
    ProposalStatus,
    create_proposal_fsm,
    get_valid_targets,
    is_transition_valid,
    parse_status,
    validate_transition_map,
)


class TestProposalStatus:
    def test_initial_state_and_upload_states(self) -> None:
        assert DEFAULT_INITIAL_STATUS == ProposalStatus.PENDING_DOCUMENTS
        assert ProposalStatus.COMPLETED not in UPLOAD_OPEN_STATES
        assert str(ProposalStatus.COMPLETED) == "completed"

    @pytest.mark.parametrize("raw", [None, "", "unknown", "crm_failed"])
    def test_parse_status_tolerates_unknown_values(self, raw: str | None) -> None:
        assert parse_status(raw) == ProposalStatus.PENDING_DOCUMENTS


class TestTransitions:
    def test_transition_map_is_consistent(self) -> None:
        assert validate_transition_map() == []
        assert set(VALID_TRANSITIONS) == set(ProposalStatus)

    def test_nothing_returns_to_pending(self) -> None:
        for state in ProposalStatus:
            assert not is_transition_valid(state, ProposalStatus.PENDING_DOCUMENTS)

    def test_finalize_is_repeatable(self) -> None:
        assert ProposalStatus.DOCUMENTS_RECEIVED in get_valid_targets(
            ProposalStatus.DOCUMENTS_RECEIVED
        )


class TestMachine:
    def test_successful_transition_records_history(self) -> None:
        fsm = create_proposal_fsm("p1", ProposalStatus.PENDING_DOCUMENTS)

        result = fsm.transition(ProposalStatus.DOCUMENTS_RECEIVED, trigger="finalize")

        assert result.success
        assert fsm.current_state == ProposalStatus.DOCUMENTS_RECEIVED
        assert len(fsm.history) == 1
        assert fsm.history[0].trigger == "finalize"
        assert fsm.proposal_id == "p1"

    def test_invalid_transition_keeps_state(self) -> None:
        fsm = create_proposal_fsm("p1", ProposalStatus.COMPLETED)

        result = fsm.transition(ProposalStatus.PENDING_DOCUMENTS, trigger="manual")

        assert not result.success
        assert "Transição inválida" in (result.error_reason or "")
        assert fsm.current_state == ProposalStatus.COMPLETED
        assert fsm.history == []
