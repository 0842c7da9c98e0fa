"""
Módulo FSM: Máquina de Estados do ciclo de vida da proposta.

Estrutura:
    - states/: Definições dos estados (ProposalStatus enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - manager/: Máquina de estados (ProposalStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import ProposalStateMachine, create_proposal_fsm
from fsm.states import (
    DEFAULT_INITIAL_STATUS,
    UPLOAD_OPEN_STATES,
    ProposalStatus,
    parse_status,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATUS",
    "UPLOAD_OPEN_STATES",
    "VALID_TRANSITIONS",
    "ProposalStateMachine",
    "ProposalStatus",
    "StateTransition",
    "TransitionResult",
    "create_proposal_fsm",
    "get_valid_targets",
    "is_transition_valid",
    "parse_status",
    "validate_transition_map",
]
