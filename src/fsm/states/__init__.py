"""
Exports públicos do módulo fsm/states.

Estados canônicos do ciclo de vida da proposta.
"""

from fsm.states.proposal import (
    DEFAULT_INITIAL_STATUS,
    UPLOAD_OPEN_STATES,
    ProposalStatus,
    parse_status,
)

__all__ = [
    "DEFAULT_INITIAL_STATUS",
    "UPLOAD_OPEN_STATES",
    "ProposalStatus",
    "parse_status",
]
