"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import ProposalStateMachine, create_proposal_fsm

__all__ = [
    "ProposalStateMachine",
    "create_proposal_fsm",
]
