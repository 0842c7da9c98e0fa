"""
Exports públicos do módulo fsm/types.

Tipos de dados para transições de status da proposta.
"""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = [
    "StateTransition",
    "TransitionResult",
]
