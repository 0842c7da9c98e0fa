"""
Regras de transição válidas entre estados da proposta.

Finalizar é repetível (inclusive após o sync, voltando para
documents_received) e o sync pode ser disparado a partir de
qualquer estado, inclusive para reenviar uma proposta concluída.
"""

from fsm.states.proposal import ProposalStatus

TransitionMap = dict[ProposalStatus, frozenset[ProposalStatus]]

VALID_TRANSITIONS: TransitionMap = {
    ProposalStatus.PENDING_DOCUMENTS: frozenset({
        ProposalStatus.DOCUMENTS_RECEIVED,
        ProposalStatus.COMPLETED,  # sync manual antes de finalizar
    }),
    ProposalStatus.DOCUMENTS_RECEIVED: frozenset({
        ProposalStatus.DOCUMENTS_RECEIVED,  # finalize repetido
        ProposalStatus.COMPLETED,
    }),
    ProposalStatus.COMPLETED: frozenset({
        ProposalStatus.DOCUMENTS_RECEIVED,  # novo finalize após sync
        ProposalStatus.COMPLETED,  # resync
    }),
}


def get_valid_targets(state: ProposalStatus) -> frozenset[ProposalStatus]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ProposalStatus, to_state: ProposalStatus) -> bool:
    """Verifica se uma transição é válida segundo as regras definidas."""
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Nenhuma transição aponta para o estado inicial
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ProposalStatus:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for from_state, targets in VALID_TRANSITIONS.items():
        if ProposalStatus.PENDING_DOCUMENTS in targets:
            errors.append(f"Transição {from_state.name} → PENDING_DOCUMENTS não é permitida")
        for target in targets:
            if not isinstance(target, ProposalStatus):
                errors.append(f"Transição {from_state.name} → {target}: destino inválido")

    return errors
