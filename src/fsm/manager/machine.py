"""
Máquina de estados (ProposalStateMachine) do ciclo de vida da proposta.

Instanciada a partir do status persistido; a transição é validada em
memória antes da escrita no Firestore.
"""

from typing import Any

from fsm.states.proposal import DEFAULT_INITIAL_STATUS, ProposalStatus
from fsm.transitions.rules import is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class ProposalStateMachine:
    """
    Máquina de estados de uma proposta.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas nesta instância
    """

    __slots__ = ("_current_state", "_history", "_proposal_id")

    def __init__(
        self,
        initial_state: ProposalStatus | None = None,
        proposal_id: str = "",
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATUS
        self._history: list[StateTransition] = []
        self._proposal_id = proposal_id

    @property
    def current_state(self) -> ProposalStatus:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def proposal_id(self) -> str:
        return self._proposal_id

    def transition(
        self,
        target: ProposalStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'finalize', 'crm_sync')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.value} → {target.value}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)


def create_proposal_fsm(
    proposal_id: str,
    initial_state: ProposalStatus | None = None,
) -> ProposalStateMachine:
    """Factory para criar a máquina de uma proposta."""
    return ProposalStateMachine(initial_state=initial_state, proposal_id=proposal_id)
