"""
Estados canônicos do ciclo de vida de uma proposta de adesão.

pending_documents → documents_received → completed

Não existe estado de falha: um envio ao CRM que falha mantém a
proposta em documents_received até um novo sync manual.
"""

from enum import StrEnum


class ProposalStatus(StrEnum):
    """
    Estados de uma proposta.

    Estados:
        - PENDING_DOCUMENTS: Ficha enviada, aguardando documentos
        - DOCUMENTS_RECEIVED: Proponente finalizou o envio de documentos
        - COMPLETED: Cadastro aceito pelo CRM
    """

    PENDING_DOCUMENTS = "pending_documents"
    DOCUMENTS_RECEIVED = "documents_received"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


DEFAULT_INITIAL_STATUS: ProposalStatus = ProposalStatus.PENDING_DOCUMENTS

# Estados em que o proponente ainda pode anexar ou remover documentos
UPLOAD_OPEN_STATES: frozenset[ProposalStatus] = frozenset({
    ProposalStatus.PENDING_DOCUMENTS,
    ProposalStatus.DOCUMENTS_RECEIVED,
})


def parse_status(value: str | None) -> ProposalStatus:
    """
    Converte valor persistido em ProposalStatus.

    Valores desconhecidos ou ausentes caem no estado inicial.
    """
    try:
        return ProposalStatus(value)
    except ValueError:
        return DEFAULT_INITIAL_STATUS
