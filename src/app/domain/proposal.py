"""Proposal - ficha de adesão de um proponente à cooperativa.

Três modelos compartilham os campos do formulário:
- ProposalData: campos tolerantes (leitura de documentos já gravados)
- ProposalForm: validação rigorosa da submissão pública
- Proposal: registro persistido com campos de sistema (token, status, CRM)
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from app.domain._firestore_model import FirestoreModel, IsoDatetime, utcnow
from app.domain.validators import is_valid_birth_date, is_valid_cpf
from fsm.states.proposal import DEFAULT_INITIAL_STATUS, ProposalStatus, parse_status

UPLOAD_TOKEN_TTL = timedelta(days=7)

_EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# campo -> (tamanho mínimo, mensagem)
MIN_LENGTHS: dict[str, tuple[int, str]] = {
    "nome_completo": (5, "Nome completo sem abreviações"),
    "nome_mae": (5, "Nome da mãe obrigatório"),
    "pis": (14, "PIS/NIT deve conter 11 dígitos"),
    "sexo": (1, "Selecione"),
    "cor_raca": (1, "Selecione"),
    "estado_civil": (1, "Selecione"),
    "nacionalidade": (1, "Selecione"),
    "naturalidade_estado": (2, "Selecione o estado de nascimento"),
    "naturalidade_municipio": (2, "Selecione o município de nascimento"),
    "cep": (9, "CEP obrigatório"),
    "estado": (2, "Selecione o estado"),
    "cidade": (2, "Informe a cidade"),
    "logradouro_tipo": (1, "Selecione o tipo de logradouro"),
    "logradouro_nome": (3, "Informe o logradouro"),
    "numero": (1, "Informe o número"),
    "bairro": (2, "Informe o bairro"),
    "telefone": (14, "Telefone incompleto"),
    "escolaridade": (1, "Selecione a escolaridade"),
    "categoria_funcao": (1, "Selecione a função"),
    "tamanho_camisa": (1, "Selecione o tamanho da camisa"),
    "criterio_localidade": (1, "Responda sobre a localidade"),
    "criterio_experiencia": (1, "Responda sobre a experiência"),
    "criterio_disponibilidade": (1, "Responda sobre a disponibilidade"),
}

MAX_NAME_LENGTH = 70

CONSENT_MESSAGES: dict[str, str] = {
    "aceite_concordancia": "Você deve aceitar a concordância",
    "aceite_lgpd": "Você deve aceitar os termos da LGPD",
}


class ProposalData(FirestoreModel):
    """Campos preenchidos pelo proponente no formulário."""

    # Pessoais
    cpf: str | None = None
    nome_completo: str | None = None
    rg: str | None = None
    estado_expedidor: str | None = None
    orgao_expedidor: str | None = None
    nome_mae: str | None = None
    pis: str | None = None
    data_nascimento: str | None = None
    sexo: str | None = None
    cor_raca: str | None = None
    estado_civil: str | None = None
    nacionalidade: str | None = None
    naturalidade_estado: str | None = None
    naturalidade_municipio: str | None = None

    # Endereço
    cep: str | None = None
    estado: str | None = None
    cidade: str | None = None
    logradouro_tipo: str | None = None
    logradouro_nome: str | None = None
    numero: str | None = None
    bairro: str | None = None
    complemento: str | None = None

    # Contato
    telefone: str | None = None
    email: str | None = None

    # Bancário (fora do fluxo atual do formulário)
    banco: str | None = None
    tipo_conta: str | None = None
    agencia: str | None = None
    conta: str | None = None
    conta_digito: str | None = None

    # Profissional
    escolaridade: str | None = None
    categoria_funcao: str | None = None
    cargo: str | None = None
    tamanho_camisa: str | None = None

    # Jurídico
    aceite_concordancia: bool | None = None
    aceite_lgpd: bool | None = Field(default=None, alias="aceiteLGPD")

    # Critérios de elegibilidade (Sim/Não)
    criterio_localidade: str | None = None
    criterio_experiencia: str | None = None
    criterio_disponibilidade: str | None = None

    # Campanha e roteamento no CRM
    campaign_id: str | None = None
    client_id: str | None = None
    function_id: str | None = None
    ddd: str | None = None


class ProposalForm(ProposalData):
    """Submissão pública do formulário, validada antes de qualquer escrita."""

    model_config = ConfigDict(validate_default=True)

    @field_validator(*MIN_LENGTHS)
    @classmethod
    def _check_min_length(cls, value: str | None, info: ValidationInfo) -> str | None:
        minimum, message = MIN_LENGTHS[info.field_name]
        if len(value or "") < minimum:
            raise ValueError(message)
        return value

    @field_validator("nome_completo", "nome_mae")
    @classmethod
    def _check_max_length(cls, value: str | None) -> str | None:
        if value and len(value) > MAX_NAME_LENGTH:
            raise ValueError(f"Máximo de {MAX_NAME_LENGTH} caracteres")
        return value

    @field_validator("cpf")
    @classmethod
    def _check_cpf(cls, value: str | None) -> str | None:
        if len(value or "") < 14:
            raise ValueError("CPF obrigatório")
        if not is_valid_cpf(value):
            raise ValueError("CPF inválido")
        return value

    @field_validator("data_nascimento")
    @classmethod
    def _check_birth_date(cls, value: str | None) -> str | None:
        if len(value or "") < 10:
            raise ValueError("Data inválida (DD/MM/AAAA)")
        if not is_valid_birth_date(value):
            raise ValueError("Data de nascimento inválida")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        if not value or not _EMAIL_REGEX.match(value):
            raise ValueError("E-mail inválido")
        return value

    @field_validator("aceite_concordancia", "aceite_lgpd", mode="before")
    @classmethod
    def _check_consent(cls, value: Any, info: ValidationInfo) -> bool:
        if value is not True:
            raise ValueError(CONSENT_MESSAGES[info.field_name])
        return value


class Proposal(ProposalData):
    """Proposta persistida, com campos de sistema do ciclo de vida."""

    upload_token: str = ""
    upload_token_expires: IsoDatetime | None = None
    status: ProposalStatus = DEFAULT_INITIAL_STATUS
    crm_synced: bool = False
    crm_synced_at: IsoDatetime | None = None
    documents_submitted_at: IsoDatetime | None = None
    created_at: IsoDatetime = Field(default_factory=utcnow)

    @field_validator("status", mode="before")
    @classmethod
    def _tolerate_unknown_status(cls, value: Any) -> ProposalStatus:
        return parse_status(value)

    def is_upload_token_expired(self, now: datetime | None = None) -> bool:
        """Token expirado bloqueia a página de upload, qualquer que seja o status."""
        if self.upload_token_expires is None:
            return False
        return self.upload_token_expires < (now or utcnow())

    @property
    def is_synced(self) -> bool:
        return self.status == ProposalStatus.COMPLETED or self.crm_synced

    def to_summary_dict(self) -> dict[str, Any]:
        """Resumo para listagens administrativas."""
        return {
            "id": self.id,
            "nomeCompleto": self.nome_completo,
            "campaignId": self.campaign_id,
            "status": self.status.value,
            "crmSynced": self.crm_synced,
            "createdAt": self.to_public_dict()["createdAt"],
        }
