"""Mapeamento de proposta para os campos multipart do CRM.

O CRM não aceita campos ausentes: todo texto vazio vira o sentinela
"nao coletado". Valores categóricos são traduzidos por substring,
sem diferenciar maiúsculas e acentos.
"""

from __future__ import annotations

import logging
import unicodedata

from app.domain.campaign import UNCATEGORIZED_CAMPAIGN_ID, Campaign
from app.domain.proposal import Proposal
from app.domain.validators import only_digits, parse_birth_date
from app.infra.reference.municipalities import resolve_municipality_code
from config.logging import log_fallback
from config.settings import MISSING_FIELD_SENTINEL, UNRESOLVED_MUNICIPALITY_CODE

logger = logging.getLogger(__name__)

COUNTRY_CODE = "55"

# Valores de contrato tratados como "sem contrato"
CONTRACT_PLACEHOLDERS: frozenset[str] = frozenset({"", "0", "00"})

DEFAULT_GENDER = "OUTRO"
DEFAULT_MARITAL_STATUS = "SOLTEIRO"
DEFAULT_EDUCATION = "MEDIO_COMPLETO"

# (substrings exigidas, valor CRM); a primeira regra que casar vence
GENDER_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("MASC",), "MASCULINO"),
    (("FEM",), "FEMININO"),
)

MARITAL_STATUS_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("SOLTEIR",), "SOLTEIRO"),
    (("CASAD",), "CASADO"),
    (("DIVOR",), "DIVORCIADO"),
    (("VIUV",), "VIUVO"),
    (("UNI", "EST"), "UNIAO_ESTAVEL"),
    (("SEPARAD",), "SEPARADO"),
)

# INCOMPLETO antes do nível simples: "Médio Incompleto" contém "MEDIO"
EDUCATION_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("SEM ESCOLARIDADE",), "SEM_ESCOLARIDADE"),
    (("FUNDAMENTAL", "INCOMPLETO"), "FUNDAMENTAL_INCOMPLETO"),
    (("FUNDAMENTAL",), "FUNDAMENTAL_COMPLETO"),
    (("MEDIO", "INCOMPLETO"), "MEDIO_INCOMPLETO"),
    (("MEDIO",), "MEDIO_COMPLETO"),
    (("SUPERIOR", "INCOMPLETO"), "SUPERIOR_INCOMPLETO"),
    (("SUPERIOR",), "SUPERIOR_COMPLETO"),
    (("ESPECIALIZA",), "POS_GRADUACAO"),
    (("POS",), "POS_GRADUACAO"),
    (("MESTRADO",), "MESTRADO"),
    (("DOUTORADO",), "DOUTORADO"),
)


def fold(value: str | None) -> str:
    """Maiúsculas sem acentos, para comparação por substring."""
    decomposed = unicodedata.normalize("NFD", (value or "").upper())
    return "".join(char for char in decomposed if not unicodedata.combining(char)).strip()


def _match_rules(
    value: str | None,
    rules: tuple[tuple[tuple[str, ...], str], ...],
    default: str,
) -> str:
    folded = fold(value)
    if not folded:
        return default
    for needles, mapped in rules:
        if all(needle in folded for needle in needles):
            return mapped
    return default


def map_gender(value: str | None) -> str:
    return _match_rules(value, GENDER_RULES, DEFAULT_GENDER)


def map_marital_status(value: str | None) -> str:
    return _match_rules(value, MARITAL_STATUS_RULES, DEFAULT_MARITAL_STATUS)


def map_education(value: str | None) -> str:
    return _match_rules(value, EDUCATION_RULES, DEFAULT_EDUCATION)


def normalize_phone(value: str | None) -> str:
    """Somente dígitos, com DDI 55.

    Mantém como está quando já começa com 55 e tem mais de 11 dígitos.
    Um DDD 55 (RS) com número de 8 dígitos recebe o prefixo normalmente.
    """
    digits = only_digits(value)
    if not digits:
        return ""
    if digits.startswith(COUNTRY_CODE) and len(digits) > 11:
        return digits
    return f"{COUNTRY_CODE}{digits}"


def birth_date_to_iso(value: str | None) -> str:
    """DD/MM/AAAA -> AAAA-MM-DD; vazio quando a data não é válida."""
    parsed = parse_birth_date(value)
    return parsed.isoformat() if parsed else ""


def resolve_contract_id(proposal: Proposal, campaign: Campaign | None) -> str | None:
    """clientId da campanha tem prioridade sobre o gravado na proposta.

    Campanha inexistente ou "uncategorized" usa o valor da proposta.
    Retorna None para vazio ou placeholders ("0", "00").
    """
    contract_id = ""
    if campaign is not None and campaign.id and campaign.id != UNCATEGORIZED_CAMPAIGN_ID:
        contract_id = (campaign.client_id or "").strip()
    if not contract_id:
        contract_id = (proposal.client_id or "").strip()
    if contract_id in CONTRACT_PLACEHOLDERS:
        return None
    return contract_id


def resolve_function_id(proposal: Proposal, campaign: Campaign | None) -> str | None:
    function_id = (proposal.function_id or "").strip()
    if not function_id and campaign is not None:
        function_id = (campaign.function_id or "").strip()
    return function_id or None


def _bool_field(value: bool | None) -> str:
    return "true" if value else "false"


def build_crm_fields(
    proposal: Proposal,
    campaign: Campaign | None,
    *,
    missing_value: str = MISSING_FIELD_SENTINEL,
    municipality_codes: dict[str, str] | None = None,
) -> dict[str, str]:
    """Monta os campos de texto do multipart do CRM.

    Args:
        proposal: Proposta relida do store
        campaign: Campanha vinculada (None se inexistente)
        missing_value: Valor para campos ausentes
        municipality_codes: Tabela IBGE alternativa (testes)

    Returns:
        Dict campo CRM -> valor, sem campos vazios.
    """

    def text(value: str | None) -> str:
        value = (value or "").strip()
        return value or missing_value

    def digits(value: str | None) -> str:
        return only_digits(value) or missing_value

    def municipality(state: str | None, city: str | None) -> str:
        code = resolve_municipality_code(state, city, municipality_codes)
        if code:
            return code
        log_fallback(logger, "municipality_code", reason="not_found", state=state or "")
        return UNRESOLVED_MUNICIPALITY_CODE

    fields: dict[str, str] = {
        "Name": text(proposal.nome_completo),
        "Cpf": digits(proposal.cpf),
        "MotherName": text(proposal.nome_mae),
        "Pis": digits(proposal.pis),
        "Rg": text(proposal.rg),
        "RgIssuer": text(proposal.orgao_expedidor),
        "RgIssuerState": text(proposal.estado_expedidor),
        "BirthDate": birth_date_to_iso(proposal.data_nascimento) or missing_value,
        "Gender": map_gender(proposal.sexo),
        "Race": text((proposal.cor_raca or "").upper()),
        "MaritalStatus": map_marital_status(proposal.estado_civil),
        "Nationality": text(proposal.nacionalidade),
        "BirthState": text(proposal.naturalidade_estado),
        "BirthCity": text(proposal.naturalidade_municipio),
        "BirthCityCode": municipality(
            proposal.naturalidade_estado, proposal.naturalidade_municipio
        ),
        "ZipCode": digits(proposal.cep),
        "State": text(proposal.estado),
        "City": text(proposal.cidade),
        "CityCode": municipality(proposal.estado, proposal.cidade),
        "StreetType": text(proposal.logradouro_tipo),
        "Street": text(proposal.logradouro_nome),
        "Number": text(proposal.numero),
        "Neighborhood": text(proposal.bairro),
        "Complement": text(proposal.complemento),
        "Phone": normalize_phone(proposal.telefone) or missing_value,
        "Email": text(proposal.email),
        "Education": map_education(proposal.escolaridade),
        "JobCategory": text(proposal.categoria_funcao),
        "Role": text(proposal.cargo or proposal.categoria_funcao),
        "ShirtSize": text(proposal.tamanho_camisa),
        "LocationCriterion": text(proposal.criterio_localidade),
        "ExperienceCriterion": text(proposal.criterio_experiencia),
        "AvailabilityCriterion": text(proposal.criterio_disponibilidade),
        "AgreementAccepted": _bool_field(proposal.aceite_concordancia),
        "LgpdAccepted": _bool_field(proposal.aceite_lgpd),
    }

    function_id = resolve_function_id(proposal, campaign)
    if function_id:
        fields["FunctionId"] = function_id

    contract_id = resolve_contract_id(proposal, campaign)
    if contract_id:
        fields["ContractId"] = contract_id

    return fields
