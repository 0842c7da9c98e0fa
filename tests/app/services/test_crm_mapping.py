"""Testes do mapeamento proposta -> campos do CRM."""

from __future__ import annotations

import pytest

from app.domain.campaign import UNCATEGORIZED_CAMPAIGN_ID, Campaign
from app.domain.proposal import Proposal
from app.services.crm_mapping import (
    birth_date_to_iso,
    build_crm_fields,
    map_education,
    map_gender,
    map_marital_status,
    normalize_phone,
    resolve_contract_id,
    resolve_function_id,
)
from config.settings import MISSING_FIELD_SENTINEL, UNRESOLVED_MUNICIPALITY_CODE

CODES = {"SP-sao paulo": "3550308", "RS-porto alegre": "4314902"}


class TestPhone:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("(11) 98765-4321", "5511987654321"),
            ("5511987654321", "5511987654321"),
            ("11987654321", "5511987654321"),
            ("(55) 9876-5432", "555598765432"),  # DDD 55 com 10 dígitos recebe DDI
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize_phone(self, raw: str | None, expected: str) -> None:
        assert normalize_phone(raw) == expected


class TestCategoricalMapping:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("Masculino", "MASCULINO"), ("feminino", "FEMININO"), ("Outro", "OUTRO"), (None, "OUTRO")],
    )
    def test_gender(self, raw: str | None, expected: str) -> None:
        assert map_gender(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Casada", "CASADO"),
            ("Solteiro(a)", "SOLTEIRO"),
            ("Divorciado", "DIVORCIADO"),
            ("Viúva", "VIUVO"),
            ("União Estável", "UNIAO_ESTAVEL"),
            ("Separado", "SEPARADO"),
            ("", "SOLTEIRO"),
        ],
    )
    def test_marital_status(self, raw: str, expected: str) -> None:
        assert map_marital_status(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Médio Incompleto", "MEDIO_INCOMPLETO"),
            ("Ensino Médio Completo", "MEDIO_COMPLETO"),
            ("Fundamental Incompleto", "FUNDAMENTAL_INCOMPLETO"),
            ("Superior Completo", "SUPERIOR_COMPLETO"),
            ("Superior Incompleto", "SUPERIOR_INCOMPLETO"),
            ("Pós-graduação", "POS_GRADUACAO"),
            ("Mestrado", "MESTRADO"),
            ("Doutorado", "DOUTORADO"),
            ("Sem escolaridade", "SEM_ESCOLARIDADE"),
            ("", "MEDIO_COMPLETO"),
        ],
    )
    def test_education(self, raw: str, expected: str) -> None:
        assert map_education(raw) == expected

    def test_birth_date_to_iso(self) -> None:
        assert birth_date_to_iso("05/07/1988") == "1988-07-05"
        assert birth_date_to_iso("31/02/1988") == ""


class TestContractAndFunction:
    def test_campaign_client_id_wins(self) -> None:
        proposal = Proposal(client_id="111")
        campaign = Campaign(id="c1", client_id="999")
        assert resolve_contract_id(proposal, campaign) == "999"

    def test_uncategorized_campaign_uses_proposal_value(self) -> None:
        proposal = Proposal(client_id="111")
        campaign = Campaign(id=UNCATEGORIZED_CAMPAIGN_ID, client_id="999")
        assert resolve_contract_id(proposal, campaign) == "111"

    @pytest.mark.parametrize("value", ["", "0", "00"])
    def test_placeholders_mean_no_contract(self, value: str) -> None:
        assert resolve_contract_id(Proposal(client_id=value), None) is None

    def test_function_id_falls_back_to_campaign(self) -> None:
        assert resolve_function_id(Proposal(function_id="5"), Campaign(function_id="7")) == "5"
        assert resolve_function_id(Proposal(), Campaign(function_id="7")) == "7"
        assert resolve_function_id(Proposal(), None) is None


class TestBuildCrmFields:
    def test_full_mapping(self) -> None:
        proposal = Proposal(
            nome_completo="Maria da Silva",
            cpf="529.982.247-25",
            cep="01310-100",
            data_nascimento="15/03/1990",
            sexo="Feminino",
            cor_raca="parda",
            estado="SP",
            cidade="São Paulo",
            naturalidade_estado="RS",
            naturalidade_municipio="Porto Alegre",
            telefone="(11) 98765-4321",
            cargo=None,
            categoria_funcao="Professor",
            aceite_concordancia=True,
            aceite_lgpd=True,
            client_id="4521",
        )

        fields = build_crm_fields(proposal, None, municipality_codes=CODES)

        assert fields["Name"] == "Maria da Silva"
        assert fields["Cpf"] == "52998224725"
        assert fields["ZipCode"] == "01310100"
        assert fields["BirthDate"] == "1990-03-15"
        assert fields["Gender"] == "FEMININO"
        assert fields["Race"] == "PARDA"
        assert fields["CityCode"] == "3550308"
        assert fields["BirthCityCode"] == "4314902"
        assert fields["Phone"] == "5511987654321"
        assert fields["Role"] == "Professor"
        assert fields["LgpdAccepted"] == "true"
        assert fields["ContractId"] == "4521"
        assert "FunctionId" not in fields

    def test_missing_values_use_sentinel(self) -> None:
        fields = build_crm_fields(Proposal(), None, municipality_codes={})

        assert fields["Name"] == MISSING_FIELD_SENTINEL
        assert fields["Email"] == MISSING_FIELD_SENTINEL
        assert fields["Phone"] == MISSING_FIELD_SENTINEL
        assert fields["CityCode"] == UNRESOLVED_MUNICIPALITY_CODE
        assert fields["AgreementAccepted"] == "false"
        assert "ContractId" not in fields
        assert all(value != "" for value in fields.values())
