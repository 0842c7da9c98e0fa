"""Campaign - campanha de recrutamento com página pública própria."""

from __future__ import annotations

import re
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from app.domain._firestore_model import FirestoreModel, IsoDatetime, utcnow
from app.domain.validators import normalize_professions

# Propostas sem campanha ficam agrupadas sob este id
UNCATEGORIZED_CAMPAIGN_ID = "uncategorized"

_SLUG_REGEX = re.compile(r"^[a-z0-9-]+$")
_URL_REGEX = re.compile(r"^https?://\S+$")


class CampaignData(FirestoreModel):
    """Campos editáveis de uma campanha."""

    name: str = ""
    slug: str = ""
    description: str | None = None
    banner_url: str | None = None
    client_id: str = ""
    function_id: str = ""
    professions: list[str] = Field(default_factory=list)
    active: bool = True


class CampaignForm(CampaignData):
    """Formulário administrativo de criação/edição de campanha."""

    model_config = ConfigDict(validate_default=True)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("Nome deve ter pelo menos 3 caracteres")
        return value.strip()

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        if len(value) < 3:
            raise ValueError("Slug deve ter pelo menos 3 caracteres")
        if not _SLUG_REGEX.match(value):
            raise ValueError("Slug deve conter apenas letras minúsculas, números e hífens")
        return value

    @field_validator("banner_url")
    @classmethod
    def _check_banner_url(cls, value: str | None) -> str | None:
        if value and not _URL_REGEX.match(value):
            raise ValueError("URL inválida")
        return value or None

    @field_validator("client_id")
    @classmethod
    def _check_client_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Client ID é obrigatório")
        return value.strip()

    @field_validator("function_id")
    @classmethod
    def _check_function_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Function ID é obrigatório")
        return value.strip()

    @field_validator("professions", mode="before")
    @classmethod
    def _normalize_professions(cls, value: Any) -> Any:
        return normalize_professions(value)

    @field_validator("professions")
    @classmethod
    def _check_professions(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Informe pelo menos uma profissão")
        return value


class Campaign(CampaignData):
    """Campanha persistida."""

    created_at: IsoDatetime = Field(default_factory=utcnow)
    updated_at: IsoDatetime = Field(default_factory=utcnow)
