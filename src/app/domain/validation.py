"""Validação de formulários com erros achatados por campo.

Retorna todas as falhas de uma vez (campo camelCase → mensagem),
no formato que a interface exibe ao lado de cada campo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from app.domain.campaign import CampaignForm
from app.domain.proposal import ProposalForm

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "
_GENERIC_MESSAGE = "Valor inválido"


@dataclass(frozen=True, slots=True)
class ValidationOutcome(Generic[ModelT]):
    """Resultado de validação: modelo validado ou mapa de erros."""

    value: ModelT | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def _alias_map(model_cls: type[BaseModel]) -> dict[str, str]:
    return {name: info.alias or name for name, info in model_cls.model_fields.items()}


def _field_path(loc: tuple[Any, ...], aliases: dict[str, str]) -> str:
    parts = [str(aliases.get(part, part)) if isinstance(part, str) else str(part) for part in loc]
    return ".".join(parts) or "__root__"


def flatten_errors(exc: ValidationError, model_cls: type[BaseModel]) -> dict[str, str]:
    """Converte ValidationError em {campo: mensagem}, primeira mensagem por campo."""
    aliases = _alias_map(model_cls)
    errors: dict[str, str] = {}
    for error in exc.errors():
        path = _field_path(tuple(error.get("loc", ())), aliases)
        if path in errors:
            continue
        if error.get("type") == "value_error":
            message = str(error.get("msg", "")).removeprefix(_VALUE_ERROR_PREFIX)
        else:
            message = _GENERIC_MESSAGE
        errors[path] = message
    return errors


def _validate(model_cls: type[ModelT], data: Any) -> ValidationOutcome[ModelT]:
    if not isinstance(data, dict):
        return ValidationOutcome(errors={"__root__": "Dados inválidos"})
    try:
        return ValidationOutcome(value=model_cls.model_validate(data))
    except ValidationError as exc:
        return ValidationOutcome(errors=flatten_errors(exc, model_cls))


def validate_proposal_form(data: Any) -> ValidationOutcome[ProposalForm]:
    return _validate(ProposalForm, data)


def validate_campaign_form(data: Any) -> ValidationOutcome[CampaignForm]:
    return _validate(CampaignForm, data)
