"""Validadores de documentos brasileiros usados no formulário de adesão.

Funções puras, sem dependência de pydantic, para serem reutilizadas
pelos modelos de validação e pelo mapeamento do CRM.
"""

from __future__ import annotations

import re
from datetime import date

_NON_DIGITS = re.compile(r"\D")
_BIRTH_DATE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_MIN_BIRTH_YEAR = 1900


def only_digits(value: str | None) -> str:
    """Remove tudo que não é dígito (máscaras de CPF, CEP, telefone)."""
    return _NON_DIGITS.sub("", value or "")


def is_valid_cpf(cpf: str | None) -> bool:
    """Valida CPF pelos dois dígitos verificadores (módulo 11).

    Rejeita CPFs com os 11 dígitos iguais, mesmo que passem no cálculo.
    """
    digits = only_digits(cpf)
    if len(digits) != 11 or len(set(digits)) == 1:
        return False

    for position in (9, 10):
        total = sum(
            int(digit) * (position + 1 - index)
            for index, digit in enumerate(digits[:position])
        )
        check = 11 - (total % 11)
        if check >= 10:
            check = 0
        if check != int(digits[position]):
            return False
    return True


def parse_birth_date(value: str | None, today: date | None = None) -> date | None:
    """Converte DD/MM/AAAA em date, ou None se inválida.

    Exige mês entre 1 e 12, ano entre 1900 e o ano corrente e uma data
    que exista no calendário (30/02 é rejeitado).
    """
    match = _BIRTH_DATE.match(value or "")
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    current_year = (today or date.today()).year
    if not 1 <= month <= 12:
        return None
    if not _MIN_BIRTH_YEAR <= year <= current_year:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_birth_date(value: str | None, today: date | None = None) -> bool:
    return parse_birth_date(value, today) is not None


def normalize_professions(value: object) -> object:
    """Normaliza lista de profissões vinda como texto separado por vírgula ou lista.

    Valores de outro tipo são devolvidos sem alteração para que a
    validação do modelo produza o erro adequado.
    """
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value
