"""Correlation id por requisição, propagado para logs e tasks em background.

ContextVar é copiado por asyncio.create_task, então efeitos colaterais
agendados (notificação, envio ao CRM) herdam o id da requisição que os
originou.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "x-correlation-id"

_MAX_INBOUND_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    """correlation_id do contexto atual ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o id do contexto; gera um novo se ausente ou grande demais.

    Returns:
        Token para reset_correlation_id().
    """
    value = (correlation_id or "").strip()
    if not value or len(value) > _MAX_INBOUND_LENGTH:
        value = generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)
