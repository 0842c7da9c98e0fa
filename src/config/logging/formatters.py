"""Formatter JSON dos logs do serviço.

Todo registro sai com timestamp ISO (UTC), level, logger, message,
correlation_id e service. Contexto adicional vem de `extra`.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (além do timestamp)
REQUIRED_LOG_FIELDS = (
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON.

    Exemplo de output:
        {"level": "INFO", "logger": "app.services.proposal_lifecycle",
         "message": "proposal_finalized", "correlation_id": "9f2c...",
         "service": "coopedu_onboarding", "proposal_id": "abc123",
         "timestamp": "2026-02-02T10:30:00.000000+00:00"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        timestamp=True,
    )
