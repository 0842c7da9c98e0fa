"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="coopedu_onboarding")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("proposal_created", extra={"proposal_id": "abc123"})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- timestamp

Logs estruturados, sem PII (CPF, telefone, e-mail nunca aparecem).
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import CorrelationIdFilter, mask_token
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
    "mask_token",
]
