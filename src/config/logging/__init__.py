"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="medicore-scheduling")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("mutation_confirmed", extra={"entity_type": "appointments"})

Campos obrigatórios em todo log: asctime, level, logger, message,
correlation_id e service. Nunca registrar nomes, sintomas ou outros
dados de paciente; apenas ids e contagens.
"""

from config.logging.config import (
    DEFAULT_SERVICE_NAME,
    NOISY_LOGGERS,
    configure_logging,
    get_logger,
)
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "NOISY_LOGGERS",
    "REQUIRED_LOG_FIELDS",
    # Filters
    "CorrelationIdFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
]
