"""Configuração centralizada de logging.

Um único handler JSON no logger raiz, com service e correlation_id
injetados pelo filter. Loggers de bibliotecas de transporte ficam em
WARNING para não registrar URLs de cada requisição.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TextIO

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "medicore-scheduling"

# httpx/httpcore logam cada requisição em INFO (URL inclui filtros por id)
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configura logging JSON estruturado.

    Deve ser chamada uma vez, em ``app.bootstrap.initialize_app``.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id do
            contexto atual (ex: ``app.observability.get_correlation_id``).
        stream: Destino do handler; stderr quando omitido.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler(stream)
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]

    if level_upper != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo (o filter injeta service e correlation_id)."""
    return logging.getLogger(name)
