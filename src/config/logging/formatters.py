"""Formatter JSON com campos obrigatórios em ordem fixa."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado, na ordem de saída
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
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
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-02-02 10:30:00,120",
            "level": "INFO",
            "logger": "app.services.mutation_coordinator",
            "message": "mutation_confirmed",
            "correlation_id": "abc-123",
            "service": "medicore-scheduling",
            "entity_type": "appointments"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
