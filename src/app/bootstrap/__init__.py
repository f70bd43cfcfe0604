"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
entrega uma ClinicSession pronta para uso.

Uso:
    from app.bootstrap import create_clinic_session, initialize_app

    initialize_app()
    session = create_clinic_session()
    await session.load()
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.dependencies import create_clinic_session, create_remote_gateway
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_remote_store_settings,
    get_session_settings,
)

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON com service e correlation_id.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()
    default_level = "DEBUG" if base.debug else DEFAULT_LOG_LEVEL
    log_level = os.getenv("LOG_LEVEL", default_level).upper()

    configure_logging(
        level=log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa logging em nível DEBUG para testes."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = base.strict_validation
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"remote_store: {error}" for error in get_remote_store_settings().validate(base)
    )
    errors.extend(f"session: {error}" for error in get_session_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


__all__ = [
    "create_clinic_session",
    "create_remote_gateway",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
