"""Factories do gateway remoto e da sessão baseadas em configuração de ambiente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.remote import MemoryRemoteGateway, PostgrestRemoteGateway
from app.infra.stores.identity_cache import IdentityCache
from app.sessions import ClinicSession
from config.settings import (
    get_base_settings,
    get_remote_store_settings,
    get_session_settings,
)

if TYPE_CHECKING:
    from app.protocols.remote_gateway import RemoteGatewayProtocol
    from config.settings import RemoteStoreSettings

logger = logging.getLogger(__name__)


def create_remote_gateway(
    settings: RemoteStoreSettings | None = None,
) -> RemoteGatewayProtocol:
    """Cria o gateway conforme REMOTE_STORE_BACKEND.

    Raises:
        ValueError: backend inválido ou credenciais ausentes.
    """
    settings = settings or get_remote_store_settings()

    if settings.backend == "postgrest":
        if not settings.url:
            raise ValueError("SUPABASE_URL não configurado")
        gateway = PostgrestRemoteGateway(
            settings.url,
            settings.api_key,
            timeout_seconds=settings.timeout_seconds,
            db_schema=settings.db_schema,
        )
        logger.info("remote_gateway_created", extra={"backend": "postgrest"})
        return gateway

    if settings.backend == "memory":
        base = get_base_settings()
        if not base.allows_memory_backend:
            logger.warning(
                "memory_gateway_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("remote_gateway_created", extra={"backend": "memory"})
        return MemoryRemoteGateway()

    msg = f"REMOTE_STORE_BACKEND inválido: {settings.backend}"
    raise ValueError(msg)


def create_clinic_session(
    gateway: RemoteGatewayProtocol | None = None,
) -> ClinicSession:
    """Monta a ClinicSession com gateway e cache de identidade configurados."""
    identity_cache = IdentityCache(get_session_settings().identity_cache_path)
    return ClinicSession(
        gateway or create_remote_gateway(),
        identity_cache=identity_cache,
    )
