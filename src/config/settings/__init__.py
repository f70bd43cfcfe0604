"""Agregador de settings do medicore-scheduling.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_IDENTITY_CACHE_PATH,
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    SessionSettings,
    get_base_settings,
    get_session_settings,
)

# Infrastructure settings
from config.settings.infra import (
    RemoteStoreBackend,
    RemoteStoreSettings,
    get_remote_store_settings,
)

__all__ = [
    # Constants
    "DEFAULT_IDENTITY_CACHE_PATH",
    "DEFAULT_SERVICE_NAME",
    # Base
    "BaseSettings",
    "Environment",
    # Infrastructure
    "RemoteStoreBackend",
    "RemoteStoreSettings",
    "SessionSettings",
    "get_base_settings",
    "get_remote_store_settings",
    "get_session_settings",
]
