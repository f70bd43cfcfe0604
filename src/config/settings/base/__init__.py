"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.session import (
    DEFAULT_IDENTITY_CACHE_PATH,
    SessionSettings,
    get_session_settings,
)

__all__ = [
    "DEFAULT_IDENTITY_CACHE_PATH",
    "DEFAULT_SERVICE_NAME",
    # Core
    "BaseSettings",
    "Environment",
    # Session
    "SessionSettings",
    "get_base_settings",
    "get_session_settings",
]
