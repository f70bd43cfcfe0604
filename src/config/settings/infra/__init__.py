"""Agregador de settings de infraestrutura.

Re-exporta as settings de infraestrutura para uso externo.
"""

from __future__ import annotations

from config.settings.infra.remote_store import (
    RemoteStoreBackend,
    RemoteStoreSettings,
    get_remote_store_settings,
)

__all__ = [
    "RemoteStoreBackend",
    "RemoteStoreSettings",
    "get_remote_store_settings",
]
