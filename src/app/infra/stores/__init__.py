"""Stores locais.

Módulos disponíveis:
    - entity_store: espelho em memória de todas as collections
    - identity_cache: arquivo JSON com a identidade autenticada
"""

from __future__ import annotations

from app.infra.stores.entity_store import Entity, EntityStore, StoreEvent, StoreListener
from app.infra.stores.identity_cache import IdentityCache

__all__ = [
    "Entity",
    "EntityStore",
    "IdentityCache",
    "StoreEvent",
    "StoreListener",
]
