"""Gateways para o store remoto persistente.

Módulos disponíveis:
    - schema: tabela declarativa de mapeamento local ↔ remoto
    - postgrest_gateway: Supabase/PostgREST via httpx
    - memory_gateway: store remoto simulado para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.remote.memory_gateway import MemoryRemoteGateway
from app.infra.remote.postgrest_gateway import PostgrestRemoteGateway
from app.infra.remote.schema import SCHEMAS, EntitySchema, FieldMap, schema_for

__all__ = [
    "SCHEMAS",
    "EntitySchema",
    "FieldMap",
    "MemoryRemoteGateway",
    "PostgrestRemoteGateway",
    "schema_for",
]
