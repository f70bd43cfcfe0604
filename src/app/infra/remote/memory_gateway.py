"""Gateway remoto em memória: apenas para desenvolvimento e testes.

Guarda os registros já no formato remoto (nomes e codecs da tabela de
schemas), de modo que a tradução é exercitada como no gateway real.
Permite injetar falhas para testar o rollback otimista.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.infra.remote.schema import SCHEMAS, EntitySchema
from app.protocols.remote_gateway import RemoteGatewayProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from app.domain.entity_types import EntityType

CallHook = Callable[[str, "EntityType"], Awaitable[None]]


@dataclass
class _PlannedFailure:
    message: str
    # create_many: quantos registros gravar antes de falhar
    write_before_failure: int = 0


class MemoryRemoteGateway(RemoteGatewayProtocol):
    """Store remoto simulado em memória."""

    def __init__(
        self,
        schemas: dict[EntityType, EntitySchema] | None = None,
        *,
        latency_seconds: float = 0.0,
        on_call: CallHook | None = None,
    ) -> None:
        self._schemas = schemas or SCHEMAS
        self._rows: dict[str, list[dict[str, Any]]] = {
            schema.collection: [] for schema in self._schemas.values()
        }
        self._failures: dict[str, list[_PlannedFailure]] = {}
        self._latency_seconds = latency_seconds
        self._on_call = on_call
        self.calls: list[tuple[str, str]] = []

    # ──────────────────────────────────────────────────────────────────
    # Controle (testes)
    # ──────────────────────────────────────────────────────────────────

    def fail_next(
        self,
        operation: str,
        message: str = "simulated failure",
        *,
        write_before_failure: int = 0,
    ) -> None:
        """Agenda falha para a próxima chamada de ``operation``."""
        self._failures.setdefault(operation, []).append(
            _PlannedFailure(message=message, write_before_failure=write_before_failure)
        )

    def rows(self, entity_type: EntityType) -> list[dict[str, Any]]:
        """Registros remotos crus (cópia)."""
        return copy.deepcopy(self._rows[self._schemas[entity_type].collection])

    def seed(self, entity_type: EntityType, entities: list[BaseModel]) -> None:
        """Popula a collection remota sem passar pelo fluxo otimista."""
        schema = self._schemas[entity_type]
        self._rows[schema.collection].extend(schema.to_remote(e) for e in entities)

    # ──────────────────────────────────────────────────────────────────
    # RemoteGatewayProtocol
    # ──────────────────────────────────────────────────────────────────

    async def fetch_all(self, entity_type: EntityType) -> list[BaseModel]:
        schema = await self._begin("fetch_all", entity_type)
        self._raise_if_planned("fetch_all", schema)
        return [schema.from_remote(row) for row in self._rows[schema.collection]]

    async def create(self, entity_type: EntityType, entity: BaseModel) -> None:
        schema = await self._begin("create", entity_type)
        self._raise_if_planned("create", schema)
        row = schema.to_remote(entity)
        self._ensure_unique_ids(schema, [row])
        self._rows[schema.collection].append(row)

    async def create_many(
        self,
        entity_type: EntityType,
        entities: list[BaseModel],
    ) -> None:
        schema = await self._begin("create_many", entity_type)
        rows = [schema.to_remote(entity) for entity in entities]
        failure = self._pop_failure("create_many")
        if failure is not None:
            # Escrita parcial antes da falha, como num transporte que cai no meio
            self._rows[schema.collection].extend(rows[: failure.write_before_failure])
            raise PersistenceError(
                failure.message,
                operation="create_many",
                collection=schema.collection,
            )
        self._ensure_unique_ids(schema, rows)
        self._rows[schema.collection].extend(rows)

    async def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        changes: dict[str, Any],
    ) -> None:
        schema = await self._begin("update", entity_type)
        self._raise_if_planned("update", schema)
        patch = schema.to_remote_partial(changes)
        for row in self._rows[schema.collection]:
            if row.get("id") == entity_id:
                row.update(patch)

    async def delete(self, entity_type: EntityType, entity_id: str) -> None:
        schema = await self._begin("delete", entity_type)
        self._raise_if_planned("delete", schema)
        self._rows[schema.collection] = [
            row for row in self._rows[schema.collection] if row.get("id") != entity_id
        ]

    # ──────────────────────────────────────────────────────────────────
    # Internos
    # ──────────────────────────────────────────────────────────────────

    async def _begin(self, operation: str, entity_type: EntityType) -> EntitySchema:
        schema = self._schemas[entity_type]
        self.calls.append((operation, schema.collection))
        if self._on_call is not None:
            await self._on_call(operation, entity_type)
        if self._latency_seconds:
            await asyncio.sleep(self._latency_seconds)
        return schema

    def _pop_failure(self, operation: str) -> _PlannedFailure | None:
        planned = self._failures.get(operation)
        if not planned:
            return None
        return planned.pop(0)

    def _raise_if_planned(self, operation: str, schema: EntitySchema) -> None:
        failure = self._pop_failure(operation)
        if failure is not None:
            raise PersistenceError(
                failure.message,
                operation=operation,
                collection=schema.collection,
            )

    def _ensure_unique_ids(self, schema: EntitySchema, rows: list[dict[str, Any]]) -> None:
        existing = {row.get("id") for row in self._rows[schema.collection]}
        for row in rows:
            if row.get("id") in existing:
                raise PersistenceError(
                    f'duplicate key value violates unique constraint "{schema.collection}_pkey"',
                    operation="create",
                    collection=schema.collection,
                )
            existing.add(row.get("id"))
