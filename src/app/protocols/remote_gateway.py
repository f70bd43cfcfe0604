"""Contrato do gateway para o store remoto persistente.

O gateway só traduz nomes de campos e transporta: não decide nada.
Qualquer falha de transporte ou de constraint vira ``PersistenceError``
com a mensagem do provider. Sem retry, sem cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pydantic import BaseModel

    from app.domain.entity_types import EntityType


@runtime_checkable
class RemoteGatewayProtocol(Protocol):
    """Operações CRUD sobre collections remotas nomeadas."""

    async def fetch_all(self, entity_type: EntityType) -> list[BaseModel]:
        """Lê a collection remota inteira, já convertida para entidades."""
        ...

    async def create(self, entity_type: EntityType, entity: BaseModel) -> None:
        """Cria um registro remoto."""
        ...

    async def create_many(
        self,
        entity_type: EntityType,
        entities: list[BaseModel],
    ) -> None:
        """Cria vários registros em uma única chamada."""
        ...

    async def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        changes: dict[str, Any],
    ) -> None:
        """Atualização parcial; ``changes`` usa nomes de campo locais."""
        ...

    async def delete(self, entity_type: EntityType, entity_id: str) -> None:
        """Remove o registro remoto pelo id."""
        ...
