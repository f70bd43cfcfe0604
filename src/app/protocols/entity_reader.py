"""Contrato de leitura do EntityStore entregue aos serviços."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.entity_types import EntityType


class EntityReaderProtocol(Protocol):
    """Acesso somente leitura às collections locais."""

    def get(self, entity_type: EntityType) -> tuple[Any, ...]:
        """Collection inteira, na ordem atual."""
        ...

    def find(self, entity_type: EntityType, entity_id: str) -> Any | None:
        """Entidade pelo id, ou None."""
        ...
