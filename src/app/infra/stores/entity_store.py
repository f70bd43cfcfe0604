"""EntityStore: espelho local de todas as collections de entidades.

Container puro: mantém uma lista ordenada por tipo, sem
nenhuma regra de negócio. Quem escreve aqui é sempre o
MutationCoordinator; serviços recebem o store apenas para leitura.

Cada mutação notifica os assinantes (ex: refresh de tela). Falha de um
assinante é registrada em log e não interrompe a mutação.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from app.domain.entity_types import EntityType

logger = logging.getLogger(__name__)

StoreAction = Literal["insert", "replace", "remove", "load", "clear"]


class Entity(Protocol):
    """Qualquer entidade com identificador único."""

    @property
    def id(self) -> str: ...


@dataclass(frozen=True, slots=True)
class StoreEvent:
    """Notificação emitida a cada mutação do store."""

    entity_type: EntityType | None
    action: StoreAction
    entity_id: str | None = None


StoreListener = Callable[[StoreEvent], None]


class EntityStore:
    """Collections locais ordenadas, uma por EntityType."""

    __slots__ = ("_collections", "_listeners")

    def __init__(self) -> None:
        self._collections: dict[EntityType, list[Entity]] = {
            entity_type: [] for entity_type in EntityType
        }
        self._listeners: list[StoreListener] = []

    # ──────────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────────

    def get(self, entity_type: EntityType) -> tuple[Entity, ...]:
        """Retorna cópia imutável da collection, na ordem atual."""
        return tuple(self._collections[entity_type])

    def find(self, entity_type: EntityType, entity_id: str) -> Entity | None:
        for entity in self._collections[entity_type]:
            if entity.id == entity_id:
                return entity
        return None

    def index_of(self, entity_type: EntityType, entity_id: str) -> int | None:
        for index, entity in enumerate(self._collections[entity_type]):
            if entity.id == entity_id:
                return index
        return None

    # ──────────────────────────────────────────────────────────────────
    # Escrita (uso exclusivo do MutationCoordinator)
    # ──────────────────────────────────────────────────────────────────

    def insert(
        self,
        entity_type: EntityType,
        entity: Entity,
        position: int | None = None,
    ) -> None:
        """Insere no fim, ou em ``position`` para restaurar a ordem original."""
        collection = self._collections[entity_type]
        if position is None or position >= len(collection):
            collection.append(entity)
        else:
            collection.insert(max(position, 0), entity)
        self._notify(StoreEvent(entity_type, "insert", entity.id))

    def replace_all(
        self,
        entity_type: EntityType,
        predicate: Callable[[Entity], bool],
        entity: Entity,
    ) -> int:
        """Substitui toda entidade que satisfaz ``predicate``. Retorna o total."""
        collection = self._collections[entity_type]
        replaced = 0
        for index, current in enumerate(collection):
            if predicate(current):
                collection[index] = entity
                replaced += 1
        if replaced:
            self._notify(StoreEvent(entity_type, "replace", entity.id))
        return replaced

    def remove(self, entity_type: EntityType, entity_id: str) -> Entity | None:
        """Remove a entidade pelo id. Retorna a removida, ou None."""
        index = self.index_of(entity_type, entity_id)
        if index is None:
            return None
        removed = self._collections[entity_type].pop(index)
        self._notify(StoreEvent(entity_type, "remove", entity_id))
        return removed

    def discard(self, entity_type: EntityType, entity: Entity) -> bool:
        """Remove exatamente ``entity`` (por identidade), mesmo com ids repetidos."""
        collection = self._collections[entity_type]
        for index, current in enumerate(collection):
            if current is entity:
                del collection[index]
                self._notify(StoreEvent(entity_type, "remove", entity.id))
                return True
        return False

    def load(self, entity_type: EntityType, entities: list[Entity]) -> None:
        """Substitui a collection inteira (carga inicial a partir do remoto)."""
        self._collections[entity_type] = list(entities)
        self._notify(StoreEvent(entity_type, "load"))

    def clear(self) -> None:
        """Esvazia todas as collections (fim da sessão autenticada)."""
        for entity_type in EntityType:
            self._collections[entity_type] = []
        self._notify(StoreEvent(None, "clear"))

    # ──────────────────────────────────────────────────────────────────
    # Assinaturas
    # ──────────────────────────────────────────────────────────────────

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Registra listener; retorna função que cancela a assinatura."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                logger.warning(
                    "store_listener_failed",
                    extra={
                        "entity_type": event.entity_type,
                        "action": event.action,
                        "error_type": type(exc).__name__,
                    },
                )
