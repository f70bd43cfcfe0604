"""MutationCoordinator: toda escrita é otimista e reversível.

Cada operação vira um comando ``Mutation`` com três partes:

    apply     aplica no EntityStore, de forma síncrona
    remote    chamada assíncrona ao gateway (único ponto de suspensão)
    rollback  restaura o snapshot capturado pelo próprio apply

``execute`` aplica, aguarda o remoto e, se ele falhar, desfaz e levanta
``PersistenceError``. Não há retry nem timeout: uma chamada remota
pendurada mantém o estado otimista até resolver.

Criações recusam id já presente no store antes de aplicar; o rollback
remove exatamente o objeto inserido. Em lote (``bulk_insert``) o rollback
remove todo o lote, mesmo que o remoto tenha gravado parte dele antes de
falhar. O espelho local trata falha parcial como falha total; o remoto
pode ficar com registros a mais.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from utils.errors import PersistenceError, ValidationError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from app.domain.entity_types import EntityType
    from app.infra.stores.entity_store import EntityStore
    from app.protocols.entity_reader import EntityReaderProtocol
    from app.protocols.remote_gateway import RemoteGatewayProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Mutation:
    """Comando reversível produzido para uma única operação."""

    entity_type: EntityType
    kind: str
    entity_ids: tuple[str, ...]
    apply: Callable[[], None]
    rollback: Callable[[], None]
    remote: Callable[[], Awaitable[None]]


class MutationCoordinator:
    """Executor genérico de mutações otimistas sobre o EntityStore."""

    __slots__ = ("_gateway", "_store")

    def __init__(self, store: EntityStore, gateway: RemoteGatewayProtocol) -> None:
        self._store = store
        self._gateway = gateway

    @property
    def reader(self) -> EntityReaderProtocol:
        """Store exposto apenas para leitura."""
        return self._store

    async def execute(self, mutation: Mutation) -> None:
        """Aplica localmente, confirma no remoto ou desfaz.

        Raises:
            ValidationError: apply recusou a mutação; nada foi aplicado.
            PersistenceError: remoto falhou; o store já foi restaurado.
        """
        log_extra = {
            "entity_type": str(mutation.entity_type),
            "mutation": mutation.kind,
            "entity_count": len(mutation.entity_ids),
        }
        mutation.apply()
        logger.debug("mutation_applied", extra=log_extra)

        try:
            await mutation.remote()
        except Exception as exc:
            mutation.rollback()
            logger.warning(
                "mutation_rolled_back",
                extra={**log_extra, "error_type": type(exc).__name__},
            )
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(
                str(exc) or type(exc).__name__,
                operation=mutation.kind,
                collection=str(mutation.entity_type),
            ) from exc

        logger.info("mutation_confirmed", extra=log_extra)

    # ──────────────────────────────────────────────────────────────────
    # Fábricas de comandos
    # ──────────────────────────────────────────────────────────────────

    def insert(self, entity_type: EntityType, entity: BaseModel) -> Mutation:
        """Criação de uma entidade; rollback remove o próprio objeto inserido.

        Raises:
            ValidationError: (no ``execute``) id já existe no store; nada é aplicado.
        """
        store = self._store
        entity_id: str = entity.id  # type: ignore[attr-defined]

        def _apply() -> None:
            _ensure_new_ids(store, entity_type, (entity_id,))
            store.insert(entity_type, entity)

        def _rollback() -> None:
            store.discard(entity_type, entity)

        return Mutation(
            entity_type=entity_type,
            kind="create",
            entity_ids=(entity_id,),
            apply=_apply,
            rollback=_rollback,
            remote=lambda: self._gateway.create(entity_type, entity),
        )

    def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        changes: dict[str, Any],
    ) -> Mutation:
        """Atualização parcial; rollback devolve o valor anterior na mesma posição."""
        store = self._store
        previous: list[BaseModel] = []

        def _matches(candidate: Any) -> bool:
            return candidate.id == entity_id

        def _apply() -> None:
            original = store.find(entity_type, entity_id)
            if original is None:
                raise LookupError(f"{entity_type} ausente no store: {entity_id}")
            previous.append(original)
            store.replace_all(entity_type, _matches, original.model_copy(update=changes))

        def _rollback() -> None:
            if previous:
                store.replace_all(entity_type, _matches, previous[0])

        return Mutation(
            entity_type=entity_type,
            kind="update",
            entity_ids=(entity_id,),
            apply=_apply,
            rollback=_rollback,
            remote=lambda: self._gateway.update(entity_type, entity_id, changes),
        )

    def replace(self, entity_type: EntityType, entity: BaseModel) -> Mutation:
        """Substituição completa de uma entidade existente (mesmo id)."""
        changes = entity.model_dump(exclude={"id"})
        return self.update(entity_type, entity.id, changes)  # type: ignore[attr-defined]

    def delete(self, entity_type: EntityType, entity_id: str) -> Mutation:
        """Remoção; rollback reinsere a entidade na posição original."""
        store = self._store
        removed: list[tuple[int, BaseModel]] = []

        def _apply() -> None:
            position = store.index_of(entity_type, entity_id)
            entity = store.remove(entity_type, entity_id)
            if entity is not None and position is not None:
                removed.append((position, entity))

        def _rollback() -> None:
            for position, entity in removed:
                store.insert(entity_type, entity, position=position)

        return Mutation(
            entity_type=entity_type,
            kind="delete",
            entity_ids=(entity_id,),
            apply=_apply,
            rollback=_rollback,
            remote=lambda: self._gateway.delete(entity_type, entity_id),
        )

    def bulk_insert(
        self,
        entity_type: EntityType,
        entities: list[BaseModel],
    ) -> Mutation:
        """Criação em lote; rollback remove exatamente os objetos do lote."""
        store = self._store
        batch = list(entities)
        batch_ids = tuple(entity.id for entity in batch)  # type: ignore[attr-defined]

        def _apply() -> None:
            _ensure_new_ids(store, entity_type, batch_ids)
            for entity in batch:
                store.insert(entity_type, entity)

        def _rollback() -> None:
            for entity in batch:
                store.discard(entity_type, entity)

        return Mutation(
            entity_type=entity_type,
            kind="create_many",
            entity_ids=batch_ids,
            apply=_apply,
            rollback=_rollback,
            remote=lambda: self._gateway.create_many(entity_type, batch),
        )


def _ensure_new_ids(
    store: EntityStore,
    entity_type: EntityType,
    entity_ids: tuple[str, ...],
) -> None:
    repeated = {entity_id for entity_id in entity_ids if entity_ids.count(entity_id) > 1}
    existing = {entity_id for entity_id in entity_ids if store.find(entity_type, entity_id)}
    duplicated = sorted(repeated | existing)
    if duplicated:
        raise ValidationError(
            f"{entity_type}: id(s) já existente(s): {', '.join(duplicated)}"
        )
