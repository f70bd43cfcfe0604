"""Exceções de domínio do agendamento e de falhas de infraestrutura."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class PersistenceError(InfrastructureError):
    """Store remoto rejeitou ou não concluiu uma leitura/escrita.

    Attributes:
        operation: Operação remota que falhou (create, update, delete, fetch_all)
        collection: Collection remota envolvida
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        collection: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.collection = collection


class SchedulingError(Exception):
    """Base para erros de regra de negócio do agendamento."""


class ValidationError(SchedulingError):
    """Entrada malformada ou logicamente inconsistente.

    Sempre detectada antes de qualquer mutação no EntityStore.
    """


class OverlapError(ValidationError):
    """Duas janelas de disponibilidade do mesmo dia se sobrepõem."""

    def __init__(self, message: str, *, conflicting_ids: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.conflicting_ids = conflicting_ids


class ConflictError(SchedulingError):
    """Unicidade de slot violada no momento do commit."""


class NotFoundError(SchedulingError):
    """Operação referenciou um id ausente no estado local."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(f"{entity_type} não encontrado: {entity_id}")
        self.entity_type = entity_type
        self.entity_id = entity_id
