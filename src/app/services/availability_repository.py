"""Repositório de janelas de disponibilidade.

Dono da regra de sobreposição: duas janelas do mesmo profissional e
dia da semana não podem compartilhar nenhum instante. A checagem roda
antes do MutationCoordinator; uma janela inválida nunca toca o store.

A exclusão é em dois passos: ``delete`` só calcula os agendamentos
futuros afetados e devolve um ``PendingDeletion``; quem chama decide e
então executa ``confirm()``. Agendamentos afetados não são alterados.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from app.domain.entity_types import EntityType
from app.domain.scheduling import Appointment, AvailabilityWindow, day_of_week_of
from utils.errors import NotFoundError, OverlapError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.services.mutation_coordinator import MutationCoordinator

logger = logging.getLogger(__name__)


def validate_window(window: AvailabilityWindow) -> None:
    """Validação lógica de uma janela.

    Dia da semana e duração já são limitados pelo próprio modelo.

    Raises:
        ValidationError: início >= fim.
    """
    if window.start_time >= window.end_time:
        raise ValidationError(
            f"Início deve ser anterior ao fim: {window.start_time:%H:%M} >= "
            f"{window.end_time:%H:%M}"
        )


def find_overlaps(
    window: AvailabilityWindow,
    existing: tuple[AvailabilityWindow, ...] | list[AvailabilityWindow],
    *,
    exclude_ids: frozenset[str] = frozenset(),
) -> list[AvailabilityWindow]:
    """Janelas do mesmo (profissional, dia) que se sobrepõem a ``window``.

    Só ``exclude_ids`` (a janela em edição) fica fora da comparação.
    """
    return [
        other
        for other in existing
        if other.id not in exclude_ids
        and other.provider_id == window.provider_id
        and other.day_of_week == window.day_of_week
        and window.overlaps(other)
    ]


def affected_appointments(
    window: AvailabilityWindow,
    appointments: tuple[Appointment, ...] | list[Appointment],
    *,
    now: datetime,
) -> list[Appointment]:
    """Agendamentos não cancelados, ainda por acontecer, dentro da faixa da janela."""
    return sorted(
        (
            appointment
            for appointment in appointments
            if appointment.holds_slot
            and appointment.provider_id == window.provider_id
            and (appointment.date, appointment.time) >= (now.date(), now.time())
            and day_of_week_of(appointment.date) == window.day_of_week
            and window.covers(appointment.time)
        ),
        key=lambda appointment: (appointment.date, appointment.time),
    )


@dataclass(frozen=True)
class PendingDeletion:
    """Exclusão calculada e ainda não executada.

    Attributes:
        window: Janela que será removida
        affected_appointments: Agendamentos futuros dentro da faixa (aviso)
    """

    window: AvailabilityWindow
    affected_appointments: tuple[Appointment, ...]
    _confirm: Callable[[], Awaitable[None]]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.affected_appointments)

    async def confirm(self) -> None:
        """Executa a exclusão pelo MutationCoordinator.

        Raises:
            NotFoundError: a janela saiu do store desde o cálculo.
            PersistenceError: remoto falhou; a janela foi restaurada.
        """
        await self._confirm()


class AvailabilityRepository:
    """CRUD de janelas de disponibilidade sobre o MutationCoordinator."""

    __slots__ = ("_clock", "_coordinator")

    def __init__(
        self,
        coordinator: MutationCoordinator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._clock = clock or datetime.now

    def all(self) -> tuple[AvailabilityWindow, ...]:
        return self._coordinator.reader.get(EntityType.AVAILABILITY)

    def get(self, window_id: str) -> AvailabilityWindow | None:
        return self._coordinator.reader.find(EntityType.AVAILABILITY, window_id)

    def windows_for(
        self,
        provider_id: str,
        day_of_week: int | None = None,
    ) -> list[AvailabilityWindow]:
        """Janelas do profissional ordenadas por dia e início."""
        return sorted(
            (
                window
                for window in self.all()
                if window.provider_id == provider_id
                and (day_of_week is None or window.day_of_week == day_of_week)
            ),
            key=lambda window: (window.day_of_week, window.start_time),
        )

    async def save(self, window: AvailabilityWindow) -> None:
        """Cria a janela, ou substitui a de mesmo id (edição).

        Raises:
            ValidationError: início >= fim.
            OverlapError: sobreposição com outra janela do mesmo dia.
            PersistenceError: remoto falhou; store restaurado.
        """
        coordinator = self._coordinator
        if self.get(window.id) is None:
            self._check(window)
            mutation = coordinator.insert(EntityType.AVAILABILITY, window)
        else:
            self._check(window, exclude_ids=frozenset({window.id}))
            mutation = coordinator.replace(EntityType.AVAILABILITY, window)
        await coordinator.execute(mutation)
        logger.info(
            "availability_saved",
            extra={"window_id": window.id, "day_of_week": window.day_of_week},
        )

    async def replace(self, window_id: str, window: AvailabilityWindow) -> None:
        """Edição com troca de id: exclui a antiga e cria a nova.

        As duas janelas são validadas juntas antes de qualquer mutação. Se
        a criação falhar, a exclusão já confirmada permanece; store local e
        remoto continuam coerentes.

        Raises:
            NotFoundError: ``window_id`` ausente no store local.
            ValidationError: o novo id já pertence a outra janela.
            OverlapError: sobreposição com outra janela do mesmo dia.
        """
        if window_id == window.id:
            await self.save(window)
            return
        if self.get(window_id) is None:
            raise NotFoundError("AvailabilityWindow", window_id)
        if self.get(window.id) is not None:
            raise ValidationError(f"Já existe janela com id {window.id}")
        self._check(window, exclude_ids=frozenset({window_id}))
        coordinator = self._coordinator
        await coordinator.execute(coordinator.delete(EntityType.AVAILABILITY, window_id))
        await coordinator.execute(coordinator.insert(EntityType.AVAILABILITY, window))

    def delete(self, window_id: str) -> PendingDeletion:
        """Calcula a exclusão e os agendamentos futuros afetados.

        Raises:
            NotFoundError: id ausente no store local.
        """
        window = self.get(window_id)
        if window is None:
            raise NotFoundError("AvailabilityWindow", window_id)
        affected = affected_appointments(
            window,
            self._coordinator.reader.get(EntityType.APPOINTMENTS),
            now=self._clock(),
        )
        if affected:
            logger.info(
                "availability_delete_has_dependents",
                extra={"window_id": window_id, "affected_count": len(affected)},
            )
        return PendingDeletion(
            window=window,
            affected_appointments=tuple(affected),
            _confirm=lambda: self._confirm_delete(window_id),
        )

    async def _confirm_delete(self, window_id: str) -> None:
        if self.get(window_id) is None:
            raise NotFoundError("AvailabilityWindow", window_id)
        coordinator = self._coordinator
        await coordinator.execute(coordinator.delete(EntityType.AVAILABILITY, window_id))
        logger.info("availability_deleted", extra={"window_id": window_id})

    def _check(
        self,
        window: AvailabilityWindow,
        exclude_ids: frozenset[str] = frozenset(),
    ) -> None:
        validate_window(window)
        overlaps = find_overlaps(window, self.all(), exclude_ids=exclude_ids)
        if overlaps:
            ids = tuple(other.id for other in overlaps)
            raise OverlapError(
                f"Janela {window.start_time:%H:%M}-{window.end_time:%H:%M} sobrepõe "
                f"{len(ids)} janela(s) existente(s)",
                conflicting_ids=ids,
            )
