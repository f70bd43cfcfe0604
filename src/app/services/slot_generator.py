"""Geração determinística de horários agendáveis.

``generate_slots`` é uma função pura: mesma disponibilidade, mesmos
agendamentos e mesmo ``now`` produzem exatamente a mesma lista, na
mesma ordem. Não guarda estado entre chamadas.

O fim da janela é exclusivo: 09:00-10:00 em passos de 30 minutos gera
09:00 e 09:30.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from app.domain.entity_types import EntityType
from app.domain.scheduling import Appointment, AvailabilityWindow, day_of_week_of

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from app.protocols.entity_reader import EntityReaderProtocol


def window_times(window: AvailabilityWindow, on: date) -> list[time]:
    """Candidatos da janela: do início, em passos da duração, antes do fim."""
    if window.slot_duration_minutes <= 0:
        return []
    step = timedelta(minutes=window.slot_duration_minutes)
    cursor = datetime.combine(on, window.start_time)
    end = datetime.combine(on, window.end_time)
    times: list[time] = []
    while cursor < end:
        times.append(cursor.time())
        cursor += step
    return times


def generate_slots(
    provider_id: str,
    on: date,
    *,
    availability: Iterable[AvailabilityWindow],
    appointments: Iterable[Appointment],
    now: datetime | None = None,
) -> list[time]:
    """Horários livres do profissional na data, em ordem crescente.

    Args:
        provider_id: Profissional consultado
        on: Data do calendário
        availability: Todas as janelas conhecidas
        appointments: Todos os agendamentos conhecidos
        now: Relógio atual; se a data for hoje, horários passados saem

    Returns:
        Lista de horários (vazia se não houver janela no dia)
    """
    weekday = day_of_week_of(on)
    windows = [
        window
        for window in availability
        if window.provider_id == provider_id and window.day_of_week == weekday
    ]
    if not windows:
        return []

    taken = {
        appointment.time
        for appointment in appointments
        if appointment.holds_slot
        and appointment.provider_id == provider_id
        and appointment.date == on
    }

    candidates: set[time] = set()
    for window in windows:
        candidates.update(window_times(window, on))

    slots = (candidate for candidate in candidates if candidate not in taken)
    if now is not None and now.date() == on:
        current = now.time().replace(tzinfo=None)
        slots = (candidate for candidate in slots if candidate >= current)
    return sorted(slots)


class SlotGenerator:
    """Liga ``generate_slots`` ao estado atual do EntityStore e a um relógio."""

    __slots__ = ("_clock", "_reader")

    def __init__(
        self,
        reader: EntityReaderProtocol,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._reader = reader
        self._clock = clock or datetime.now

    def list_slots(self, provider_id: str, on: date) -> list[time]:
        return generate_slots(
            provider_id,
            on,
            availability=self._reader.get(EntityType.AVAILABILITY),
            appointments=self._reader.get(EntityType.APPOINTMENTS),
            now=self._clock(),
        )

    def is_offered(self, provider_id: str, on: date, at: time) -> bool:
        return at in self.list_slots(provider_id, on)
