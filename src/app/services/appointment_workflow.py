"""Fluxo de agendamentos: marcação, transições de status e sinais vitais.

Regras:
- Um horário só pode ser marcado se ``generate_slots`` o oferece no
  momento do commit (revalidado aqui, não só na exibição).
- Unicidade de slot: no máximo um agendamento não cancelado por
  (profissional, data, horário).
- Status só muda pelas transições do módulo ``fsm``.

Toda escrita passa pelo MutationCoordinator. A aplicação local é
síncrona; uma segunda marcação para o mesmo slot, disparada enquanto a
primeira aguarda o remoto, já enxerga o slot ocupado.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

from app.domain.entity_types import EntityType
from app.domain.scheduling import Appointment, VisitType, day_of_week_of
from fsm import AppointmentStateMachine, AppointmentStatus
from utils.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.reference import VitalSign
    from app.services.availability_repository import AvailabilityRepository
    from app.services.mutation_coordinator import MutationCoordinator
    from app.services.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

# Primeira aferição de sinais vitais inicia o atendimento a partir destes estados
_VITALS_START_FROM = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.CHECKED_IN})


def _new_id() -> str:
    return uuid.uuid4().hex


class AppointmentWorkflow:
    """Dono da máquina de estados e da unicidade de slot."""

    __slots__ = ("_availability", "_clock", "_coordinator", "_id_factory", "_slots")

    def __init__(
        self,
        coordinator: MutationCoordinator,
        availability: AvailabilityRepository,
        slots: SlotGenerator,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._availability = availability
        self._slots = slots
        self._clock = clock or datetime.now
        self._id_factory = id_factory or _new_id

    def get(self, appointment_id: str) -> Appointment | None:
        return self._coordinator.reader.find(EntityType.APPOINTMENTS, appointment_id)

    def for_provider(self, provider_id: str, on: date) -> list[Appointment]:
        """Agendamentos do profissional na data, por horário."""
        return sorted(
            (
                appointment
                for appointment in self._coordinator.reader.get(EntityType.APPOINTMENTS)
                if appointment.provider_id == provider_id and appointment.date == on
            ),
            key=lambda appointment: appointment.time,
        )

    # ──────────────────────────────────────────────────────────────────
    # Marcação
    # ──────────────────────────────────────────────────────────────────

    async def book(
        self,
        *,
        patient_id: str,
        provider_id: str,
        department_id: str,
        on: date,
        at: time,
        visit_type: VisitType | str = VisitType.NEW_VISIT,
        symptoms: str | None = None,
        appointment_id: str | None = None,
    ) -> Appointment:
        """Marca um agendamento em status Scheduled.

        Raises:
            ValidationError: dados ausentes, id já usado, sem janela no dia ou
                horário não ofertado.
            ConflictError: slot já ocupado por agendamento não cancelado.
            PersistenceError: remoto falhou; store restaurado.
        """
        if not patient_id or not provider_id or not department_id:
            raise ValidationError("patient_id, provider_id e department_id são obrigatórios")
        try:
            visit = VisitType(visit_type)
        except ValueError as exc:
            raise ValidationError(f"visit_type inválido: {visit_type}") from exc
        if appointment_id and self.get(appointment_id) is not None:
            raise ValidationError(f"Já existe agendamento com id {appointment_id}")

        windows = self._availability.windows_for(provider_id, day_of_week_of(on))
        if not windows:
            raise ValidationError(
                f"Profissional sem disponibilidade em {on.isoformat()}"
            )

        if not self._slots.is_offered(provider_id, on, at):
            if self._slot_holder(provider_id, on, at) is not None:
                raise ConflictError(f"Horário {at:%H:%M} de {on.isoformat()} já está ocupado")
            raise ValidationError(f"Horário {at:%H:%M} não está disponível em {on.isoformat()}")

        # Revalida unicidade imediatamente antes de aplicar
        if self._slot_holder(provider_id, on, at) is not None:
            raise ConflictError(f"Horário {at:%H:%M} de {on.isoformat()} já está ocupado")

        appointment = Appointment(
            id=appointment_id or self._id_factory(),
            patient_id=patient_id,
            provider_id=provider_id,
            department_id=department_id,
            date=on,
            time=at,
            status=AppointmentStatus.SCHEDULED,
            visit_type=visit,
            symptoms=symptoms or None,
        )
        coordinator = self._coordinator
        await coordinator.execute(coordinator.insert(EntityType.APPOINTMENTS, appointment))
        logger.info(
            "appointment_booked",
            extra={"appointment_id": appointment.id, "date": on.isoformat()},
        )
        return appointment

    def _slot_holder(self, provider_id: str, on: date, at: time) -> Appointment | None:
        for appointment in self._coordinator.reader.get(EntityType.APPOINTMENTS):
            if appointment.occupies(provider_id, on, at):
                return appointment
        return None

    # ──────────────────────────────────────────────────────────────────
    # Transições
    # ──────────────────────────────────────────────────────────────────

    async def transition(
        self,
        appointment_id: str,
        target: AppointmentStatus | str,
        *,
        trigger: str = "manual",
    ) -> Appointment:
        """Aplica uma transição de status permitida pela FSM.

        Raises:
            NotFoundError: agendamento ausente no store local.
            ValidationError: transição não permitida; status inalterado.
            PersistenceError: remoto falhou; status restaurado.
        """
        appointment = self.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        try:
            target_status = AppointmentStatus(target)
        except ValueError as exc:
            raise ValidationError(f"Status desconhecido: {target}") from exc

        machine = AppointmentStateMachine(appointment.status, appointment_id=appointment_id)
        result = machine.transition(target_status, trigger=trigger)
        if not result.success:
            raise ValidationError(result.error_reason or "Transição inválida")

        changes: dict[str, Any] = {"status": target_status}
        now = self._clock()
        if target_status == AppointmentStatus.CHECKED_IN:
            changes["check_in_time"] = now
        elif target_status == AppointmentStatus.COMPLETED:
            changes["check_out_time"] = now

        coordinator = self._coordinator
        await coordinator.execute(
            coordinator.update(EntityType.APPOINTMENTS, appointment_id, changes)
        )
        if result.transition is not None:
            logger.info(
                "appointment_transitioned",
                extra={"appointment_id": appointment_id, **result.transition.to_log_dict()},
            )
        return self.get(appointment_id) or appointment.model_copy(update=changes)

    async def check_in(self, appointment_id: str) -> Appointment:
        return await self.transition(
            appointment_id, AppointmentStatus.CHECKED_IN, trigger="check_in"
        )

    async def start_encounter(self, appointment_id: str) -> Appointment:
        return await self.transition(
            appointment_id, AppointmentStatus.IN_CONSULTATION, trigger="encounter_start"
        )

    async def complete(self, appointment_id: str) -> Appointment:
        return await self.transition(
            appointment_id, AppointmentStatus.COMPLETED, trigger="encounter_end"
        )

    async def cancel(self, appointment_id: str) -> Appointment:
        """Cancela; o registro permanece e o slot volta a ser ofertado."""
        return await self.transition(
            appointment_id, AppointmentStatus.CANCELLED, trigger="cancel"
        )

    async def record_vitals(self, vital_sign: VitalSign) -> Appointment:
        """Grava sinais vitais; a primeira aferição inicia o atendimento.

        Raises:
            NotFoundError: agendamento ausente no store local.
            ValidationError: agendamento já encerrado ou cancelado, ou id da
                aferição já registrado.
            PersistenceError: remoto falhou na gravação ou na transição.
        """
        appointment = self.get(vital_sign.appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", vital_sign.appointment_id)
        if appointment.status not in _VITALS_START_FROM | {AppointmentStatus.IN_CONSULTATION}:
            raise ValidationError(
                f"Agendamento em {appointment.status} não aceita sinais vitais"
            )
        if self._coordinator.reader.find(EntityType.VITAL_SIGNS, vital_sign.id) is not None:
            raise ValidationError(f"Já existe aferição com id {vital_sign.id}")

        coordinator = self._coordinator
        await coordinator.execute(coordinator.insert(EntityType.VITAL_SIGNS, vital_sign))

        if appointment.status in _VITALS_START_FROM:
            return await self.transition(
                appointment.id,
                AppointmentStatus.IN_CONSULTATION,
                trigger="vitals_recorded",
            )
        return appointment
