"""Modelos de domínio da agenda: janelas de disponibilidade e agendamentos.

Entidades são imutáveis. Toda alteração gera uma nova instância via
``model_copy(update=...)``; assim um snapshot é apenas uma referência
e a comparação entre estados é estrutural.

Limites estruturais (dia da semana 0-6, duração positiva) são checados
pelo Pydantic, inclusive ao decodificar registros remotos. Invariantes de
negócio (início < fim, sobreposição, unicidade de slot) ficam nos
serviços, que levantam ``ValidationError`` do domínio antes de qualquer
mutação.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime, time  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from fsm.states import SLOT_HOLDING_STATES, AppointmentStatus

# 0 = domingo
DAYS_OF_WEEK = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def day_of_week_of(value: date) -> int:
    """Converte ``date.weekday()`` (segunda=0) para a convenção domingo=0."""
    return (value.weekday() + 1) % 7


class VisitType(StrEnum):
    """Tipo de visita informado na marcação."""

    NEW_VISIT = "New Visit"
    FOLLOW_UP = "Follow-up"


class AvailabilityWindow(BaseModel):
    """Faixa semanal recorrente em que um profissional pode ser agendado."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    provider_id: str = Field(..., min_length=1)
    day_of_week: int = Field(..., ge=0, le=6, description="0 = domingo ... 6 = sábado.")
    start_time: time
    end_time: time
    slot_duration_minutes: int = Field(default=30, gt=0)

    def overlaps(self, other: AvailabilityWindow) -> bool:
        """Intervalos semiabertos [inicio, fim) se sobrepõem."""
        return max(self.start_time, other.start_time) < min(self.end_time, other.end_time)

    def covers(self, moment: time) -> bool:
        return self.start_time <= moment < self.end_time


class Appointment(BaseModel):
    """Agendamento de um paciente com um profissional."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    patient_id: str
    provider_id: str
    department_id: str
    date: dt.date
    time: dt.time
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    visit_type: VisitType = VisitType.NEW_VISIT
    symptoms: str | None = None
    notes: str | None = None
    payment_mode: str | None = None
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None

    @property
    def holds_slot(self) -> bool:
        """Agendamentos não cancelados ocupam o horário."""
        return self.status in SLOT_HOLDING_STATES

    def occupies(self, provider_id: str, on: date, at: time) -> bool:
        return (
            self.holds_slot
            and self.provider_id == provider_id
            and self.date == on
            and self.time == at
        )


__all__ = [
    "DAYS_OF_WEEK",
    "Appointment",
    "AvailabilityWindow",
    "VisitType",
    "day_of_week_of",
]
