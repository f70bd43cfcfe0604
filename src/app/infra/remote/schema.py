"""Tabela declarativa de mapeamento local ↔ remoto por entidade.

Cada entidade declara a collection remota e a lista de pares
(campo local, campo remoto, codec opcional). O gateway consome a tabela
de forma genérica; não existe função de tradução específica por entidade.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel

from app.domain.entity_types import EntityType
from app.domain.reference import (
    Department,
    Employee,
    MasterEntity,
    Patient,
    ServiceCentre,
    Unit,
    VitalSign,
)
from app.domain.scheduling import Appointment, AvailabilityWindow


@dataclass(frozen=True, slots=True)
class Codec:
    """Par de funções de conversão; ``None`` sempre passa direto."""

    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]

    def to_remote(self, value: Any) -> Any:
        return None if value is None else self.encode(value)

    def from_remote(self, value: Any) -> Any:
        return None if value is None else self.decode(value)


def _decode_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    # Postgres devolve "HH:MM:SS"; a aplicação grava "HH:MM"
    parts = str(value).split(":")
    return time(int(parts[0]), int(parts[1]))


def _decode_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _decode_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


TIME_CODEC = Codec(encode=lambda value: value.strftime("%H:%M"), decode=_decode_time)
DATE_CODEC = Codec(encode=lambda value: value.isoformat(), decode=_decode_date)
DATETIME_CODEC = Codec(encode=lambda value: value.isoformat(), decode=_decode_datetime)
ENUM_CODEC = Codec(
    encode=lambda value: value.value if isinstance(value, Enum) else value,
    decode=lambda value: value,
)


@dataclass(frozen=True, slots=True)
class FieldMap:
    """Par de nomes (local, remoto) e codec opcional."""

    local: str
    remote: str
    codec: Codec | None = None


@dataclass(frozen=True)
class EntitySchema:
    """Schema de uma entidade: collection remota, modelo e campos."""

    collection: str
    model: type[BaseModel]
    fields: tuple[FieldMap, ...]

    def _by_local(self) -> dict[str, FieldMap]:
        return {field.local: field for field in self.fields}

    def to_remote(self, entity: BaseModel) -> dict[str, Any]:
        """Converte entidade completa para o registro remoto."""
        values = entity.model_dump()
        return {
            field.remote: _encode(field, values.get(field.local))
            for field in self.fields
        }

    def to_remote_partial(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Converte alteração parcial; campo desconhecido é erro de programação."""
        by_local = self._by_local()
        unknown = sorted(set(changes) - set(by_local))
        if unknown:
            raise ValueError(
                f"Campos sem mapeamento em {self.collection}: {', '.join(unknown)}"
            )
        return {
            by_local[name].remote: _encode(by_local[name], value)
            for name, value in changes.items()
        }

    def from_remote(self, row: dict[str, Any]) -> BaseModel:
        """Converte registro remoto em entidade. Campos ausentes usam o default."""
        values: dict[str, Any] = {}
        for field in self.fields:
            if field.remote not in row:
                continue
            raw = row[field.remote]
            values[field.local] = field.codec.from_remote(raw) if field.codec else raw
        return self.model.model_validate(values)


def _encode(field: FieldMap, value: Any) -> Any:
    return field.codec.to_remote(value) if field.codec else value


def _f(local: str, remote: str | None = None, codec: Codec | None = None) -> FieldMap:
    return FieldMap(local=local, remote=remote or local, codec=codec)


def _master(collection: str, model: type[MasterEntity]) -> EntitySchema:
    return EntitySchema(
        collection=collection,
        model=model,
        fields=(_f("id"), _f("name"), _f("code"), _f("status")),
    )


SCHEMAS: dict[EntityType, EntitySchema] = {
    EntityType.AVAILABILITY: EntitySchema(
        collection="doctor_availability",
        model=AvailabilityWindow,
        fields=(
            _f("id"),
            _f("provider_id", "doctor_id"),
            _f("day_of_week"),
            _f("start_time", codec=TIME_CODEC),
            _f("end_time", codec=TIME_CODEC),
            _f("slot_duration_minutes"),
        ),
    ),
    EntityType.APPOINTMENTS: EntitySchema(
        collection="appointments",
        model=Appointment,
        fields=(
            _f("id"),
            _f("patient_id"),
            _f("provider_id", "doctor_id"),
            _f("department_id"),
            _f("date", codec=DATE_CODEC),
            _f("time", codec=TIME_CODEC),
            _f("status", codec=ENUM_CODEC),
            _f("visit_type", codec=ENUM_CODEC),
            _f("symptoms"),
            _f("notes"),
            _f("payment_mode"),
            _f("check_in_time", codec=DATETIME_CODEC),
            _f("check_out_time", codec=DATETIME_CODEC),
        ),
    ),
    EntityType.PATIENTS: EntitySchema(
        collection="patients",
        model=Patient,
        fields=(
            _f("id"),
            _f("first_name"),
            _f("last_name"),
            _f("dob", codec=DATE_CODEC),
            _f("gender"),
            _f("phone"),
            _f("email"),
            _f("address"),
            _f("registration_date", codec=DATE_CODEC),
        ),
    ),
    EntityType.EMPLOYEES: EntitySchema(
        collection="employees",
        model=Employee,
        fields=(
            _f("id"),
            _f("first_name"),
            _f("last_name"),
            _f("email"),
            _f("phone"),
            _f("role", codec=ENUM_CODEC),
            _f("department_id"),
            _f("specialization"),
            _f("status"),
        ),
    ),
    EntityType.DEPARTMENTS: _master("departments", Department),
    EntityType.UNITS: _master("units", Unit),
    EntityType.SERVICE_CENTRES: _master("service_centres", ServiceCentre),
    EntityType.VITAL_SIGNS: EntitySchema(
        collection="vital_signs",
        model=VitalSign,
        fields=(
            _f("id"),
            _f("appointment_id"),
            _f("recorded_at", codec=DATETIME_CODEC),
            _f("bp_systolic"),
            _f("bp_diastolic"),
            _f("temperature"),
            _f("pulse"),
            _f("respiratory_rate"),
            _f("weight"),
            _f("height"),
            _f("spo2"),
        ),
    ),
}


def schema_for(entity_type: EntityType) -> EntitySchema:
    return SCHEMAS[entity_type]


__all__ = [
    "DATETIME_CODEC",
    "DATE_CODEC",
    "ENUM_CODEC",
    "SCHEMAS",
    "TIME_CODEC",
    "Codec",
    "EntitySchema",
    "FieldMap",
    "schema_for",
]
