"""Entidades de referência sincronizadas junto com a agenda.

Cadastros mestres (departamentos, unidades, centros de serviço),
funcionários, pacientes e sinais vitais não possuem regras próprias
aqui: são CRUD simples, mas passam pela mesma camada de sincronização
otimista que a agenda.
"""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RecordStatus = Literal["Active", "Inactive"]


class EmployeeRole(StrEnum):
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    ADMIN = "Admin"
    STAFF = "Staff"


class MasterEntity(BaseModel):
    """Cadastro mestre com nome, código e status."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    code: str
    status: RecordStatus = "Active"


class Department(MasterEntity):
    """Departamento clínico (ex: Cardiologia)."""


class Unit(MasterEntity):
    """Unidade física da clínica (ex: Ala Norte)."""


class ServiceCentre(MasterEntity):
    """Centro de serviço (ex: Laboratório, Radiologia)."""


class Employee(BaseModel):
    """Funcionário; médicos são os profissionais com agenda."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    role: EmployeeRole = EmployeeRole.STAFF
    department_id: str | None = None
    specialization: str | None = None
    status: RecordStatus = "Active"


class Patient(BaseModel):
    """Paciente registrado na recepção."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    first_name: str
    last_name: str
    dob: date | None = None
    gender: Literal["Male", "Female", "Other"] | None = None
    phone: str = ""
    email: str = ""
    address: str = ""
    registration_date: date | None = None


class VitalSign(BaseModel):
    """Aferição de sinais vitais vinculada a um agendamento."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    appointment_id: str
    recorded_at: datetime
    bp_systolic: int | None = Field(None, ge=0)
    bp_diastolic: int | None = Field(None, ge=0)
    temperature: float | None = None
    pulse: int | None = Field(None, ge=0)
    respiratory_rate: int | None = Field(None, ge=0)
    weight: float | None = Field(None, ge=0)
    height: float | None = Field(None, ge=0)
    spo2: float | None = Field(None, ge=0, le=100)


class AppUser(BaseModel):
    """Identidade autenticada mantida no cache local entre recargas."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    username: str
    role: str
    full_name: str = ""
    employee_id: str | None = None


__all__ = [
    "AppUser",
    "Department",
    "Employee",
    "EmployeeRole",
    "MasterEntity",
    "Patient",
    "RecordStatus",
    "ServiceCentre",
    "Unit",
    "VitalSign",
]
