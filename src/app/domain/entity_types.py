"""Tipos de entidade espelhados entre o EntityStore e o store remoto."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Uma collection local por tipo; o valor é o nome usado em logs."""

    AVAILABILITY = "availability"
    APPOINTMENTS = "appointments"
    PATIENTS = "patients"
    EMPLOYEES = "employees"
    DEPARTMENTS = "departments"
    UNITS = "units"
    SERVICE_CENTRES = "service_centres"
    VITAL_SIGNS = "vital_signs"


__all__ = ["EntityType"]
