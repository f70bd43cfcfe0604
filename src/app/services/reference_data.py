"""CRUD de entidades de referência: pacientes, funcionários e cadastros mestres.

Sem regras de agenda; apenas validação de campos e a mesma escrita
otimista do MutationCoordinator. A importação de pacientes usa um único
comando em lote.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pydantic

from app.domain.entity_types import EntityType
from app.domain.reference import (
    Department,
    Employee,
    EmployeeRole,
    Patient,
    ServiceCentre,
    Unit,
)
from utils.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from app.services.mutation_coordinator import MutationCoordinator

logger = logging.getLogger(__name__)


class ReferenceDataService:
    """Cadastros simples sincronizados com o remoto."""

    __slots__ = ("_coordinator",)

    def __init__(self, coordinator: MutationCoordinator) -> None:
        self._coordinator = coordinator

    # Leitura

    def patients(self) -> tuple[Patient, ...]:
        return self._coordinator.reader.get(EntityType.PATIENTS)

    def employees(self) -> tuple[Employee, ...]:
        return self._coordinator.reader.get(EntityType.EMPLOYEES)

    def departments(self) -> tuple[Department, ...]:
        return self._coordinator.reader.get(EntityType.DEPARTMENTS)

    def units(self) -> tuple[Unit, ...]:
        return self._coordinator.reader.get(EntityType.UNITS)

    def service_centres(self) -> tuple[ServiceCentre, ...]:
        return self._coordinator.reader.get(EntityType.SERVICE_CENTRES)

    def doctors(self, department_id: str | None = None) -> list[Employee]:
        """Médicos ativos, opcionalmente filtrados por departamento."""
        return [
            employee
            for employee in self.employees()
            if employee.role == EmployeeRole.DOCTOR
            and employee.status == "Active"
            and (department_id is None or employee.department_id == department_id)
        ]

    # Escrita

    async def add_patient(self, patient: Patient) -> Patient:
        return await self._add(EntityType.PATIENTS, patient)

    async def update_patient(self, patient_id: str, changes: dict[str, Any]) -> Patient:
        return await self._update(EntityType.PATIENTS, Patient, patient_id, changes)

    async def add_employee(self, employee: Employee) -> Employee:
        return await self._add(EntityType.EMPLOYEES, employee)

    async def update_employee(self, employee_id: str, changes: dict[str, Any]) -> Employee:
        return await self._update(EntityType.EMPLOYEES, Employee, employee_id, changes)

    async def add_department(self, department: Department) -> Department:
        return await self._add(EntityType.DEPARTMENTS, department)

    async def add_unit(self, unit: Unit) -> Unit:
        return await self._add(EntityType.UNITS, unit)

    async def add_service_centre(self, service_centre: ServiceCentre) -> ServiceCentre:
        return await self._add(EntityType.SERVICE_CENTRES, service_centre)

    async def import_patients(self, patients: list[Patient]) -> int:
        """Importa pacientes em lote; falha remota remove o lote inteiro.

        Raises:
            ValidationError: ids repetidos no lote ou já existentes.
            PersistenceError: remoto falhou; nenhum paciente do lote fica local.
        """
        if not patients:
            return 0
        ids = [patient.id for patient in patients]
        if len(set(ids)) != len(ids):
            raise ValidationError("Lote de importação contém ids repetidos")
        reader = self._coordinator.reader
        existing = [pid for pid in ids if reader.find(EntityType.PATIENTS, pid) is not None]
        if existing:
            raise ValidationError(f"{len(existing)} paciente(s) já cadastrado(s)")

        coordinator = self._coordinator
        await coordinator.execute(coordinator.bulk_insert(EntityType.PATIENTS, list(patients)))
        logger.info("patients_imported", extra={"patient_count": len(patients)})
        return len(patients)

    async def _add(self, entity_type: EntityType, entity: BaseModel) -> Any:
        entity_id: str = entity.id  # type: ignore[attr-defined]
        if self._coordinator.reader.find(entity_type, entity_id) is not None:
            raise ValidationError(f"{entity_type} já possui id {entity_id}")
        coordinator = self._coordinator
        await coordinator.execute(coordinator.insert(entity_type, entity))
        return entity

    async def _update(
        self,
        entity_type: EntityType,
        model: type[BaseModel],
        entity_id: str,
        changes: dict[str, Any],
    ) -> Any:
        current = self._coordinator.reader.find(entity_type, entity_id)
        if current is None:
            raise NotFoundError(model.__name__, entity_id)
        if "id" in changes and changes["id"] != entity_id:
            raise ValidationError("id não pode ser alterado")
        unknown = set(changes) - set(model.model_fields)
        if unknown:
            raise ValidationError(f"Campos desconhecidos: {', '.join(sorted(unknown))}")
        try:
            updated = model.model_validate({**current.model_dump(), **changes})
        except pydantic.ValidationError as exc:
            raise ValidationError(str(exc)) from exc

        # Só os campos validados seguem para o remoto
        normalized = {key: getattr(updated, key) for key in changes if key != "id"}
        coordinator = self._coordinator
        await coordinator.execute(coordinator.update(entity_type, entity_id, normalized))
        return self._coordinator.reader.find(entity_type, entity_id) or updated
