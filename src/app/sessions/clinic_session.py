"""ClinicSession: raiz do grafo de objetos e API exposta ao chamador.

Uma sessão por usuário autenticado. Ela é dona do EntityStore e injeta
o mesmo MutationCoordinator em todos os serviços, de modo que toda
escrita passa pelo mesmo caminho otimista.

Uso típico:

    session = ClinicSession(gateway, identity_cache=IdentityCache(path))
    await session.load()
    slots = session.list_slots("doc-1", date(2024, 6, 3))
    appointment = await session.book_appointment(...)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

from app.domain.entity_types import EntityType
from app.infra.stores.entity_store import EntityStore
from app.observability import correlation_scope
from app.services.appointment_workflow import AppointmentWorkflow
from app.services.availability_repository import AvailabilityRepository
from app.services.mutation_coordinator import MutationCoordinator
from app.services.reference_data import ReferenceDataService
from app.services.slot_generator import SlotGenerator

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.reference import (
        AppUser,
        Department,
        Employee,
        Patient,
        ServiceCentre,
        Unit,
        VitalSign,
    )
    from app.domain.scheduling import Appointment, AvailabilityWindow, VisitType
    from app.infra.stores.identity_cache import IdentityCache
    from app.protocols.remote_gateway import RemoteGatewayProtocol
    from app.services.availability_repository import PendingDeletion
    from fsm import AppointmentStatus

logger = logging.getLogger(__name__)

# Ordem de carga: referência antes da agenda
LOAD_ORDER: tuple[EntityType, ...] = (
    EntityType.DEPARTMENTS,
    EntityType.UNITS,
    EntityType.SERVICE_CENTRES,
    EntityType.EMPLOYEES,
    EntityType.PATIENTS,
    EntityType.AVAILABILITY,
    EntityType.APPOINTMENTS,
    EntityType.VITAL_SIGNS,
)


class ClinicSession:
    """Fachada da agenda clínica sobre o espelho local sincronizado."""

    def __init__(
        self,
        gateway: RemoteGatewayProtocol,
        *,
        identity_cache: IdentityCache | None = None,
        clock: Callable[[], datetime] | None = None,
        store: EntityStore | None = None,
    ) -> None:
        self._gateway = gateway
        self._identity_cache = identity_cache
        self._clock = clock or datetime.now
        self._store = store or EntityStore()
        self._coordinator = MutationCoordinator(self._store, gateway)
        self._availability = AvailabilityRepository(self._coordinator, clock=self._clock)
        self._slots = SlotGenerator(self._store, clock=self._clock)
        self._workflow = AppointmentWorkflow(
            self._coordinator,
            self._availability,
            self._slots,
            clock=self._clock,
        )
        self._reference = ReferenceDataService(self._coordinator)
        self._user: AppUser | None = identity_cache.load() if identity_cache else None

    # ──────────────────────────────────────────────────────────────────
    # Componentes
    # ──────────────────────────────────────────────────────────────────

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def availability(self) -> AvailabilityRepository:
        return self._availability

    @property
    def workflow(self) -> AppointmentWorkflow:
        return self._workflow

    @property
    def reference(self) -> ReferenceDataService:
        return self._reference

    # ──────────────────────────────────────────────────────────────────
    # Identidade e ciclo de vida
    # ──────────────────────────────────────────────────────────────────

    @property
    def current_user(self) -> AppUser | None:
        return self._user

    def login(self, user: AppUser) -> None:
        """Registra a identidade autenticada e a grava no cache."""
        self._user = user
        if self._identity_cache is not None:
            self._identity_cache.save(user)
        logger.info("session_login", extra={"user_id": user.id, "role": user.role})

    async def load(self) -> None:
        """Busca todas as collections no remoto e substitui o espelho local.

        Nada é aplicado se qualquer leitura falhar.

        Raises:
            PersistenceError: falha ao ler alguma collection.
        """
        fetched: dict[EntityType, list[Any]] = {}
        with correlation_scope():
            for entity_type in LOAD_ORDER:
                fetched[entity_type] = await self._gateway.fetch_all(entity_type)
        for entity_type, entities in fetched.items():
            self._store.load(entity_type, entities)
        logger.info(
            "session_loaded",
            extra={"counts": {str(key): len(value) for key, value in fetched.items()}},
        )

    def logout(self) -> None:
        """Limpa o espelho local e a identidade gravada."""
        user_id = self._user.id if self._user else None
        self._store.clear()
        self._user = None
        if self._identity_cache is not None:
            self._identity_cache.clear()
        logger.info("session_logout", extra={"user_id": user_id})

    # ──────────────────────────────────────────────────────────────────
    # Agenda
    # ──────────────────────────────────────────────────────────────────

    def list_slots(self, provider_id: str, on: date) -> list[time]:
        return self._slots.list_slots(provider_id, on)

    def appointments(self) -> tuple[Appointment, ...]:
        return self._store.get(EntityType.APPOINTMENTS)

    async def book_appointment(
        self,
        patient_id: str,
        provider_id: str,
        department_id: str,
        on: date,
        at: time,
        visit_type: VisitType | str,
        symptoms: str | None = None,
    ) -> Appointment:
        with correlation_scope():
            return await self._workflow.book(
                patient_id=patient_id,
                provider_id=provider_id,
                department_id=department_id,
                on=on,
                at=at,
                visit_type=visit_type,
                symptoms=symptoms,
            )

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        with correlation_scope():
            return await self._workflow.cancel(appointment_id)

    async def transition_appointment(
        self,
        appointment_id: str,
        target_status: AppointmentStatus | str,
    ) -> Appointment:
        with correlation_scope():
            return await self._workflow.transition(appointment_id, target_status)

    async def record_vitals(self, vital_sign: VitalSign) -> Appointment:
        with correlation_scope():
            return await self._workflow.record_vitals(vital_sign)

    async def save_availability(self, window: AvailabilityWindow) -> None:
        with correlation_scope():
            await self._availability.save(window)

    def delete_availability(self, window_id: str) -> PendingDeletion:
        """Retorna a exclusão pendente; o chamador decide e chama ``confirm()``."""
        return self._availability.delete(window_id)

    # ──────────────────────────────────────────────────────────────────
    # Cadastros
    # ──────────────────────────────────────────────────────────────────

    async def add_patient(self, patient: Patient) -> Patient:
        return await self._reference.add_patient(patient)

    async def update_patient(self, patient_id: str, changes: dict[str, Any]) -> Patient:
        return await self._reference.update_patient(patient_id, changes)

    async def import_patients(self, patients: list[Patient]) -> int:
        with correlation_scope():
            return await self._reference.import_patients(patients)

    async def add_employee(self, employee: Employee) -> Employee:
        return await self._reference.add_employee(employee)

    async def update_employee(self, employee_id: str, changes: dict[str, Any]) -> Employee:
        return await self._reference.update_employee(employee_id, changes)

    async def add_department(self, department: Department) -> Department:
        return await self._reference.add_department(department)

    async def add_unit(self, unit: Unit) -> Unit:
        return await self._reference.add_unit(unit)

    async def add_service_centre(self, service_centre: ServiceCentre) -> ServiceCentre:
        return await self._reference.add_service_centre(service_centre)
