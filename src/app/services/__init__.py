"""Serviços de aplicação.

Regras de agenda e orquestração de escrita (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.appointment_workflow import AppointmentWorkflow
from app.services.availability_repository import AvailabilityRepository, PendingDeletion
from app.services.mutation_coordinator import Mutation, MutationCoordinator
from app.services.reference_data import ReferenceDataService
from app.services.slot_generator import SlotGenerator, generate_slots

__all__ = [
    "AppointmentWorkflow",
    "AvailabilityRepository",
    "Mutation",
    "MutationCoordinator",
    "PendingDeletion",
    "ReferenceDataService",
    "SlotGenerator",
    "generate_slots",
]
