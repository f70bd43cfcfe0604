"""Testes do ReferenceDataService."""

from __future__ import annotations

import pytest

from app.domain.entity_types import EntityType
from app.domain.reference import ServiceCentre, Unit
from app.services.reference_data import ReferenceDataService
from tests.fakes.scheduling_factories import make_department, make_doctor, make_patient
from utils.errors import NotFoundError, PersistenceError, ValidationError


@pytest.fixture
def service(coordinator) -> ReferenceDataService:
    return ReferenceDataService(coordinator)


class TestReferenceData:
    """Cadastros simples sobre o fluxo otimista."""

    @pytest.mark.asyncio
    async def test_add_and_update_patient(self, service, gateway) -> None:
        await service.add_patient(make_patient())

        updated = await service.update_patient("pat-1", {"phone": "+55 11 99999-0000"})

        assert updated.phone == "+55 11 99999-0000"
        assert service.patients() == (updated,)
        assert gateway.rows(EntityType.PATIENTS)[0]["phone"] == "+55 11 99999-0000"

    @pytest.mark.asyncio
    async def test_update_validates_fields(self, service) -> None:
        await service.add_patient(make_patient())

        with pytest.raises(ValidationError, match="desconhecidos"):
            await service.update_patient("pat-1", {"favorite_color": "blue"})
        with pytest.raises(ValidationError):
            await service.update_patient("pat-1", {"gender": "Unknown"})
        with pytest.raises(ValidationError):
            await service.update_patient("pat-1", {"id": "pat-2"})
        with pytest.raises(NotFoundError):
            await service.update_patient("ghost", {"phone": "1"})

    @pytest.mark.asyncio
    async def test_duplicate_id_is_rejected_locally(self, service, gateway) -> None:
        await service.add_department(make_department())

        with pytest.raises(ValidationError):
            await service.add_department(make_department())
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_units_and_service_centres_use_their_collections(
        self, service, gateway
    ) -> None:
        unit = await service.add_unit(Unit(id="unit-1", name="Ala Norte", code="AN"))
        centre = await service.add_service_centre(
            ServiceCentre(id="sc-1", name="Laboratório", code="LAB", status="Inactive")
        )

        assert service.units() == (unit,)
        assert service.service_centres() == (centre,)
        assert gateway.rows(EntityType.UNITS) == [
            {"id": "unit-1", "name": "Ala Norte", "code": "AN", "status": "Active"}
        ]
        assert gateway.rows(EntityType.SERVICE_CENTRES)[0]["status"] == "Inactive"

    @pytest.mark.asyncio
    async def test_failed_unit_insert_is_rolled_back(self, service, gateway) -> None:
        gateway.fail_next("create", "units_code_key")

        with pytest.raises(PersistenceError, match="units_code_key"):
            await service.add_unit(Unit(id="unit-1", name="Ala Sul", code="AS"))

        assert service.units() == ()

    @pytest.mark.asyncio
    async def test_doctors_filters_role_status_and_department(self, service) -> None:
        await service.add_employee(make_doctor("doc-1"))
        await service.add_employee(make_doctor("doc-2", department_id="dep-2"))
        await service.add_employee(make_doctor("nurse-1", role="Nurse"))
        await service.update_employee("doc-2", {"status": "Inactive"})

        assert [e.id for e in service.doctors()] == ["doc-1"]
        assert service.doctors("dep-2") == []

    @pytest.mark.asyncio
    async def test_import_patients_is_all_or_nothing_locally(self, service, gateway) -> None:
        batch = [make_patient(f"pat-{i}") for i in range(3)]
        gateway.fail_next("create_many", write_before_failure=1)

        with pytest.raises(PersistenceError):
            await service.import_patients(batch)
        assert service.patients() == ()

        assert await service.import_patients([make_patient("pat-9")]) == 1
        assert await service.import_patients([]) == 0

    @pytest.mark.asyncio
    async def test_import_rejects_repeated_or_existing_ids(self, service) -> None:
        await service.add_patient(make_patient("pat-1"))

        with pytest.raises(ValidationError):
            await service.import_patients([make_patient("pat-2"), make_patient("pat-2")])
        with pytest.raises(ValidationError):
            await service.import_patients([make_patient("pat-1")])
