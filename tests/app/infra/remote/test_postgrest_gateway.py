"""Testes do PostgrestRemoteGateway com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from app.domain.entity_types import EntityType
from app.infra.remote import PostgrestRemoteGateway
from fsm import AppointmentStatus
from tests.fakes.scheduling_factories import make_appointment, make_patient, make_window
from utils.errors import PersistenceError

BASE_URL = "https://clinic.supabase.co"


def _gateway(handler) -> tuple[PostgrestRemoteGateway, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    gateway = PostgrestRemoteGateway(
        BASE_URL,
        "anon-key",
        transport=httpx.MockTransport(_record),
    )
    return gateway, seen


class TestPostgrestRemoteGateway:
    """Requisições montadas e tradução de erros."""

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError, match="api_key"):
            PostgrestRemoteGateway(BASE_URL, " ")

    @pytest.mark.asyncio
    async def test_create_posts_remote_row_with_auth_headers(self) -> None:
        gateway, seen = _gateway(lambda _request: httpx.Response(201))

        await gateway.create(EntityType.AVAILABILITY, make_window())

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/rest/v1/doctor_availability"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert request.headers["Prefer"] == "return=minimal"
        assert json.loads(request.content)["doctor_id"] == "doc-1"

    @pytest.mark.asyncio
    async def test_update_and_delete_filter_by_id(self) -> None:
        gateway, seen = _gateway(lambda _request: httpx.Response(204))

        await gateway.update(
            EntityType.APPOINTMENTS, "apt-1", {"status": AppointmentStatus.CANCELLED}
        )
        await gateway.delete(EntityType.APPOINTMENTS, "apt-1")

        patch, delete = seen
        assert patch.method == "PATCH"
        assert patch.url.params["id"] == "eq.apt-1"
        assert json.loads(patch.content) == {"status": "Cancelled"}
        assert delete.method == "DELETE"
        assert delete.url.params["id"] == "eq.apt-1"

    @pytest.mark.asyncio
    async def test_create_many_sends_single_array(self) -> None:
        gateway, seen = _gateway(lambda _request: httpx.Response(201))

        await gateway.create_many(
            EntityType.PATIENTS, [make_patient("pat-1"), make_patient("pat-2")]
        )

        assert len(seen) == 1
        assert [row["id"] for row in json.loads(seen[0].content)] == ["pat-1", "pat-2"]

    @pytest.mark.asyncio
    async def test_fetch_all_decodes_rows(self) -> None:
        row = {
            "id": "apt-1",
            "patient_id": "pat-1",
            "doctor_id": "doc-1",
            "department_id": "dep-1",
            "date": "2024-06-03",
            "time": "09:00:00",
            "status": "Scheduled",
            "visit_type": "Follow-up",
        }
        gateway, seen = _gateway(lambda _request: httpx.Response(200, json=[row]))

        appointments = await gateway.fetch_all(EntityType.APPOINTMENTS)

        assert seen[0].url.params["select"] == "*"
        assert appointments == [make_appointment(visit_type="Follow-up")]

    @pytest.mark.asyncio
    async def test_rejection_carries_provider_message(self) -> None:
        body = {"code": "23505", "message": 'duplicate key value violates unique constraint'}
        gateway, _ = _gateway(lambda _request: httpx.Response(409, json=body))

        with pytest.raises(PersistenceError, match="duplicate key") as exc_info:
            await gateway.create(EntityType.PATIENTS, make_patient())
        assert exc_info.value.operation == "create"
        assert exc_info.value.collection == "patients"

    @pytest.mark.asyncio
    async def test_transport_error_becomes_persistence_error(self) -> None:
        def _offline(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        gateway, _ = _gateway(_offline)

        with pytest.raises(PersistenceError, match="ConnectError"):
            await gateway.delete(EntityType.AVAILABILITY, "win-1")

    @pytest.mark.asyncio
    async def test_invalid_remote_row_is_reported(self) -> None:
        gateway, _ = _gateway(
            lambda _request: httpx.Response(200, json=[{"id": "win-1", "day_of_week": 1}])
        )

        with pytest.raises(PersistenceError, match="Registro remoto inválido"):
            await gateway.fetch_all(EntityType.AVAILABILITY)
