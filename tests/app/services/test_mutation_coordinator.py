"""Testes do MutationCoordinator: aplicação otimista e rollback."""

from __future__ import annotations

import logging

import pytest

from app.domain.entity_types import EntityType
from app.infra.remote import MemoryRemoteGateway
from app.services.mutation_coordinator import MutationCoordinator
from fsm import AppointmentStatus
from tests.fakes.scheduling_factories import make_appointment, make_patient, make_window
from utils.errors import PersistenceError, ValidationError

A = EntityType.AVAILABILITY


class TestOptimisticApply:
    """Escrita visível antes da confirmação remota."""

    @pytest.mark.asyncio
    async def test_local_apply_is_visible_while_remote_is_pending(self, store) -> None:
        observed: list[int] = []

        async def _peek(_operation, entity_type) -> None:
            observed.append(len(store.get(entity_type)))

        gateway = MemoryRemoteGateway(on_call=_peek)
        coordinator = MutationCoordinator(store, gateway)
        await coordinator.execute(coordinator.insert(A, make_window()))

        assert observed == [1]
        assert store.find(A, "win-1") is not None
        assert len(gateway.rows(A)) == 1

    @pytest.mark.asyncio
    async def test_confirmed_mutation_logs_info(self, coordinator, caplog) -> None:
        caplog.set_level(logging.INFO)
        await coordinator.execute(coordinator.insert(A, make_window()))
        assert any(r.getMessage() == "mutation_confirmed" for r in caplog.records)


class TestRollback:
    """Falha remota restaura exatamente o snapshot anterior."""

    @pytest.mark.asyncio
    async def test_failed_insert_leaves_equal_snapshot(self, store, coordinator, gateway) -> None:
        store.load(A, [make_window("w0", day_of_week=2)])
        before = store.get(A)
        gateway.fail_next("create")

        with pytest.raises(PersistenceError):
            await coordinator.execute(coordinator.insert(A, make_window("w1")))

        assert store.get(A) == before

    @pytest.mark.asyncio
    async def test_failed_update_restores_value_and_position(
        self, store, coordinator, gateway
    ) -> None:
        appointments = [make_appointment("a1"), make_appointment("a2", at="09:30")]
        store.load(EntityType.APPOINTMENTS, appointments)
        before = store.get(EntityType.APPOINTMENTS)
        gateway.fail_next("update")

        mutation = coordinator.update(
            EntityType.APPOINTMENTS, "a1", {"status": AppointmentStatus.CANCELLED}
        )
        with pytest.raises(PersistenceError):
            await coordinator.execute(mutation)

        assert store.get(EntityType.APPOINTMENTS) == before

    @pytest.mark.asyncio
    async def test_failed_delete_reinserts_at_original_position(
        self, store, coordinator, gateway, caplog
    ) -> None:
        caplog.set_level(logging.WARNING)
        store.load(
            A,
            [
                make_window("w1"),
                make_window("w2", day_of_week=2),
                make_window("w3", day_of_week=3),
            ],
        )
        before = store.get(A)
        gateway.fail_next("delete", "timeout")

        with pytest.raises(PersistenceError, match="timeout"):
            await coordinator.execute(coordinator.delete(A, "w2"))

        assert store.get(A) == before
        assert any(r.getMessage() == "mutation_rolled_back" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_non_persistence_errors_are_wrapped(self, store) -> None:
        async def _explode(_operation, _entity_type) -> None:
            raise ConnectionError("socket closed")

        coordinator = MutationCoordinator(store, MemoryRemoteGateway(on_call=_explode))

        with pytest.raises(PersistenceError, match="socket closed") as exc_info:
            await coordinator.execute(coordinator.insert(A, make_window()))

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.operation == "create"
        assert store.get(A) == ()

    @pytest.mark.asyncio
    async def test_bulk_failure_removes_the_whole_batch(self, store, coordinator, gateway) -> None:
        existing = make_patient("pat-0")
        store.load(EntityType.PATIENTS, [existing])
        gateway.fail_next("create_many", write_before_failure=2)
        batch = [make_patient(f"pat-{i}") for i in range(1, 5)]

        with pytest.raises(PersistenceError):
            await coordinator.execute(coordinator.bulk_insert(EntityType.PATIENTS, batch))

        # Remoto ficou com parte do lote; o espelho local não
        assert store.get(EntityType.PATIENTS) == (existing,)
        assert len(gateway.rows(EntityType.PATIENTS)) == 2

    def test_update_of_missing_entity_fails_before_any_remote_call(
        self, coordinator, gateway
    ) -> None:
        mutation = coordinator.update(A, "ghost", {"end_time": None})
        with pytest.raises(LookupError):
            mutation.apply()
        assert gateway.calls == []


class TestDuplicateIds:
    """Criação com id já presente no store não chega a ser aplicada."""

    @pytest.mark.asyncio
    async def test_insert_with_existing_id_is_rejected_before_apply(
        self, store, coordinator, gateway
    ) -> None:
        existing = make_appointment("apt-1", at="09:00")
        store.load(EntityType.APPOINTMENTS, [existing])

        with pytest.raises(ValidationError, match="apt-1"):
            await coordinator.execute(
                coordinator.insert(EntityType.APPOINTMENTS, make_appointment("apt-1", at="09:30"))
            )

        assert store.get(EntityType.APPOINTMENTS) == (existing,)
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_bulk_with_existing_or_repeated_ids_is_rejected(
        self, store, coordinator, gateway
    ) -> None:
        existing = make_patient("pat-0")
        store.load(EntityType.PATIENTS, [existing])

        for batch in (
            [make_patient("pat-1"), make_patient("pat-0")],
            [make_patient("pat-2"), make_patient("pat-2")],
        ):
            with pytest.raises(ValidationError):
                await coordinator.execute(coordinator.bulk_insert(EntityType.PATIENTS, batch))

        assert store.get(EntityType.PATIENTS) == (existing,)
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_failed_insert_rolls_back_only_its_own_entity(
        self, store, coordinator, gateway
    ) -> None:
        kept = make_window("w1", start="09:00", end="10:00")
        store.load(A, [kept])
        gateway.fail_next("create")

        with pytest.raises(PersistenceError):
            await coordinator.execute(coordinator.insert(A, make_window("w2", day_of_week=2)))

        assert store.get(A) == (kept,)
