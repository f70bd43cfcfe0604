"""Configuração do pytest para o projeto medicore-scheduling."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ (imports absolutos) e a raiz (tests.fakes) ao PYTHONPATH
root_path = Path(__file__).parent.parent
for path in (root_path, root_path / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from app.infra.remote import MemoryRemoteGateway  # noqa: E402
from app.infra.stores.entity_store import EntityStore  # noqa: E402
from app.services.mutation_coordinator import MutationCoordinator  # noqa: E402
from tests.fakes.scheduling_factories import NOW  # noqa: E402


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def store() -> EntityStore:
    return EntityStore()


@pytest.fixture
def gateway() -> MemoryRemoteGateway:
    return MemoryRemoteGateway()


@pytest.fixture
def coordinator(store: EntityStore, gateway: MemoryRemoteGateway) -> MutationCoordinator:
    return MutationCoordinator(store, gateway)
