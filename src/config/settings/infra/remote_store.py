"""Settings do store remoto.

Backends:
    memory    gateway em memória (somente desenvolvimento/testes)
    postgrest API REST do Supabase (PostgREST) via httpx
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

RemoteStoreBackend = Literal["memory", "postgrest"]


@dataclass(frozen=True)
class RemoteStoreSettings:
    """Configurações do store remoto.

    Attributes:
        backend: Implementação do gateway
        url: URL base do projeto Supabase
        api_key: Chave anon/service do projeto
        timeout_seconds: Timeout de cada requisição HTTP
        db_schema: Schema do Postgres exposto pelo PostgREST
    """

    backend: RemoteStoreBackend = "memory"
    url: str = ""
    api_key: str = ""
    timeout_seconds: float = 10.0
    db_schema: str = "public"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store remoto.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "postgrest"):
            errors.append(f"REMOTE_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.allows_memory_backend:
            errors.append("REMOTE_STORE_BACKEND=memory proibido em staging/production")

        if self.backend == "postgrest":
            if not self.url:
                errors.append("SUPABASE_URL não configurado")
            if not self.api_key:
                errors.append("SUPABASE_KEY não configurado")

        if self.timeout_seconds <= 0:
            errors.append("REMOTE_STORE_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_remote_store_from_env() -> RemoteStoreSettings:
    """Carrega RemoteStoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("REMOTE_STORE_BACKEND", "memory").lower()
    backend: RemoteStoreBackend = "postgrest" if backend_str == "postgrest" else "memory"
    return RemoteStoreSettings(
        backend=backend,
        url=os.getenv("SUPABASE_URL", "").rstrip("/"),
        api_key=os.getenv("SUPABASE_KEY", ""),
        timeout_seconds=float(os.getenv("REMOTE_STORE_TIMEOUT_SECONDS", "10")),
        db_schema=os.getenv("REMOTE_STORE_SCHEMA", "public"),
    )


@lru_cache(maxsize=1)
def get_remote_store_settings() -> RemoteStoreSettings:
    """Retorna instância cacheada de RemoteStoreSettings."""
    return _load_remote_store_from_env()
