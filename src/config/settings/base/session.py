"""Settings da sessão clínica.

Somente a identidade autenticada é cacheada em disco.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_IDENTITY_CACHE_PATH = ".medicore/identity.json"


@dataclass(frozen=True)
class SessionSettings:
    """Configurações da sessão.

    Attributes:
        identity_cache_path: Arquivo JSON com o usuário autenticado
    """

    identity_cache_path: str = DEFAULT_IDENTITY_CACHE_PATH

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.identity_cache_path.strip():
            errors.append("IDENTITY_CACHE_PATH não pode ser vazio")
        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    return SessionSettings(
        identity_cache_path=os.getenv("IDENTITY_CACHE_PATH", DEFAULT_IDENTITY_CACHE_PATH),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
