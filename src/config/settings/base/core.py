"""Settings base do medicore-scheduling.

Ambiente, nome do serviço e debug. O ambiente decide duas políticas
usadas no boot: se erros de configuração bloqueiam a inicialização e se
o gateway remoto em memória é aceito.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

DEFAULT_SERVICE_NAME = "medicore-scheduling"

# Apelidos aceitos em ENVIRONMENT; qualquer outro valor cai em development
_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "development": "development",
    "dev": "development",
    "staging": "staging",
    "stage": "staging",
    "production": "production",
    "prod": "production",
}

_STRICT_ENVIRONMENTS: frozenset[str] = frozenset({"staging", "production"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações comuns a todos os componentes.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço nos logs
        debug: Logs em DEBUG, inclusive dos clientes HTTP
    """

    environment: Environment = "development"
    service_name: str = DEFAULT_SERVICE_NAME
    debug: bool = False

    @property
    def strict_validation(self) -> bool:
        """Configuração inválida impede o boot (staging/production)."""
        return self.environment in _STRICT_ENVIRONMENTS

    @property
    def allows_memory_backend(self) -> bool:
        """Store remoto em memória só é aceito em development."""
        return self.environment == "development"

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.environment not in set(_ENVIRONMENT_ALIASES.values()):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name.strip():
            errors.append("SERVICE_NAME não pode ser vazio")
        return errors


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("true", "1", "yes")


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings lida do ambiente."""
    raw_environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    return BaseSettings(
        environment=_ENVIRONMENT_ALIASES.get(raw_environment, "development"),
        service_name=os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME),
        debug=_env_flag("DEBUG"),
    )
