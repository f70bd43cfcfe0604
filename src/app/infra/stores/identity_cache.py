"""Cache durável da identidade autenticada.

Guarda apenas o ``AppUser`` em um arquivo JSON local, para sobreviver a
reinícios. Dados de agenda nunca são gravados aqui; vêm sempre do
remoto via ``ClinicSession.load``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pydantic

from app.domain.reference import AppUser
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


class IdentityCache:
    """Arquivo JSON com o usuário autenticado."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, user: AppUser) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(user.model_dump_json(), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                f"Falha ao gravar identidade: {exc}",
                operation="save",
                collection="identity",
            ) from exc
        logger.debug("identity_cached", extra={"user_id": user.id})

    def load(self) -> AppUser | None:
        """Identidade gravada, ou None se ausente ou ilegível."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return AppUser.model_validate(data)
        except (OSError, json.JSONDecodeError, pydantic.ValidationError) as exc:
            logger.warning(
                "identity_cache_unreadable",
                extra={"error_type": type(exc).__name__},
            )
            return None

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.debug("identity_cleared")
