"""correlation_id para agrupar os logs de uma operação da sessão.

Uma marcação gera logs em vários componentes (workflow, coordinator,
gateway); todos saem com o mesmo correlation_id. Usa ContextVar, então
cada task asyncio enxerga o próprio valor.

Uso:
    from app.observability import correlation_scope

    with correlation_scope():
        await workflow.book(...)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id do contexto atual, ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id (gera um UUID se None) e retorna o token de reset."""
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Garante um correlation_id durante o bloco.

    Se já existe um no contexto e nenhum foi informado, reaproveita o
    existente; operações aninhadas ficam no mesmo grupo de logs.
    """
    current = get_correlation_id()
    if current and correlation_id is None:
        yield current
        return
    token = set_correlation_id(correlation_id)
    try:
        yield get_correlation_id()
    finally:
        reset_correlation_id(token)
