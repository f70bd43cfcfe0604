"""Gateway remoto sobre a API REST do Supabase (PostgREST).

Traduz entidades via tabela de schemas e executa as chamadas HTTP.
Não há retry: uma falha sobe imediatamente como ``PersistenceError``
para que o MutationCoordinator desfaça a aplicação otimista.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.infra.remote.schema import SCHEMAS, EntitySchema
from app.protocols.remote_gateway import RemoteGatewayProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from app.domain.entity_types import EntityType

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"


class PostgrestRemoteGateway(RemoteGatewayProtocol):
    """Gateway HTTP para collections do Supabase."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout_seconds: float = 10.0,
        db_schema: str = "public",
        schemas: dict[EntityType, EntitySchema] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa o gateway.

        Args:
            base_url: URL do projeto (ex: https://xyz.supabase.co)
            api_key: Chave anon/service do projeto
            timeout_seconds: Timeout por requisição
            db_schema: Schema Postgres exposto pelo PostgREST
            schemas: Tabela de mapeamento (usa SCHEMAS se None)
            transport: Transport httpx customizado (testes)
        """
        if not api_key or not api_key.strip():
            raise ValueError("api_key é obrigatório para o gateway PostgREST")
        self._base_url = base_url.rstrip("/") + REST_PREFIX
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._db_schema = db_schema
        self._schemas = schemas or SCHEMAS
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept-Profile": self._db_schema,
            "Content-Profile": self._db_schema,
            "Prefer": "return=minimal",
        }

    async def fetch_all(self, entity_type: EntityType) -> list[BaseModel]:
        schema = self._schemas[entity_type]
        response = await self._request(
            "GET",
            schema,
            operation="fetch_all",
            params={"select": "*"},
        )
        rows = _json_body(response, schema, "fetch_all")
        if not isinstance(rows, list):
            raise PersistenceError(
                "Resposta inesperada do store remoto",
                operation="fetch_all",
                collection=schema.collection,
            )
        try:
            return [schema.from_remote(row) for row in rows]
        except (ValueError, TypeError) as exc:
            raise PersistenceError(
                f"Registro remoto inválido: {exc}",
                operation="fetch_all",
                collection=schema.collection,
            ) from exc

    async def create(self, entity_type: EntityType, entity: BaseModel) -> None:
        schema = self._schemas[entity_type]
        await self._request(
            "POST",
            schema,
            operation="create",
            json=schema.to_remote(entity),
        )

    async def create_many(
        self,
        entity_type: EntityType,
        entities: list[BaseModel],
    ) -> None:
        schema = self._schemas[entity_type]
        await self._request(
            "POST",
            schema,
            operation="create_many",
            json=[schema.to_remote(entity) for entity in entities],
        )

    async def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        changes: dict[str, Any],
    ) -> None:
        schema = self._schemas[entity_type]
        await self._request(
            "PATCH",
            schema,
            operation="update",
            params={"id": f"eq.{entity_id}"},
            json=schema.to_remote_partial(changes),
        )

    async def delete(self, entity_type: EntityType, entity_id: str) -> None:
        schema = self._schemas[entity_type]
        await self._request(
            "DELETE",
            schema,
            operation="delete",
            params={"id": f"eq.{entity_id}"},
        )

    async def _request(
        self,
        method: str,
        schema: EntitySchema,
        *,
        operation: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    f"/{schema.collection}",
                    params=params,
                    json=json,
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "remote_transport_error",
                extra={
                    "operation": operation,
                    "collection": schema.collection,
                    "error_type": type(exc).__name__,
                },
            )
            raise PersistenceError(
                f"Falha de comunicação com o store remoto: {type(exc).__name__}",
                operation=operation,
                collection=schema.collection,
            ) from exc

        if response.status_code >= 400:
            message = _provider_message(response)
            logger.warning(
                "remote_request_rejected",
                extra={
                    "operation": operation,
                    "collection": schema.collection,
                    "status_code": response.status_code,
                },
            )
            raise PersistenceError(
                message,
                operation=operation,
                collection=schema.collection,
            )

        logger.debug(
            "remote_request_ok",
            extra={
                "operation": operation,
                "collection": schema.collection,
                "status_code": response.status_code,
            },
        )
        return response


def _provider_message(response: httpx.Response) -> str:
    """Extrai a mensagem do provider (PostgREST devolve {message, code, ...})."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("hint")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


def _json_body(response: httpx.Response, schema: EntitySchema, operation: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise PersistenceError(
            "Response JSON inválido",
            operation=operation,
            collection=schema.collection,
        ) from exc
