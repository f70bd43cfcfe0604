"""Protocolos e contratos do core da aplicação."""

from .entity_reader import EntityReaderProtocol
from .remote_gateway import RemoteGatewayProtocol

__all__ = [
    "EntityReaderProtocol",
    "RemoteGatewayProtocol",
]
