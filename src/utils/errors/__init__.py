"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ConflictError,
    InfrastructureError,
    NotFoundError,
    OverlapError,
    PersistenceError,
    SchedulingError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "InfrastructureError",
    "NotFoundError",
    "OverlapError",
    "PersistenceError",
    "SchedulingError",
    "ValidationError",
]
