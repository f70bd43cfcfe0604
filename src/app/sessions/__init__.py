"""Sessão clínica: raiz do grafo de objetos da agenda."""

from app.sessions.clinic_session import LOAD_ORDER, ClinicSession

__all__ = [
    "LOAD_ORDER",
    "ClinicSession",
]
