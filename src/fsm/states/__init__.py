"""
Exports públicos do módulo fsm/states.

Estados canônicos do ciclo de vida de agendamentos.
"""

from fsm.states.appointment import (
    DEFAULT_INITIAL_STATE,
    SLOT_HOLDING_STATES,
    TERMINAL_STATES,
    AppointmentStatus,
    holds_slot,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "SLOT_HOLDING_STATES",
    "TERMINAL_STATES",
    "AppointmentStatus",
    "holds_slot",
    "is_terminal",
    "is_valid_state",
]
