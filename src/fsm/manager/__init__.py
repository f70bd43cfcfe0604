"""
Exports públicos do módulo fsm/manager.

Máquina de estados (AppointmentStateMachine) de agendamentos.
"""

from fsm.manager.machine import (
    INITIAL_STATES,
    AppointmentStateMachine,
    create_fsm,
)

__all__ = [
    "INITIAL_STATES",
    "AppointmentStateMachine",
    "create_fsm",
]
