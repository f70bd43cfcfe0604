"""
Módulo FSM: Máquina de Estados do ciclo de vida de agendamentos.

Este módulo implementa a FSM determinística que governa as
transições de status de um Appointment.

Estrutura:
    - states/: Definições dos estados (AppointmentStatus enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (AppointmentStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Manager
from fsm.manager import (
    INITIAL_STATES,
    AppointmentStateMachine,
    create_fsm,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)

# Estados
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    SLOT_HOLDING_STATES,
    TERMINAL_STATES,
    AppointmentStatus,
    holds_slot,
    is_terminal,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "INITIAL_STATES",
    "SLOT_HOLDING_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "AppointmentStateMachine",
    "AppointmentStatus",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "holds_slot",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
