"""
Estados canônicos do ciclo de vida de um agendamento.

Este módulo define os estados que um Appointment pode assumir desde
a marcação até o encerramento do atendimento. Estados são
determinísticos e explícitos; os valores coincidem com os gravados
no store remoto.
"""

from enum import StrEnum


class AppointmentStatus(StrEnum):
    """
    Estados canônicos de um agendamento.

    Estados não-terminais:
        - SCHEDULED: Marcado, aguardando chegada do paciente
        - CHECKED_IN: Paciente chegou na recepção
        - IN_CONSULTATION: Atendimento em andamento

    Estados terminais:
        - COMPLETED: Atendimento encerrado
        - CANCELLED: Cancelado (libera o slot)
    """

    # Estados não-terminais (atendimento em andamento)
    SCHEDULED = "Scheduled"
    CHECKED_IN = "Checked-In"
    IN_CONSULTATION = "In-Consultation"

    # Estados terminais
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, o agendamento não aceita nenhuma transição
TERMINAL_STATES: frozenset[AppointmentStatus] = frozenset({
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
})

# Todo agendamento nasce marcado
DEFAULT_INITIAL_STATE: AppointmentStatus = AppointmentStatus.SCHEDULED

# Estados que ocupam o slot (provider, date, time)
SLOT_HOLDING_STATES: frozenset[AppointmentStatus] = frozenset(
    state for state in AppointmentStatus if state != AppointmentStatus.CANCELLED
)


def is_terminal(state: AppointmentStatus) -> bool:
    """
    Verifica se o estado é terminal.

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado é terminal, False caso contrário
    """
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    """Verifica se o valor é um AppointmentStatus válido."""
    return isinstance(state, AppointmentStatus)


def holds_slot(state: AppointmentStatus) -> bool:
    """Agendamentos não cancelados continuam ocupando o horário."""
    return state in SLOT_HOLDING_STATES
