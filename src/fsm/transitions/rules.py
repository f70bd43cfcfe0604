"""
Regras de transição válidas entre estados de agendamento.

Este módulo define o grafo de transições do ciclo de vida de um
Appointment. Qualquer par ausente do mapa é rejeitado.
"""

from fsm.states.appointment import TERMINAL_STATES, AppointmentStatus

# Tipagem explícita do mapa de transições
TransitionMap = dict[AppointmentStatus, frozenset[AppointmentStatus]]

# Mapa de transições válidas
# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # SCHEDULED: chegada na recepção, início direto do atendimento ou cancelamento
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.CHECKED_IN,
        AppointmentStatus.IN_CONSULTATION,
        AppointmentStatus.CANCELLED,
    }),

    # CHECKED_IN: início do atendimento ou cancelamento
    AppointmentStatus.CHECKED_IN: frozenset({
        AppointmentStatus.IN_CONSULTATION,
        AppointmentStatus.CANCELLED,
    }),

    # IN_CONSULTATION: encerramento ou cancelamento
    AppointmentStatus.IN_CONSULTATION: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),

    # Estados terminais: não permitem transição para outros estados
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def get_valid_targets(state: AppointmentStatus) -> frozenset[AppointmentStatus]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    # Estados terminais nunca permitem saída
    if from_state in TERMINAL_STATES:
        return False

    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in AppointmentStatus:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, AppointmentStatus):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
