"""
Guards e invariantes para transições de agendamento.

Guards são avaliados antes do mapa de transições e explicam o bloqueio
(estado terminal, transição reflexiva).
Todos devem permitir para a transição prosseguir.
"""

from collections.abc import Callable

from fsm.states.appointment import TERMINAL_STATES, AppointmentStatus


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[AppointmentStatus, AppointmentStatus], GuardResult]


def guard_valid_state(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
) -> GuardResult:
    """Guard: ambos os estados precisam ser AppointmentStatus."""
    if not isinstance(from_state, AppointmentStatus):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")

    if not isinstance(to_state, AppointmentStatus):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")

    return GuardResult.allow()


def guard_terminal_state(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
) -> GuardResult:
    """
    Guard: Estados terminais não permitem saída.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino (não usado, mas necessário para assinatura)

    Returns:
        GuardResult indicando se transição é permitida
    """
    del to_state
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
) -> GuardResult:
    """Guard: nenhuma transição reflexiva é permitida."""
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


# Lista de guards a serem aplicados em ordem
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
