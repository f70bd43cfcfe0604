"""
Máquina de estados do ciclo de vida de um agendamento.

A máquina não persiste nada: ela decide se uma transição é permitida
e produz o registro da transição. Quem aplica o novo status no
EntityStore é o AppointmentWorkflow, via MutationCoordinator.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.appointment import (
    DEFAULT_INITIAL_STATE,
    AppointmentStatus,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class AppointmentStateMachine:
    """
    Máquina de estados de um agendamento.

    Attributes:
        current_state: Estado atual da máquina
        history: Transições realizadas nesta instância
    """

    __slots__ = ("_appointment_id", "_current_state", "_history")

    def __init__(
        self,
        initial_state: AppointmentStatus | None = None,
        appointment_id: str = "",
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_state: Estado atual do agendamento (SCHEDULED se None)
            appointment_id: Identificador do agendamento para logs
        """
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._appointment_id = appointment_id

    @property
    def current_state(self) -> AppointmentStatus:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def appointment_id(self) -> str:
        return self._appointment_id

    @property
    def is_terminal(self) -> bool:
        """Verifica se está em estado terminal."""
        return is_terminal(self._current_state)

    def can_transition_to(self, target: AppointmentStatus) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[AppointmentStatus]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: AppointmentStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'check_in', 'cancel')
            metadata: Dados adicionais para logs (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        # Guards primeiro: explicam melhor o motivo (terminal, reflexiva)
        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "appointment_id": self._appointment_id,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }


def create_fsm(
    appointment_id: str,
    initial_state: AppointmentStatus | None = None,
) -> AppointmentStateMachine:
    """
    Factory function para criar uma FSM de agendamento.

    Args:
        appointment_id: Identificador do agendamento
        initial_state: Estado atual (opcional)

    Returns:
        AppointmentStateMachine configurada
    """
    return AppointmentStateMachine(
        initial_state=initial_state,
        appointment_id=appointment_id,
    )


# Constantes re-exportadas para conveniência
INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})
