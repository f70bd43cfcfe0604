"""
Testes abrangentes para o módulo FSM de agendamentos.

- Testamos comportamento e contrato público
- Um teste cobre múltiplos componentes relacionados
- Foco em cenários válidos + inválidos + bordas
"""

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    INITIAL_STATES,
    SLOT_HOLDING_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    AppointmentStateMachine,
    AppointmentStatus,
    GuardResult,
    StateTransition,
    TransitionResult,
    create_fsm,
    evaluate_guards,
    get_valid_targets,
    holds_slot,
    is_terminal,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)
from fsm.rules.guards import (
    DEFAULT_GUARDS,
    guard_same_state,
    guard_terminal_state,
    guard_valid_state,
)

S = AppointmentStatus


class TestAppointmentStatusAndTerminals:
    """Enum, TERMINAL_STATES, SLOT_HOLDING_STATES e helpers."""

    def test_status_values_match_remote_strings(self) -> None:
        """Valores do enum são os gravados no store remoto."""
        assert [status.value for status in S] == [
            "Scheduled",
            "Checked-In",
            "In-Consultation",
            "Completed",
            "Cancelled",
        ]
        assert S("Checked-In") is S.CHECKED_IN

    def test_terminal_and_slot_holding_sets(self) -> None:
        """Completed/Cancelled são terminais; só Cancelled libera o slot."""
        assert TERMINAL_STATES == {S.COMPLETED, S.CANCELLED}
        assert SLOT_HOLDING_STATES == set(S) - {S.CANCELLED}
        assert DEFAULT_INITIAL_STATE == S.SCHEDULED
        assert INITIAL_STATES == frozenset({S.SCHEDULED})

        for status in S:
            assert is_terminal(status) is (status in TERMINAL_STATES)
            assert holds_slot(status) is (status != S.CANCELLED)
            assert is_valid_state(status) is True

        assert is_valid_state("Scheduled") is False


class TestTransitionMap:
    """VALID_TRANSITIONS e funções de consulta."""

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (S.SCHEDULED, S.CHECKED_IN),
            (S.SCHEDULED, S.IN_CONSULTATION),
            (S.SCHEDULED, S.CANCELLED),
            (S.CHECKED_IN, S.IN_CONSULTATION),
            (S.CHECKED_IN, S.CANCELLED),
            (S.IN_CONSULTATION, S.COMPLETED),
            (S.IN_CONSULTATION, S.CANCELLED),
        ],
    )
    def test_allowed_transitions(self, source: S, target: S) -> None:
        assert is_transition_valid(source, target) is True
        assert target in get_valid_targets(source)

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (S.CHECKED_IN, S.SCHEDULED),
            (S.IN_CONSULTATION, S.SCHEDULED),
            (S.IN_CONSULTATION, S.CHECKED_IN),
            (S.SCHEDULED, S.COMPLETED),
            (S.CHECKED_IN, S.COMPLETED),
            (S.COMPLETED, S.SCHEDULED),
            (S.COMPLETED, S.CANCELLED),
            (S.CANCELLED, S.SCHEDULED),
        ],
    )
    def test_rejected_transitions(self, source: S, target: S) -> None:
        assert is_transition_valid(source, target) is False

    def test_map_is_complete_and_consistent(self) -> None:
        """Todo estado está no mapa; terminais não têm destinos."""
        assert set(VALID_TRANSITIONS) == set(S)
        assert validate_transition_map() == []
        for status in TERMINAL_STATES:
            assert get_valid_targets(status) == frozenset()


class TestGuards:
    """Guards individuais e avaliação em cadeia."""

    def test_guard_result_factories(self) -> None:
        assert GuardResult.allow().allowed is True
        denied = GuardResult.deny("motivo")
        assert denied.allowed is False
        assert denied.reason == "motivo"

    def test_individual_guards(self) -> None:
        assert guard_valid_state(S.SCHEDULED, S.CHECKED_IN).allowed is True
        assert guard_valid_state("Scheduled", S.CHECKED_IN).allowed is False  # type: ignore[arg-type]

        terminal = guard_terminal_state(S.COMPLETED, S.SCHEDULED)
        assert terminal.allowed is False
        assert "terminal" in (terminal.reason or "")

        reflexive = guard_same_state(S.CHECKED_IN, S.CHECKED_IN)
        assert reflexive.allowed is False
        assert "reflexiva" in (reflexive.reason or "")

    def test_evaluate_guards_returns_first_denial(self) -> None:
        assert len(DEFAULT_GUARDS) == 3
        assert evaluate_guards(S.SCHEDULED, S.CHECKED_IN).allowed is True
        result = evaluate_guards(S.CANCELLED, S.CANCELLED)
        assert result.allowed is False
        assert "terminal" in (result.reason or "")

        custom = evaluate_guards(
            S.SCHEDULED,
            S.CHECKED_IN,
            guards=[lambda _a, _b: GuardResult.deny("bloqueado")],
        )
        assert custom.reason == "bloqueado"


class TestAppointmentStateMachine:
    """Máquina de estados: transições, histórico e resumo."""

    def test_full_lifecycle_records_history(self) -> None:
        machine = create_fsm("apt-1")
        assert machine.current_state == S.SCHEDULED

        for target, trigger in (
            (S.CHECKED_IN, "check_in"),
            (S.IN_CONSULTATION, "vitals_recorded"),
            (S.COMPLETED, "encounter_end"),
        ):
            result = machine.transition(target, trigger=trigger)
            assert isinstance(result, TransitionResult)
            assert result.success is True

        assert machine.current_state == S.COMPLETED
        assert machine.is_terminal is True
        assert [t.trigger for t in machine.history] == [
            "check_in",
            "vitals_recorded",
            "encounter_end",
        ]
        assert machine.get_valid_targets() == frozenset()

    def test_invalid_transition_keeps_state(self) -> None:
        """Completed → Scheduled é rejeitada sem alterar o estado."""
        machine = AppointmentStateMachine(S.COMPLETED, appointment_id="apt-2")
        result = machine.transition(S.SCHEDULED, trigger="manual")

        assert result.success is False
        assert result.transition is None
        assert result.error_reason
        assert machine.current_state == S.COMPLETED
        assert machine.history == []

    def test_backward_transition_is_rejected_by_map(self) -> None:
        machine = AppointmentStateMachine(S.IN_CONSULTATION)
        result = machine.transition(S.CHECKED_IN, trigger="manual")
        assert result.success is False
        assert "Transição inválida" in (result.error_reason or "")
        assert machine.can_transition_to(S.COMPLETED) is True
        assert machine.can_transition_to(S.CHECKED_IN) is False

    def test_transition_record_is_log_safe(self) -> None:
        machine = AppointmentStateMachine(S.SCHEDULED, appointment_id="apt-3")
        result = machine.transition(S.CANCELLED, trigger="cancel", metadata={"source": "desk"})

        transition = result.transition
        assert isinstance(transition, StateTransition)
        log_dict = transition.to_log_dict()
        assert log_dict["from_state"] == "SCHEDULED"
        assert log_dict["to_state"] == "CANCELLED"
        assert log_dict["metadata"] == {"source": "desk"}

        summary = machine.get_state_summary()
        assert summary["appointment_id"] == "apt-3"
        assert summary["is_terminal"] is True
        assert summary["transition_count"] == 1

    def test_invariants_of_result_types(self) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(from_state=S.SCHEDULED, to_state=S.CANCELLED, trigger=" ")
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)
