import logging
from dataclasses import replace

import pytest

from turing_sim.compiler import compile_transitions
from turing_sim.definition import HeadStartPolicy
from turing_sim.errors import ConfigError, InvalidOperation, ValidationFailure
from turing_sim.machine import ExecutionEngine, Status


def test_accepts_scenario_a(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("01")
    result = engine.run_to_completion()
    assert result.status is Status.ACCEPTED
    assert result.accepted
    assert result.tape == "10"
    assert result.state == 2
    assert result.state_label == "q2"
    assert result.head == 1
    assert result.steps == 2


def test_rejects_scenario_b(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("00")
    result = engine.run_to_completion()
    assert result.status is Status.REJECTED
    assert result.tape == "10"
    assert result.state == 1
    assert result.head == 1
    assert result.reason == "No existe transición definida"


def test_single_step_scenario_e(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("01")
    snapshot = engine.step()
    assert snapshot.head == 1
    assert snapshot.state == 1
    assert snapshot.tape == "11"
    assert snapshot.status is Status.RUNNING
    assert not snapshot.halted


def test_result_points_at_grid_cell(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("00")
    result = engine.run_to_completion()
    # q1 is column 2 (one reserved symbol column), '0' is the first row.
    assert (result.column, result.row) == (2, 0)


def test_head_start_from_rightmost(make_machine):
    machine = make_machine(
        {(0, "1"): "0/1/L", (0, "0"): "1/0/S"},
        alphabet=("0", "1"),
        state_count=2,
        final_states={1},
        head_start=HeadStartPolicy.FROM_RIGHTMOST_SYMBOL,
    )
    engine = ExecutionEngine(machine)
    assert engine.reset("011").head == 2
    result = engine.run_to_completion()
    assert result.status is Status.ACCEPTED
    assert result.head == 0
    assert result.steps == 3


def test_tape_grows_to_the_right(unary_increment):
    engine = ExecutionEngine(unary_increment)
    engine.reset("11")
    result = engine.run_to_completion()
    assert result.status is Status.ACCEPTED
    assert result.tape == "111"
    assert result.steps == 3


def test_tape_grows_to_the_left(make_machine):
    machine = make_machine(
        {(0, "1"): "0/1/L", (0, "_"): "1/1/S"},
        alphabet=("1",),
        blank_symbol="_",
        state_count=2,
        final_states={1},
    )
    engine = ExecutionEngine(machine)
    engine.reset("1")
    result = engine.run_to_completion()
    assert result.tape == "11"
    assert result.head == -1


def test_undefined_transition_on_final_state_accepts(make_machine):
    machine = make_machine({}, alphabet=("0",), state_count=1, final_states={0})
    engine = ExecutionEngine(machine)
    snapshot = engine.reset("0")
    assert snapshot.status is Status.ACCEPTED
    assert engine.run_to_completion().steps == 0


def test_arrival_at_final_state_ignores_its_instructions(make_machine):
    machine = make_machine(
        {(0, "0"): "1/0/R", (1, "0"): "0/0/R", (1, " "): "0/0/R"},
        alphabet=("0",),
        state_count=2,
        final_states={1},
    )
    engine = ExecutionEngine(machine)
    engine.reset("00")
    result = engine.run_to_completion()
    assert result.status is Status.ACCEPTED
    assert result.steps == 1


def test_step_and_run_agree(unary_increment):
    stepped = ExecutionEngine(unary_increment)
    stepped.reset("1111")
    snapshots = []
    while not stepped.status.terminal:
        snapshots.append(stepped.step())

    ran = ExecutionEngine(unary_increment)
    ran.reset("1111")
    result = ran.run_to_completion()

    assert snapshots[-1].status is result.status
    assert snapshots[-1].steps == result.steps
    assert snapshots[-1].tape == result.tape
    assert snapshots[-1].head == result.head


def test_step_before_reset_is_invalid(scenario_machine):
    with pytest.raises(InvalidOperation):
        ExecutionEngine(scenario_machine).step()


def test_step_after_halt_is_invalid(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("00")
    engine.run_to_completion()
    with pytest.raises(InvalidOperation, match="ya se detuvo"):
        engine.step()


def test_reset_discards_progress(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("00")
    engine.run_to_completion()
    snapshot = engine.reset("01")
    assert snapshot.status is Status.RUNNING
    assert (snapshot.head, snapshot.state, snapshot.steps, snapshot.tape) == (0, 0, 0, "01")


def test_step_with_new_tape(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    engine.reset("00")
    engine.step()
    snapshot = engine.step_with_tape("01")
    assert (snapshot.head, snapshot.state, snapshot.tape, snapshot.steps) == (1, 1, "11", 1)


def test_reset_refuses_invalid_tape(scenario_machine):
    engine = ExecutionEngine(scenario_machine)
    with pytest.raises(ValidationFailure, match="fuera del alfabeto"):
        engine.reset("2")
    with pytest.raises(ValidationFailure, match="vacía"):
        engine.reset("")
    assert not engine.initialized


def test_reset_surfaces_compile_errors(make_machine):
    machine = make_machine({(0, "0"): "1/0"}, alphabet=("0",), state_count=2, final_states={1})
    with pytest.raises(ConfigError):
        ExecutionEngine(machine).reset("0")


def test_start_state_out_of_range_is_config_error(scenario_machine):
    with pytest.raises(ConfigError):
        ExecutionEngine(replace(scenario_machine, first_state_index=5))


def test_cancel_check_stops_before_next_step(looping_machine):
    engine = ExecutionEngine(looping_machine)
    engine.reset("0")
    calls = []

    def cancel_after_five():
        calls.append(1)
        return len(calls) > 5

    result = engine.run_to_completion(cancel_after_five)
    assert result.status is Status.TIMED_OUT
    assert result.steps == 5
    with pytest.raises(InvalidOperation):
        engine.step()


def test_cancellation_is_logged(looping_machine, caplog):
    engine = ExecutionEngine(looping_machine)
    engine.reset("0")
    with caplog.at_level(logging.INFO, logger="turing_sim"):
        engine.run_to_completion(lambda: True)
    assert any("cancelada tras 0 pasos" in rec.message for rec in caplog.records)


def test_head_beyond_written_tape(make_machine):
    machine = make_machine({(0, "0"): "0/0/R"}, alphabet=("0",), state_count=2, final_states={1})
    engine = ExecutionEngine(machine)
    assert engine.is_head_beyond_written_tape()
    engine.reset("0")
    assert not engine.is_head_beyond_written_tape()
    engine.step()
    assert engine.is_head_beyond_written_tape()


def test_precompiled_table_is_used(scenario_machine):
    table = compile_transitions(scenario_machine)
    engine = ExecutionEngine(scenario_machine, table)
    assert engine.table is table
