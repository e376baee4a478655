import pytest

from turing_sim.compiler import UNDEFINED, Direction, Move, compile_transitions, parse_instruction
from turing_sim.definition import PotentialTransition, TuringMachine
from turing_sim.errors import ConfigError

MACHINE = TuringMachine(alphabet=("0", "1"), state_count=3, final_states={2})


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1/1/Right", Move(1, "1", Direction.RIGHT)),
        ("2/0/Stay", Move(2, "0", Direction.STAY)),
        ("0/1/L", Move(0, "1", Direction.LEFT)),
        ("0/1/P", Move(0, "1", Direction.RIGHT)),
        ("0/1/-", Move(0, "1", Direction.STAY)),
        (" 2/ /left ", Move(2, " ", Direction.LEFT)),
    ],
)
def test_parse_instruction(text, expected):
    assert parse_instruction(text, MACHINE) == expected


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_instruction_is_undefined(text):
    assert parse_instruction(text, MACHINE) is UNDEFINED


@pytest.mark.parametrize(
    "text, problem",
    [
        ("1/1", "se esperaban 3 campos"),
        ("1/1/R/R", "exactamente un carácter"),
        ("x/1/R", "no es un número"),
        ("3/1/R", "fuera de 0..2"),
        ("-1/1/R", "fuera de 0..2"),
        ("1/10/R", "exactamente un carácter"),
        ("1//R", "exactamente un carácter"),
        ("1/2/R", "no pertenece al alfabeto"),
        ("1/1/up", "dirección no reconocida"),
    ],
)
def test_malformed_instruction_raises(text, problem):
    with pytest.raises(ConfigError, match=problem):
        parse_instruction(text, MACHINE, 0, "0")


def test_slash_can_be_written_when_in_the_alphabet():
    machine = TuringMachine(alphabet=("0", "/"), state_count=2)
    assert parse_instruction("0///R", machine) == Move(0, "/", Direction.RIGHT)
    assert parse_instruction("1///L", machine).format() == "1///L"


def test_slash_outside_the_alphabet_is_rejected():
    with pytest.raises(ConfigError, match="no pertenece al alfabeto"):
        parse_instruction("0///R", MACHINE, 0, "0")


def test_error_names_the_cell():
    with pytest.raises(ConfigError) as info:
        compile_transitions(MACHINE, [PotentialTransition(1, "0", "9/0/R")])
    assert "q1" in str(info.value)
    assert info.value.state == 1
    assert info.value.symbol == "0"


def test_compile_records_moves_and_undefined(scenario_machine):
    table = compile_transitions(scenario_machine)
    assert table.lookup(0, "0") == Move(1, "1", Direction.RIGHT)
    assert table.lookup(1, "1") == Move(2, "0", Direction.STAY)
    assert table.lookup(1, "0") is UNDEFINED
    assert table.lookup(0, " ") is UNDEFINED
    assert len(table.moves()) == 2


def test_compile_is_idempotent(scenario_machine):
    assert compile_transitions(scenario_machine) == compile_transitions(scenario_machine)


def test_compile_rejects_symbol_outside_alphabet():
    with pytest.raises(ConfigError, match="no pertenece al alfabeto"):
        compile_transitions(MACHINE, [PotentialTransition(0, "7", "1/1/R")])


def test_compile_rejects_conflicting_duplicates():
    cells = [PotentialTransition(0, "0", "1/1/R"), PotentialTransition(0, "0", "2/1/R")]
    with pytest.raises(ConfigError, match="en conflicto"):
        compile_transitions(MACHINE, cells)


def test_compile_follows_machine_changes(scenario_machine):
    shrunk = TuringMachine(
        alphabet=scenario_machine.alphabet,
        state_count=2,
        final_states={1},
        potential_transitions=scenario_machine.potential_transitions,
    )
    with pytest.raises(ConfigError, match="fuera de 0..1"):
        compile_transitions(shrunk)
