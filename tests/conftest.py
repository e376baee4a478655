from dataclasses import replace

import pytest

from turing_sim.definition import HeadStartPolicy, TuringMachine, potential_transitions_from_cells


def build_machine(cells, **kwargs):
    machine = TuringMachine(**kwargs)
    return replace(machine, potential_transitions=potential_transitions_from_cells(machine, cells))


@pytest.fixture
def scenario_machine():
    """Three states, final q2: q0 on '0' -> 1/1/Right, q1 on '1' -> 2/0/Stay."""

    return build_machine(
        {(0, "0"): "1/1/Right", (1, "1"): "2/0/Stay"},
        alphabet=("0", "1"),
        state_count=3,
        first_state_index=0,
        final_states={2},
        head_start=HeadStartPolicy.FROM_LEFTMOST_SYMBOL,
    )


@pytest.fixture
def looping_machine():
    """q0 rewrites '0' forever; the final state q1 is never reached."""

    return build_machine(
        {(0, "0"): "0/0/S", (0, "1"): "0/1/S"},
        alphabet=("0", "1"),
        state_count=2,
        final_states={1},
    )


@pytest.fixture
def unary_increment():
    """Walk right over '1's and append one more on the first blank."""

    return build_machine(
        {(0, "1"): "0/1/R", (0, "_"): "1/1/S"},
        alphabet=("1",),
        blank_symbol="_",
        state_count=2,
        final_states={1},
    )


@pytest.fixture
def make_machine():
    return build_machine
