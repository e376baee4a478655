from .compiler import UNDEFINED, Direction, Move, TransitionTable, compile_transitions, parse_instruction
from .config_loader import Definition, load_definition, machine_from_dict, machine_to_dict, save_definition
from .definition import HeadStartPolicy, PotentialTransition, TuringMachine, potential_transitions_from_cells
from .errors import ConfigError, InvalidOperation, RunInProgress, TuringSimError, ValidationFailure
from .machine import ExecutionEngine, ExecutionSnapshot, ProgramResult, Status
from .runner import CancellationToken, RunController, RunHandle
from .tape import Tape
from .validator import formal_description, should_simulation_be_enabled, validate

__all__ = [
    "UNDEFINED",
    "CancellationToken",
    "ConfigError",
    "Definition",
    "Direction",
    "ExecutionEngine",
    "ExecutionSnapshot",
    "HeadStartPolicy",
    "InvalidOperation",
    "Move",
    "PotentialTransition",
    "ProgramResult",
    "RunController",
    "RunHandle",
    "RunInProgress",
    "Status",
    "Tape",
    "TransitionTable",
    "TuringMachine",
    "TuringSimError",
    "ValidationFailure",
    "compile_transitions",
    "formal_description",
    "load_definition",
    "machine_from_dict",
    "machine_to_dict",
    "parse_instruction",
    "potential_transitions_from_cells",
    "save_definition",
    "should_simulation_be_enabled",
    "validate",
]
