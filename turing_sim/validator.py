from __future__ import annotations

from typing import List, Tuple

from .compiler import Move, compile_transitions
from .definition import TuringMachine, state_label
from .errors import ConfigError, ValidationFailure

READY_STATUS = "Configuración completa."


def _foreign_symbols(tape: str, machine: TuringMachine) -> List[str]:
    allowed = machine.tape_symbols
    foreign: List[str] = []
    for symbol in tape:
        if symbol not in allowed and symbol not in foreign:
            foreign.append(symbol)
    return foreign


def validate(tape: str, machine: TuringMachine) -> bool:
    """Indica si la cinta no está vacía y solo usa símbolos del alfabeto o el blanco."""

    return bool(tape) and not _foreign_symbols(tape, machine)


def ensure_valid_tape(tape: str, machine: TuringMachine) -> None:
    """Lanza :class:`ValidationFailure` con un mensaje para el usuario si la cinta no es válida."""

    if not tape:
        raise ValidationFailure("La cinta está vacía.")
    foreign = _foreign_symbols(tape, machine)
    if foreign:
        listed = ", ".join(repr(symbol) for symbol in foreign)
        raise ValidationFailure(f"La entrada contiene símbolos fuera del alfabeto: {listed}.")


def missing_configuration(machine: TuringMachine) -> List[str]:
    """Lista lo que falta configurar antes de que tenga sentido simular la MT."""

    missing: List[str] = []
    if not machine.alphabet:
        missing.append("al menos un símbolo de entrada")
    if machine.blank_symbol in machine.alphabet:
        missing.append(f"un alfabeto sin el símbolo en blanco {machine.blank_symbol!r}")
    if len(machine.blank_symbol) != 1 or any(len(symbol) != 1 for symbol in machine.alphabet):
        missing.append("símbolos de un solo carácter")
    if machine.state_count < 1:
        missing.append("al menos un estado")
        return missing
    if not 0 <= machine.first_state_index < machine.state_count:
        missing.append(f"un estado inicial entre q0..{state_label(machine.state_count - 1)}")
    if not machine.final_states:
        missing.append("al menos un estado final")
    outside = sorted(state for state in machine.final_states if not 0 <= state < machine.state_count)
    if outside:
        missing.append("estados finales dentro del rango (hay " + ", ".join(state_label(s) for s in outside) + ")")

    try:
        table = compile_transitions(machine)
    except ConfigError as exc:
        missing.append(f"una tabla de transiciones válida ({exc})")
        return missing

    gaps = [
        f"{state_label(state)}/{symbol!r}"
        for state in machine.states
        if not machine.is_final(state)
        for symbol in machine.grid_symbols()
        if not isinstance(table.lookup(state, symbol), Move)
    ]
    if gaps:
        missing.append("transiciones para " + ", ".join(gaps))
    return missing


def should_simulation_be_enabled(machine: TuringMachine) -> Tuple[bool, str]:
    """Indica si la MT está lista para simular, junto con la línea de estado del editor."""

    missing = missing_configuration(machine)
    if not missing:
        return True, READY_STATUS
    return False, "Falta: " + "; ".join(missing) + "."


def formal_description(machine: TuringMachine) -> str:
    """Representa la MT como la tupla M=<Q,Σ,Γ,δ,q0,B,F>."""

    def as_set(items) -> str:
        return "{" + ", ".join(items) + "}"

    states = as_set(state_label(state) for state in machine.states)
    sigma = as_set(machine.alphabet)
    gamma = as_set(list(machine.alphabet) + [_show_blank(machine.blank_symbol)])
    finals = as_set(state_label(state) for state in sorted(machine.final_states))
    return (
        f"M=<Q,Σ,Γ,δ,{state_label(machine.first_state_index)},B,F>, "
        f"Q={states}, Σ={sigma}, Γ={gamma}, "
        f"B={_show_blank(machine.blank_symbol)}, F={finals}"
    )


def _show_blank(symbol: str) -> str:
    return "␣" if symbol == " " else symbol
