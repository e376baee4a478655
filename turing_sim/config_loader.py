from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Tuple

import yaml

from .definition import (
    DEFAULT_BLANK,
    HeadStartPolicy,
    PotentialTransition,
    TuringMachine,
    potential_transitions_from_cells,
    state_label,
)
from .errors import ConfigError
from .runner import DEFAULT_DEADLINE_MS


@dataclass(frozen=True)
class Definition:
    """Una MT junto con la configuración de simulación guardada con ella."""

    machine: TuringMachine
    simulation_strings: List[str] = field(default_factory=list)
    deadline_ms: int = DEFAULT_DEADLINE_MS


def _normalize_config(data: Dict) -> Dict:
    """Acepta archivos con o sin el nodo 'machine' en la raíz."""

    if "machine" in data and isinstance(data["machine"], dict):
        return data["machine"]
    return data


def _as_symbol_list(value, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = list(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"'{key}' debe ser una lista de caracteres.")
    symbols = []
    for item in value:
        item = str(item)
        if len(item) != 1:
            raise ValueError(f"El símbolo {item!r} de '{key}' debe tener exactamente un carácter.")
        symbols.append(item)
    return symbols


def _as_int(value, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' debe ser un entero, se recibió {value!r}.")
    return value


def machine_from_dict(config: Dict, fill_grid: bool = False) -> TuringMachine:
    """Construye una :class:`TuringMachine` a partir del diccionario de un archivo.

    La lista 'delta' se conserva tal cual, en el mismo orden. Con
    ``fill_grid`` se completa con celdas vacías hasta cubrir toda la tabla.
    """

    config = _normalize_config(config)

    alphabet = _as_symbol_list(config.get("alphabet", []), "alphabet")
    blank_symbol = str(config.get("blank", DEFAULT_BLANK))
    if len(blank_symbol) != 1:
        raise ValueError("'blank' debe tener exactamente un carácter.")
    # El blanco nunca forma parte del alfabeto de entrada.
    alphabet = [symbol for symbol in alphabet if symbol != blank_symbol]

    state_count = _as_int(config.get("states", 1), "states")
    if state_count < 1:
        raise ValueError("'states' debe ser al menos 1.")
    initial = _as_int(config.get("initial", 0), "initial")
    if not 0 <= initial < state_count:
        raise ValueError(f"'initial' debe estar entre 0..{state_count - 1}.")

    final_states = config.get("final", [])
    if isinstance(final_states, int) and not isinstance(final_states, bool):
        final_states = [final_states]
    if not isinstance(final_states, (list, tuple)):
        raise ValueError("'final' debe ser una lista de números de estado.")
    final_states = [_as_int(state, "final") for state in final_states]
    for final_state in final_states:
        if not 0 <= final_state < state_count:
            raise ValueError(f"El estado final {final_state} está fuera de 0..{state_count - 1}.")

    head_start = HeadStartPolicy.parse(config.get("head", HeadStartPolicy.FROM_LEFTMOST_SYMBOL.value))

    colors = config.get("colors") or {}
    if not isinstance(colors, dict):
        raise ValueError("'colors' debe ser un diccionario.")

    machine = TuringMachine(
        alphabet=alphabet,
        blank_symbol=blank_symbol,
        state_count=state_count,
        first_state_index=initial,
        final_states=final_states,
        head_start=head_start,
        transition_color=str(colors.get("transition", "red")),
        symbol_color=str(colors.get("symbol", "blue")),
    )

    delta = config.get("delta") or []
    if not isinstance(delta, list):
        raise ValueError("El bloque 'delta' debe ser una lista de transiciones.")

    transitions: List[PotentialTransition] = []
    cells: Dict[Tuple[int, str], str] = {}
    for index, raw_transition in enumerate(delta):
        if not isinstance(raw_transition, dict):
            raise ValueError(f"La transición delta[{index}] debe tener 'state', 'symbol' e 'instruction'.")
        missing = [key for key in ("state", "symbol") if key not in raw_transition]
        if missing:
            raise ValueError(f"A la transición delta[{index}] le falta {', '.join(missing)}.")
        state = _as_int(raw_transition["state"], f"delta[{index}].state")
        symbol = str(raw_transition["symbol"])
        instruction = str(raw_transition.get("instruction") or "")
        key = (state, symbol)
        if key in cells and cells[key].strip() != instruction.strip():
            raise ConfigError(
                f"Transición delta[{index}]: la celda ({state_label(state)}, {symbol!r}) ya tiene "
                f"la instrucción {cells[key]!r}, en conflicto con {instruction!r}.",
                state=state,
                symbol=symbol,
            )
        cells[key] = instruction
        transitions.append(PotentialTransition(state, symbol, instruction))

    if fill_grid:
        return replace(machine, potential_transitions=potential_transitions_from_cells(machine, cells))
    return replace(machine, potential_transitions=transitions)


def machine_to_dict(machine: TuringMachine) -> Dict:
    """Inversa de :func:`machine_from_dict`; las transiciones se escriben en su orden."""

    return {
        "alphabet": list(machine.alphabet),
        "blank": machine.blank_symbol,
        "states": machine.state_count,
        "initial": machine.first_state_index,
        "final": sorted(machine.final_states),
        "head": machine.head_start.value,
        "colors": {"transition": machine.transition_color, "symbol": machine.symbol_color},
        "delta": [_transition_to_dict(pt) for pt in machine.potential_transitions],
    }


def _transition_to_dict(transition: PotentialTransition) -> Dict:
    return {"state": transition.state, "symbol": transition.symbol, "instruction": transition.instruction}


def load_definition(path: str | Path, fill_grid: bool = False) -> Definition:
    """Carga y valida un archivo YAML que describe una MT."""

    with Path(path).open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle)

    if not isinstance(raw_data, dict):
        raise ValueError("El archivo YAML debe describir un diccionario.")

    machine = machine_from_dict(raw_data, fill_grid=fill_grid)

    simulation = raw_data.get("simulation") or {}
    if not isinstance(simulation, dict):
        raise ValueError("El bloque 'simulation' debe ser un diccionario.")

    simulation_strings = simulation.get("strings") or raw_data.get("simulation_strings") or []
    if isinstance(simulation_strings, str):
        simulation_strings = [simulation_strings]
    simulation_strings = [str(value) for value in simulation_strings]

    deadline_ms = _as_int(simulation.get("deadline_ms", DEFAULT_DEADLINE_MS), "simulation.deadline_ms")
    if deadline_ms < 1:
        raise ValueError("'simulation.deadline_ms' debe ser al menos 1.")

    return Definition(machine=machine, simulation_strings=simulation_strings, deadline_ms=deadline_ms)


def save_definition(path: str | Path, definition: Definition) -> None:
    data = {
        "machine": machine_to_dict(definition.machine),
        "simulation": {
            "strings": list(definition.simulation_strings),
            "deadline_ms": definition.deadline_ms,
        },
    }
    with Path(path).open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, allow_unicode=True, sort_keys=False)
