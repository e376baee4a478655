from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, List, Mapping, Optional, Set, Tuple

DEFAULT_BLANK = " "
RESERVED_COLUMNS = 1


class HeadStartPolicy(Enum):
    """Posición de la cabeza sobre la cinta de entrada antes del primer paso."""

    FROM_LEFTMOST_SYMBOL = "left"
    FROM_RIGHTMOST_SYMBOL = "right"

    @classmethod
    def parse(cls, value: str) -> "HeadStartPolicy":
        aliases = {
            "left": cls.FROM_LEFTMOST_SYMBOL,
            "lewa": cls.FROM_LEFTMOST_SYMBOL,
            "right": cls.FROM_RIGHTMOST_SYMBOL,
            "prawa": cls.FROM_RIGHTMOST_SYMBOL,
        }
        try:
            return aliases[str(value).strip().lower()]
        except KeyError:
            raise ValueError(f"Posición de cabeza desconocida {value!r}. Use 'left' o 'right'.") from None


@dataclass(frozen=True)
class PotentialTransition:
    """Una celda de la tabla de transiciones, tal como la escribió el usuario."""

    state: int
    symbol: str
    instruction: str = ""


def state_label(state: int) -> str:
    return f"q{state}"


@dataclass(frozen=True)
class TuringMachine:
    """Definición inmutable de una MT de una cinta.

    La tabla de transiciones compilada no se guarda aquí; se obtiene de
    ``potential_transitions`` con
    :func:`turing_sim.compiler.compile_transitions` cuando hace falta.
    """

    alphabet: Tuple[str, ...] = ()
    blank_symbol: str = DEFAULT_BLANK
    state_count: int = 1
    first_state_index: int = 0
    final_states: FrozenSet[int] = field(default_factory=frozenset)
    head_start: HeadStartPolicy = HeadStartPolicy.FROM_LEFTMOST_SYMBOL
    potential_transitions: Tuple[PotentialTransition, ...] = ()
    transition_color: str = "red"
    symbol_color: str = "blue"

    def __post_init__(self) -> None:
        # Acepta listas y conjuntos pero guarda valores ordenados y hashables.
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(self, "final_states", frozenset(self.final_states))
        object.__setattr__(self, "potential_transitions", tuple(self.potential_transitions))

    @property
    def tape_symbols(self) -> FrozenSet[str]:
        return frozenset(self.alphabet) | {self.blank_symbol}

    @property
    def states(self) -> range:
        return range(self.state_count)

    def is_final(self, state: int) -> bool:
        return state in self.final_states

    def grid_symbols(self) -> List[str]:
        """Orden de filas de la tabla: primero un blanco distinto de espacio, luego el alfabeto."""

        symbols = [self.blank_symbol] if self.blank_symbol != " " else []
        symbols.extend(symbol for symbol in self.alphabet if symbol != self.blank_symbol)
        return symbols

    def table_coordinates(self, state: int, symbol: str) -> Tuple[int, Optional[int]]:
        """(columna, fila) de la celda ``(estado, símbolo)``; la fila es ``None`` si no existe."""

        rows = self.grid_symbols()
        row = rows.index(symbol) if symbol in rows else None
        return state + RESERVED_COLUMNS, row

    def with_instruction(self, state: int, symbol: str, instruction: str) -> "TuringMachine":
        """Devuelve una copia con la celda ``(estado, símbolo)`` igual a ``instruction``."""

        cells = {(pt.state, pt.symbol): pt.instruction for pt in self.potential_transitions}
        cells[(state, symbol)] = instruction
        return replace(self, potential_transitions=potential_transitions_from_cells(self, cells))


def potential_transitions_from_cells(
    machine: TuringMachine,
    cells: Mapping[Tuple[int, str], str],
) -> Tuple[PotentialTransition, ...]:
    """Expande celdas dispersas ``{(estado, símbolo): instrucción}`` a la tabla completa.

    Cada par (estado, símbolo de fila) recibe una transición potencial; las
    celdas que el usuario no rellenó llevan una instrucción vacía. Las celdas
    fuera de la tabla se conservan para que la compilación las informe.
    """

    transitions: List[PotentialTransition] = []
    seen: Set[Tuple[int, str]] = set()
    for symbol in machine.grid_symbols():
        for state in machine.states:
            key = (state, symbol)
            seen.add(key)
            transitions.append(PotentialTransition(state, symbol, cells.get(key, "")))
    for (state, symbol), instruction in cells.items():
        if (state, symbol) not in seen:
            transitions.append(PotentialTransition(state, symbol, instruction))
    return tuple(transitions)
