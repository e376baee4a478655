from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Tuple, Union

from .definition import PotentialTransition, TuringMachine, state_label
from .errors import ConfigError

logger = logging.getLogger(__name__)


class Direction(Enum):
    LEFT = -1
    STAY = 0
    RIGHT = 1

    @classmethod
    def parse(cls, token: str) -> "Direction":
        try:
            return _DIRECTION_TOKENS[token.strip().lower()]
        except KeyError:
            raise ValueError(f"dirección no reconocida {token!r}") from None

    @property
    def token(self) -> str:
        return {Direction.LEFT: "L", Direction.STAY: "S", Direction.RIGHT: "R"}[self]


# "P" (prawo) y "-" vienen de la notación polaca de la tabla "L, P, -".
_DIRECTION_TOKENS = {
    "l": Direction.LEFT,
    "left": Direction.LEFT,
    "r": Direction.RIGHT,
    "right": Direction.RIGHT,
    "p": Direction.RIGHT,
    "s": Direction.STAY,
    "stay": Direction.STAY,
    "n": Direction.STAY,
    "-": Direction.STAY,
}


@dataclass(frozen=True)
class Move:
    """Escribe ``write_symbol``, mueve la cabeza y pasa a ``next_state``."""

    next_state: int
    write_symbol: str
    direction: Direction

    def format(self) -> str:
        return f"{self.next_state}/{self.write_symbol}/{self.direction.token}"


class _Undefined:
    """La celda no tiene instrucción."""

    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

Action = Union[Move, _Undefined]
TransitionKey = Tuple[int, str]


class TransitionTable(Mapping[TransitionKey, Action]):
    """Tabla compilada de solo lectura: ``(estado, símbolo)`` -> acción."""

    def __init__(self, entries: Mapping[TransitionKey, Action]) -> None:
        self._entries: Dict[TransitionKey, Action] = dict(entries)

    def __getitem__(self, key: TransitionKey) -> Action:
        return self._entries[key]

    def __iter__(self) -> Iterator[TransitionKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TransitionTable):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._entries.items()))

    def __repr__(self) -> str:
        return f"TransitionTable({self._entries!r})"

    def lookup(self, state: int, symbol: str) -> Action:
        return self._entries.get((state, symbol), UNDEFINED)

    def moves(self) -> Dict[TransitionKey, Move]:
        return {key: action for key, action in self._entries.items() if isinstance(action, Move)}


def parse_instruction(
    instruction: str,
    machine: TuringMachine,
    state: int | None = None,
    symbol: str | None = None,
) -> Action:
    """Interpreta una celda de la forma ``estado/símbolo/dirección``.

    Una celda vacía indica que la transición no está definida. El símbolo es
    todo lo que queda entre la primera y la última ``/``, de modo que ``/``
    también se puede escribir en la cinta. Cualquier otro error de formato
    lanza :class:`ConfigError`.
    """

    if instruction is None or not instruction.strip():
        return UNDEFINED

    where = _describe_cell(state, symbol)

    def fail(problem: str) -> ConfigError:
        return ConfigError(f"{where}: {problem} en la instrucción {instruction!r}", state=state, symbol=symbol)

    text = instruction.strip("\r\n\t")
    if text.count("/") < 2:
        raise fail(f"se esperaban 3 campos separados por '/', hay {text.count('/') + 1}")
    raw_state, _, rest = text.partition("/")
    write_symbol, _, raw_direction = rest.rpartition("/")

    try:
        next_state = int(raw_state.strip())
    except ValueError:
        raise fail(f"el estado {raw_state.strip()!r} no es un número") from None
    if not 0 <= next_state < machine.state_count:
        raise fail(f"el estado {next_state} está fuera de 0..{machine.state_count - 1}")

    # El símbolo se toma literal para poder escribir un blanco que sea espacio.
    if len(write_symbol) != 1:
        raise fail(f"el símbolo a escribir {write_symbol!r} debe tener exactamente un carácter")
    if write_symbol not in machine.tape_symbols:
        raise fail(f"el símbolo a escribir {write_symbol!r} no pertenece al alfabeto")

    try:
        direction = Direction.parse(raw_direction)
    except ValueError as exc:
        raise fail(str(exc)) from None

    return Move(next_state=next_state, write_symbol=write_symbol, direction=direction)


def compile_transitions(
    machine: TuringMachine,
    potential_transitions: Iterable[PotentialTransition] | None = None,
) -> TransitionTable:
    """Construye la tabla de transiciones de ``machine``.

    ``potential_transitions`` toma por defecto la lista de la propia MT. El
    resultado depende solo de sus entradas: compilar dos veces da tablas iguales.
    """

    if potential_transitions is None:
        potential_transitions = machine.potential_transitions

    entries: Dict[TransitionKey, Action] = {}
    raw: Dict[TransitionKey, str] = {}
    for potential in potential_transitions:
        key = (potential.state, potential.symbol)
        instruction = potential.instruction or ""
        if instruction.strip():
            if not 0 <= potential.state < machine.state_count:
                raise ConfigError(
                    f"{_describe_cell(*key)}: el estado está fuera de 0..{machine.state_count - 1}",
                    state=potential.state,
                    symbol=potential.symbol,
                )
            if potential.symbol not in machine.tape_symbols:
                raise ConfigError(
                    f"{_describe_cell(*key)}: el símbolo {potential.symbol!r} no pertenece al alfabeto",
                    state=potential.state,
                    symbol=potential.symbol,
                )
        action = parse_instruction(instruction, machine, *key)
        if key in entries and raw[key].strip() != instruction.strip():
            raise ConfigError(
                f"{_describe_cell(*key)}: instrucciones en conflicto {raw[key]!r} y {instruction!r}",
                state=potential.state,
                symbol=potential.symbol,
            )
        entries[key] = action
        raw[key] = instruction

    table = TransitionTable(entries)
    logger.debug("Compiladas %d celdas, %d movimientos", len(table), len(table.moves()))
    return table


def _describe_cell(state: int | None, symbol: str | None) -> str:
    if state is None:
        return "instrucción"
    return f"celda ({state_label(state)}, {symbol!r})"
