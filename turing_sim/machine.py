from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .compiler import Move, TransitionTable, compile_transitions
from .definition import TuringMachine, state_label
from .errors import ConfigError, InvalidOperation
from .tape import Tape
from .validator import ensure_valid_tape

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class Status(Enum):
    RUNNING = "running"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TIMED_OUT = "timed out"

    @property
    def terminal(self) -> bool:
        return self is not Status.RUNNING


REASONS = {
    Status.RUNNING: "En ejecución",
    Status.ACCEPTED: "Estado final alcanzado",
    Status.REJECTED: "No existe transición definida",
    Status.TIMED_OUT: "Ejecución cancelada antes de que la MT se detuviera",
}


@dataclass(frozen=True)
class ExecutionSnapshot:
    """Descripción instantánea (ID) de la MT después de un paso."""

    tape: str
    head: int
    state: int
    status: Status
    steps: int

    @property
    def halted(self) -> bool:
        return self.status.terminal

    @property
    def reason(self) -> str:
        return REASONS[self.status]

    def format(self) -> str:
        return (
            f"Paso {self.steps:04d}: estado={state_label(self.state)}, cabeza={self.head}\n"
            f"  cinta: {self.tape!r}"
        )


@dataclass(frozen=True)
class ProgramResult:
    """Resultado de una ejecución, con la celda de la tabla que se debe resaltar."""

    tape: str
    state: int
    state_label: str
    head: int
    column: int
    row: Optional[int]
    status: Status
    steps: int

    @property
    def accepted(self) -> bool:
        return self.status is Status.ACCEPTED

    @property
    def reason(self) -> str:
        return REASONS[self.status]

    def to_dict(self) -> dict:
        return {
            "tape": self.tape,
            "state": self.state,
            "state_label": self.state_label,
            "head": self.head,
            "column": self.column,
            "row": self.row,
            "status": self.status.value,
            "reason": self.reason,
            "steps": self.steps,
        }


class ExecutionEngine:
    """Simulador determinista de una cinta para una MT compilada.

    El motor es dueño de su cinta, cabeza y estado. No es seguro entre hilos:
    lo maneja un solo hilo, con llamadas a :meth:`step` o con un único
    :meth:`run_to_completion`.
    """

    def __init__(self, machine: TuringMachine, table: Optional[TransitionTable] = None) -> None:
        if not 0 <= machine.first_state_index < machine.state_count:
            raise ConfigError(
                f"El estado inicial {machine.first_state_index} está fuera de 0..{machine.state_count - 1}"
            )
        self.machine = machine
        self._table = table
        self.tape: Optional[Tape] = None
        self.head = 0
        self.state = machine.first_state_index
        self.status = Status.RUNNING
        self.steps = 0

    @property
    def table(self) -> TransitionTable:
        if self._table is None:
            self._table = compile_transitions(self.machine)
        return self._table

    @property
    def initialized(self) -> bool:
        return self.tape is not None

    def reset(self, tape: str) -> ExecutionSnapshot:
        """Reinicia la MT sobre una cinta nueva y descarta el progreso anterior."""

        ensure_valid_tape(tape, self.machine)
        # Se compila antes de tocar el estado: una tabla inválida deja el motor intacto.
        table = self.table
        self.tape = Tape.from_string(tape, self.machine.blank_symbol, self.machine.head_start)
        self.head = self.tape.head_start
        self.state = self.machine.first_state_index
        self.steps = 0
        self.status = Status.ACCEPTED if self.machine.is_final(self.state) else Status.RUNNING
        logger.debug("Reinicio con %r (%d celdas compiladas), cabeza=%d", tape, len(table), self.head)
        return self.snapshot()

    def step(self) -> ExecutionSnapshot:
        """Avanza exactamente una transición."""

        if self.tape is None:
            raise InvalidOperation("El motor no tiene cinta; llame primero a reset().")
        if self.status.terminal:
            raise InvalidOperation(f"La MT ya se detuvo ({REASONS[self.status]}).")

        symbol = self.tape.read(self.head)
        action = self.table.lookup(self.state, symbol)
        if isinstance(action, Move):
            self.tape.write(self.head, action.write_symbol)
            self.state = action.next_state
            self.head += action.direction.value
            self.steps += 1
            if self.machine.is_final(self.state):
                self.status = Status.ACCEPTED
        elif self.machine.is_final(self.state):
            self.status = Status.ACCEPTED
        else:
            self.status = Status.REJECTED
        return self.snapshot()

    def step_with_tape(self, tape: str) -> ExecutionSnapshot:
        self.reset(tape)
        if self.status.terminal:
            return self.snapshot()
        return self.step()

    def run_to_completion(self, cancel_check: Optional[CancelCheck] = None) -> ProgramResult:
        """Ejecuta pasos hasta que la MT se detenga o ``cancel_check`` devuelva verdadero.

        La comprobación se hace antes de cada paso: una ejecución cancelada
        informa el último paso completado, con estado ``TIMED_OUT``.
        """

        if self.tape is None:
            raise InvalidOperation("El motor no tiene cinta; llame primero a reset().")
        while not self.status.terminal:
            if cancel_check is not None and cancel_check():
                self.status = Status.TIMED_OUT
                logger.info("Ejecución cancelada tras %d pasos", self.steps)
                break
            self.step()
        return self.result()

    def is_head_beyond_written_tape(self) -> bool:
        return self.tape is None or self.tape.is_beyond_window(self.head)

    def snapshot(self) -> ExecutionSnapshot:
        if self.tape is None:
            raise InvalidOperation("El motor no tiene cinta; llame primero a reset().")
        return ExecutionSnapshot(
            tape=self.tape.render(),
            head=self.head,
            state=self.state,
            status=self.status,
            steps=self.steps,
        )

    def result(self) -> ProgramResult:
        if self.tape is None:
            raise InvalidOperation("El motor no tiene cinta; llame primero a reset().")
        column, row = self.machine.table_coordinates(self.state, self.tape.read(self.head))
        return ProgramResult(
            tape=self.tape.render(),
            state=self.state,
            state_label=state_label(self.state),
            head=self.head,
            column=column,
            row=row,
            status=self.status,
            steps=self.steps,
        )
