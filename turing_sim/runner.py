from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .definition import TuringMachine
from .errors import RunInProgress
from .machine import ExecutionEngine, ProgramResult

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_MS = 1000
MAX_DEADLINE_MS = 1_000_000


class CancellationToken:
    """Bandera compartida por una ejecución y su temporizador. Una vez activada no se desactiva."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self._event.is_set()


class RunHandle:
    """Ejecución completa en segundo plano."""

    def __init__(self, future: "Future[ProgramResult]", token: CancellationToken) -> None:
        self._future = future
        self._token = token

    def force_cancel(self) -> None:
        """Hace que la siguiente comprobación de cancelación observe ``True``."""

        self._token.cancel()

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> ProgramResult:
        return self._future.result(timeout=timeout)

    def add_done_callback(self, callback: Callable[[ProgramResult], None]) -> None:
        """Llama a ``callback`` con el resultado cuando termina la ejecución.

        Si la ejecución falló, el error se registra y ``callback`` no se llama.
        """

        def deliver(future: "Future[ProgramResult]") -> None:
            if future.cancelled():
                logger.warning("La ejecución fue cancelada antes de empezar")
                return
            error = future.exception()
            if error is not None:
                logger.error("La ejecución terminó con un error: %s", error, exc_info=error)
                return
            callback(future.result())

        self._future.add_done_callback(deliver)


class RunController:
    """Ejecuta una MT hasta el final fuera del hilo del llamador, con tiempo límite.

    Solo hay una ejecución en curso a la vez; un segundo :meth:`start_run`
    mientras la primera sigue activa lanza :class:`RunInProgress`.
    """

    def __init__(self, machine: TuringMachine) -> None:
        self.machine = machine
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="turing-run")
        self._lock = threading.Lock()
        self._active: Optional[RunHandle] = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._active is not None and not self._active.done()

    def start_run(self, tape: str, deadline_ms: int = DEFAULT_DEADLINE_MS) -> RunHandle:
        if isinstance(deadline_ms, bool) or not isinstance(deadline_ms, int):
            raise ValueError(f"deadline_ms debe ser un entero, se recibió {deadline_ms!r}")
        if not 1 <= deadline_ms <= MAX_DEADLINE_MS:
            raise ValueError(f"deadline_ms debe estar entre 1..{MAX_DEADLINE_MS}, se recibió {deadline_ms}")

        with self._lock:
            if self._active is not None and not self._active.done():
                logger.warning("No se inicia la ejecución de %r: ya hay otra en curso", tape)
                raise RunInProgress("Ya hay una ejecución en curso para esta MT.")

            # Los errores de validación y compilación salen aquí, en el hilo del llamador.
            engine = ExecutionEngine(self.machine)
            engine.reset(tape)

            token = CancellationToken()
            timer = threading.Timer(deadline_ms / 1000.0, self._expire, args=(token, deadline_ms))
            timer.daemon = True
            future = self._executor.submit(engine.run_to_completion, token)
            handle = RunHandle(future, token)
            future.add_done_callback(lambda _: timer.cancel())
            self._active = handle
            timer.start()

        logger.info("Ejecución iniciada con %r y límite de %d ms", tape, deadline_ms)
        return handle

    def force_cancel(self, handle: RunHandle) -> None:
        handle.force_cancel()

    @staticmethod
    def _expire(token: CancellationToken, deadline_ms: int) -> None:
        logger.warning("Se agotó el límite de %d ms, cancelando la ejecución", deadline_ms)
        token.cancel()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._active is not None:
                self._active.force_cancel()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "RunController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
