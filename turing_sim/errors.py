from __future__ import annotations


class TuringSimError(Exception):
    """Clase base de todos los errores del simulador."""


class ConfigError(TuringSimError, ValueError):
    """La definición de la MT no se puede compilar en una tabla de transiciones."""

    def __init__(self, message: str, state: int | None = None, symbol: str | None = None) -> None:
        super().__init__(message)
        self.state = state
        self.symbol = symbol


class ValidationFailure(TuringSimError, ValueError):
    """La cinta de entrada fue rechazada antes de empezar la ejecución."""


class InvalidOperation(TuringSimError, RuntimeError):
    """El motor se usó de una forma que su estado actual no permite."""


class RunInProgress(InvalidOperation):
    """Ya hay una ejecución completa en curso para esta máquina."""
