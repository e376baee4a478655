from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List

from .config_loader import Definition, load_definition
from .errors import TuringSimError
from .log import get_logger
from .machine import ExecutionEngine, ExecutionSnapshot, ProgramResult, Status
from .runner import RunController
from .validator import formal_description, should_simulation_be_enabled


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulador de máquinas de Turing de una cinta definidas en YAML",
    )
    parser.add_argument("config", type=Path, help="Ruta del archivo YAML con la definición de la MT")
    parser.add_argument(
        "--string",
        "-s",
        dest="strings",
        action="append",
        help="Cadena de entrada a simular. Se puede repetir",
    )
    parser.add_argument(
        "--deadline-ms",
        type=int,
        default=None,
        help="Tiempo límite de cada ejecución completa, en milisegundos",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Ejecuta paso a paso e imprime cada descripción instantánea",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=10_000,
        help="Límite de pasos para --trace",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Imprime los resultados en JSON",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Imprime la descripción formal y el estado de la configuración, y termina",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Escribe también los logs en este archivo")
    parser.add_argument("--verbose", "-v", action="store_true", help="Registra cada ejecución con nivel INFO")
    return parser


def trace(definition: Definition, tape: str, max_steps: int) -> List[ExecutionSnapshot]:
    engine = ExecutionEngine(definition.machine)
    snapshots = [engine.reset(tape)]
    while not engine.status.terminal and engine.steps < max_steps:
        snapshots.append(engine.step())
    return snapshots


def run_all(definition: Definition, strings: List[str], deadline_ms: int) -> Dict[str, ProgramResult]:
    results: Dict[str, ProgramResult] = {}
    with RunController(definition.machine) as controller:
        for tape in strings:
            results[tape] = controller.start_run(tape, deadline_ms).result()
    return results


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger("turing_sim", args.log_file, logging.INFO if args.verbose else logging.WARNING)

    try:
        definition = load_definition(args.config)
    except (OSError, ValueError) as exc:
        logger.error("No se pudo cargar %s: %s", args.config, exc)
        return 2

    if args.status:
        ready, status_text = should_simulation_be_enabled(definition.machine)
        print(formal_description(definition.machine))
        print(status_text)
        return 0 if ready else 1

    strings = args.strings if args.strings is not None else definition.simulation_strings
    if not strings:
        parser.error("No hay cadenas de entrada. Añada 'simulation.strings' al YAML o use --string")
    deadline_ms = args.deadline_ms if args.deadline_ms is not None else definition.deadline_ms

    try:
        if args.trace:
            traces = {tape: trace(definition, tape, args.max_steps) for tape in strings}
        else:
            results = run_all(definition, strings, deadline_ms)
    except (TuringSimError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    if args.trace:
        for tape, snapshots in traces.items():
            header = f"Cadena {tape!r}"
            print(header)
            print("=" * len(header))
            for snapshot in snapshots:
                print(snapshot.format())
            last = snapshots[-1]
            if last.status is Status.RUNNING:
                print(f"Detenido tras {last.steps} pasos (--max-steps)")
            print()
        return 0

    if args.json_output:
        payload = {tape: result.to_dict() for tape, result in results.items()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for tape, result in results.items():
        header = f"Cadena {tape!r}"
        print("=" * len(header))
        print(header)
        print("=" * len(header))
        if result.status is Status.TIMED_OUT:
            print(f"Tiempo agotado tras {deadline_ms} ms ({result.steps} pasos)")
        print(f"Resultado: {result.status.value} ({result.reason})")
        print(f"Cinta de salida: {result.tape!r}")
        print(f"Estado final: {result.state_label}")
        print(f"Cabeza: {result.head}")
        print(f"Pasos: {result.steps}")
        print()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
