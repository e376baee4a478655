"""Configuración de logging compartida por el motor, el controlador y la CLI."""

from __future__ import annotations

import logging
from pathlib import Path

FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_logger(name: str, file_path: str | Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Devuelve el logger configurado; añade un archivo si se indica ``file_path``.

    Llamadas repetidas con la misma ruta reutilizan el manejador existente.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
    if file_path:
        target = Path(file_path).resolve()
        attached = any(
            isinstance(existing, logging.FileHandler) and Path(existing.baseFilename) == target
            for existing in logger.handlers
        )
        if not attached:
            target.parent.mkdir(parents=True, exist_ok=True)
            f_handler = logging.FileHandler(target, encoding="utf-8")
            f_handler.setFormatter(logging.Formatter(FORMAT))
            logger.addHandler(f_handler)
    logger.setLevel(level)
    return logger
