"""Configuración de logging estructurado (structlog).

Por qué structlog:
- Eventos con contexto (operación, URL, estado HTTP) en vez de strings sueltos.
- JSON en producción y salida legible en desarrollo con el mismo código.

La rotación de ficheros queda fuera: si se indica `log_file` se usa un
`FileHandler` simple y la rotación es cosa del entorno (logrotate, etc.).

La aplicación que embebe el cliente debe llamar a `setup_logging`. Hasta
entonces rige un default silencioso (WARNING o superior, a stderr) para no
volcar eventos de depuración en la salida estándar del anfitrión.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

from core.config import ClientSettings

LOGGER_NAMESPACE = "biosdk_client"


def configure_default_logging() -> None:
    """Default silencioso; no pisa una configuración previa de structlog."""

    if structlog.is_configured():
        return
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> None:
    """Configura stdlib logging + structlog.

    Args:
        level: Nivel (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Fichero opcional; si es None se escribe en stderr.
        json_format: JSON (producción) o consola legible (desarrollo).
    """

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler: logging.Handler
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: ClientSettings) -> None:
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger estructurado bajo el namespace del cliente."""

    return structlog.get_logger(f"{LOGGER_NAMESPACE}.{name}")


configure_default_logging()
