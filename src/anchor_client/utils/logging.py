"""Logging setup shared by the library and the command line."""

import logging
import sys
from typing import TextIO

from pythonjsonlogger import jsonlogger

# Transport libraries whose debug output drowns the client's own records
NOISY_LOGGERS = ("urllib3", "requests")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """
    Configure root logging for Anchor Client.

    Records go to stderr by default so command output on stdout stays
    machine-readable. JSON records carry a static ``service`` field.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type (json or text)
        stream: Destination stream (defaults to stderr)

    Raises:
        ValueError: For an unknown level name
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if log_format.lower() == "json":
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level"},
            static_fields={"service": "anchor-client"},
            timestamp=True,
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler.setFormatter(formatter)
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name (typically ``__name__``)."""
    return logging.getLogger(name)
