"""JSON logging for the PayHub backend."""
from __future__ import annotations

import logging

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "payhub-backend"

# Per-request chatter from these libraries drowns the reconciliation logs.
_NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler.executors.default")


def setup_logging(level: str = "INFO") -> None:
    """Send every record to stderr as one JSON object per line.

    Context passed through ``extra=`` (topic, resource_id, referencia...)
    becomes top-level keys of the JSON document.
    """

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            static_fields={"service": SERVICE_NAME},
        )
    )
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["SERVICE_NAME", "setup_logging", "get_logger"]
