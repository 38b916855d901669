"""Configurazione logging applicativo (JSON strutturato o testo semplice)."""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from .config import settings


class PerizieJsonFormatter(JsonFormatter):
    """Aggiunge i campi standard a ogni record JSON."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["name"] = record.name
        log_record["service"] = "perizie-backend"
        if "message" not in log_record:
            log_record["message"] = record.getMessage()


def configure_logging(level: str | None = None, structured: bool | None = None) -> None:
    """Installa un handler su stdout per il root logger, rimuovendo quelli esistenti."""
    level_name = (level or settings.log_level).upper()
    use_json = settings.structured_logging if structured is None else structured

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level_name)
    if use_json:
        formatter: logging.Formatter = PerizieJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.info(
        "Logging configurato",
        extra={"format": "json" if use_json else "standard", "level": level_name},
    )
