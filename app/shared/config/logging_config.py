# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Configuración centralizada de logging para Vitrina (dictConfig).

Formatos:
- plain:  una línea sin hora (tests, salida capturada)
- pretty: hora + nivel alineado (desarrollo local)
- json:   python-json-logger, con `service` y `env` fijos en cada registro
          y los campos de `extra=` (request_id, provider, outcome...) como
          claves de primer nivel

El logger `app.modules.payments` nunca baja de INFO: las decisiones del
ledger (RECORDED, DISCARDED, ...) son auditoría y deben quedar siempre.

Autor: Vitrina
Fecha: 2026-09-03
"""

import logging
import logging.config
from typing import Any, Dict, Literal

LevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

AUDIT_LOGGER = "app.modules.payments"


def _audit_level(level: str) -> str:
    return level if logging.getLevelName(level) < logging.INFO else "INFO"


def build_logging_config(
    level: LevelName = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
    *,
    service: str = "vitrina-backend",
    env: str = "development",
) -> Dict[str, Any]:
    level = level.upper()
    formatters: Dict[str, Dict[str, Any]] = {
        "plain": {"format": "%(levelname)s [%(name)s]: %(message)s"},
        "pretty": {
            "format": "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            "datefmt": "%H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "rename_fields": {"levelname": "level", "asctime": "ts"},
            "static_fields": {"service": service, "env": env},
        },
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": fmt if fmt in formatters else "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            AUDIT_LOGGER: {"level": _audit_level(level)},
            # El SQL lo controla DB_ECHO_SQL, no el nivel global
            "sqlalchemy.engine": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
            "stripe": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": level},
    }


def setup_logging(
    level: LevelName = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
    *,
    service: str = "vitrina-backend",
    env: str = "development",
) -> None:
    """Aplica `build_logging_config` al proceso."""
    logging.config.dictConfig(build_logging_config(level, fmt, service=service, env=env))


__all__ = ["setup_logging", "build_logging_config", "AUDIT_LOGGER"]

# Fin del archivo backend/app/shared/config/logging_config.py
