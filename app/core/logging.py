# -*- coding: utf-8 -*-
"""
backend/app/core/logging.py

Punto de entrada de logging bajo `app.core`: toma nivel y formato de
los settings activos y delega en `app.shared.config.logging_config`.

Autor: Vitrina
Fecha: 2026-09-03
"""

from typing import Optional

from app.shared.config.logging_config import setup_logging
from app.shared.config.settings_base import BaseAppSettings


def configure_logging(settings: Optional[BaseAppSettings] = None) -> None:
    """Configura logging con LOG_LEVEL / LOG_FORMAT del entorno activo."""
    if settings is None:
        from app.shared.config.config_loader import get_settings
        settings = get_settings()
    setup_logging(
        level=settings.log_level,
        fmt=settings.log_format,
        service=settings.app_name.lower(),
        env=settings.python_env,
    )

# Fin del archivo backend/app/core/logging.py
